from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from blogapi.schemas import ReactionRequest
from blogapi.services.blog_service import (
    BlogError,
    BlogService,
    ContentRequiredError,
    ImageUpload,
    InvalidIdError,
    InvalidReactionError,
    PermissionDeniedError,
    PostNotFoundError,
)
from blogapi.services.session_service import require_user_id
from blogapi.services.storage_service import (
    ImageTooLargeError,
    InvalidImageError,
    StorageClient,
    StorageError,
    get_storage_client,
)

router = APIRouter(prefix="/blogs", tags=["blogs"], dependencies=[Depends(require_user_id)])

_STATUS_BY_ERROR = (
    (InvalidIdError, 400),
    (ContentRequiredError, 400),
    (InvalidReactionError, 400),
    (InvalidImageError, 400),
    (ImageTooLargeError, 413),
    (PermissionDeniedError, 403),
    (PostNotFoundError, 404),
    (StorageError, 502),
)


def _http_error(exc: Exception) -> HTTPException:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(code, str(exc))
    return HTTPException(400, str(exc))


def get_blog_service(storage: StorageClient = Depends(get_storage_client)) -> BlogService:
    return BlogService(storage)


async def _read_upload(file: UploadFile | None) -> ImageUpload | None:
    if not file or not file.filename:
        return None
    data = await file.read()
    return ImageUpload(data=data, content_type=file.content_type, filename=file.filename)


@router.get("")
def list_blogs(author: str | None = None, service: BlogService = Depends(get_blog_service)):
    try:
        return {"blogs": service.list_posts(author)}
    except BlogError as exc:
        raise _http_error(exc)


@router.get("/{blog_id}")
def get_blog(blog_id: str, service: BlogService = Depends(get_blog_service)):
    try:
        return {"blog": service.get_post(blog_id)}
    except BlogError as exc:
        raise _http_error(exc)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_blog(
    content: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    user_id: str = Depends(require_user_id),
    service: BlogService = Depends(get_blog_service),
):
    try:
        image = await _read_upload(avatar)
        blog = service.create_post(user_id, content, image)
    except (BlogError, StorageError) as exc:
        raise _http_error(exc)
    return {"message": "blog created successfully", "blog": blog}


@router.put("/{blog_id}")
async def update_blog(
    blog_id: str,
    request: Request,
    content: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    user_id: str = Depends(require_user_id),
    service: BlogService = Depends(get_blog_service),
):
    # Form() maps a blank field to None, which would read as "content not sent".
    if content is None and "content" in await request.form():
        content = ""
    try:
        image = await _read_upload(avatar)
        blog = service.update_post(blog_id, user_id, content, image)
    except (BlogError, StorageError) as exc:
        raise _http_error(exc)
    return {"message": "blog updated successfully!", "blog": blog}


@router.delete("/{blog_id}")
def delete_blog(
    blog_id: str,
    user_id: str = Depends(require_user_id),
    service: BlogService = Depends(get_blog_service),
):
    try:
        service.delete_post(blog_id, user_id)
    except BlogError as exc:
        raise _http_error(exc)
    return {"message": "blog deleted successfully!"}


@router.post("/{blog_id}/reactions")
def react_to_blog(
    blog_id: str,
    payload: ReactionRequest,
    user_id: str = Depends(require_user_id),
    service: BlogService = Depends(get_blog_service),
):
    try:
        reactions = service.react(blog_id, user_id, payload.type)
    except (BlogError, InvalidReactionError) as exc:
        raise _http_error(exc)
    return {"message": "added successfully", "reactions": reactions}

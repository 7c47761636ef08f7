from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from blogapi.core.rate_limiter import rate_limit_ip
from blogapi.services.storage_service import (
    ImageTooLargeError,
    InvalidImageError,
    StorageClient,
    StorageError,
    get_storage_client,
    store_image,
)

router = APIRouter(tags=["uploads"])

UPLOAD_FOLDER = "images"


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    image: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    rate_limit_ip(request, "upload", limit=30, window_seconds=60)
    data = await image.read()
    try:
        stored = store_image(storage, data, image.content_type, UPLOAD_FOLDER)
    except ImageTooLargeError as exc:
        raise HTTPException(413, str(exc))
    except InvalidImageError as exc:
        raise HTTPException(400, str(exc))
    except StorageError as exc:
        raise HTTPException(502, str(exc))
    return stored.as_dict()

"""Like/dislike toggling rules for blog posts."""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class ReactionKind(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class InvalidReactionError(ValueError):
    """Raised when a reaction type other than like/dislike is requested."""


def parse_reaction_kind(value: Any) -> ReactionKind:
    """Exact match on "like" or "dislike"; case and padding are not forgiven."""
    if not isinstance(value, str):
        raise InvalidReactionError("wrong reaction type")
    try:
        return ReactionKind(value)
    except ValueError:
        raise InvalidReactionError("wrong reaction type") from None


def _without(ids: Iterable[str], user_id: str) -> list[str]:
    return [item for item in ids if item != user_id]


def apply_reaction(
    likes: Iterable[str],
    dislikes: Iterable[str],
    user_id: str,
    kind: ReactionKind,
) -> tuple[list[str], list[str]]:
    """
    Toggle ``kind`` for ``user_id`` and return new ``(likes, dislikes)`` lists.

    Reacting with the kind the user already holds removes it. Any other
    reaction is appended and clears the opposite one, so a user never sits in
    both lists. Input sequences are left untouched.
    """
    likes = list(likes or [])
    dislikes = list(dislikes or [])
    if kind is ReactionKind.LIKE:
        chosen, opposite = likes, dislikes
    else:
        chosen, opposite = dislikes, likes

    if user_id in chosen:
        chosen = _without(chosen, user_id)
    else:
        chosen = chosen + [user_id]
        opposite = _without(opposite, user_id)

    if kind is ReactionKind.LIKE:
        return chosen, opposite
    return opposite, chosen

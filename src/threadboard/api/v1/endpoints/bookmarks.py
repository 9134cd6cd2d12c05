"""Bookmark endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from threadboard.api.v1.dependencies import CurrentUserDep, SessionDep
from threadboard.models import Bookmark
from threadboard.schemas.mark import BookmarkRequest, BookmarkResponse, BookmarkStatusResponse
from threadboard.services.marks import is_bookmarked, remove_bookmark, upsert_bookmark

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("/", response_model=BookmarkResponse)
async def save_bookmark(
    payload: BookmarkRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Bookmark:
    """Bookmark a discussion, or switch the mode of an existing bookmark."""
    return upsert_bookmark(db, current_user.id, payload.discussion_id, payload.save_mode)


@router.delete("/")
async def delete_bookmark(
    current_user: CurrentUserDep,
    db: SessionDep,
    discussion_id: int = Query(...),
) -> dict[str, str]:
    """Remove the caller's bookmark on a discussion."""
    remove_bookmark(db, current_user.id, discussion_id)
    return {"message": "Bookmark removed"}


@router.get("/check", response_model=BookmarkStatusResponse)
async def check_bookmark(
    current_user: CurrentUserDep,
    db: SessionDep,
    discussion_id: int = Query(...),
) -> BookmarkStatusResponse:
    """Report whether, and how, the caller bookmarked a discussion."""
    bookmark = is_bookmarked(db, current_user.id, discussion_id)
    if bookmark is None:
        return BookmarkStatusResponse(bookmarked=False)
    return BookmarkStatusResponse(bookmarked=True, save_mode=bookmark.save_mode)

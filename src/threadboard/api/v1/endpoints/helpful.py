"""Helpful-mark endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from threadboard.api.v1.dependencies import CurrentUserDep, NotifierDep, SessionDep
from threadboard.models import HelpfulMark
from threadboard.schemas.mark import HelpfulMarkRequest, HelpfulMarkResponse, MarkStatusResponse
from threadboard.services.marks import MarkTarget, apply_mark, is_marked, remove_mark

router = APIRouter(prefix="/helpful", tags=["helpful"])


@router.post("/", response_model=HelpfulMarkResponse, status_code=status.HTTP_201_CREATED)
async def mark_helpful(
    payload: HelpfulMarkRequest,
    response: Response,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
) -> HelpfulMark:
    """Mark a discussion or reply as helpful.

    Repeating the call is harmless: the existing mark comes back with 200
    and the counter does not move.
    """
    target = MarkTarget.from_fields(payload.discussion_id, payload.reply_id)
    mark, created = apply_mark(db, current_user.id, target)
    if created:
        await notifier.notify_on_helpful_mark(db, mark)
    else:
        response.status_code = status.HTTP_200_OK
    return mark


@router.delete("/")
async def unmark_helpful(
    current_user: CurrentUserDep,
    db: SessionDep,
    discussion_id: int | None = Query(None),
    reply_id: int | None = Query(None),
) -> dict[str, str]:
    """Withdraw the caller's helpful mark."""
    remove_mark(db, current_user.id, MarkTarget.from_fields(discussion_id, reply_id))
    return {"message": "Helpful mark removed"}


@router.get("/check", response_model=MarkStatusResponse)
async def check_helpful(
    current_user: CurrentUserDep,
    db: SessionDep,
    discussion_id: int | None = Query(None),
    reply_id: int | None = Query(None),
) -> MarkStatusResponse:
    """Report whether the caller has marked the target."""
    target = MarkTarget.from_fields(discussion_id, reply_id)
    return MarkStatusResponse(marked=is_marked(db, current_user.id, target))

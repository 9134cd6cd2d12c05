"""Discussion listings for the home feed."""

from __future__ import annotations

import enum
import logging

from sqlalchemy.orm import Session

from threadboard.core.settings import settings
from threadboard.models import Discussion, User
from threadboard.repositories import DiscussionRepository, UserRepository
from threadboard.schemas.discussion import DiscussionView
from threadboard.schemas.user import UserPublic

logger = logging.getLogger(__name__)


class FeedFilter(str, enum.Enum):
    """Named orderings and subsets of the discussion feed."""

    RECENT = "recent"
    HELPFUL = "helpful"
    MY = "my"
    BOOKMARKS = "bookmarks"


def to_discussion_view(discussion: Discussion, author: User) -> DiscussionView:
    """Pair a discussion with the public view of its author."""
    return DiscussionView.model_validate(
        {
            "id": discussion.id,
            "title": discussion.title,
            "content": discussion.content,
            "user_id": discussion.user_id,
            "image_paths": list(discussion.image_paths or []),
            "captions": list(discussion.captions or []),
            "helpful_count": discussion.helpful_count or 0,
            "created_at": discussion.created_at,
            "author": UserPublic.model_validate(author),
        }
    )


def _with_authors(db: Session, discussions: list[Discussion]) -> list[DiscussionView]:
    authors = UserRepository(db).get_many(d.user_id for d in discussions)
    views: list[DiscussionView] = []
    for discussion in discussions:
        author = authors.get(discussion.user_id)
        if author is None:
            logger.warning(
                "Skipping discussion %s: author %s not found",
                discussion.id,
                discussion.user_id,
            )
            continue
        views.append(to_discussion_view(discussion, author))
    return views


def list_discussions(
    db: Session,
    feed_filter: FeedFilter | str = FeedFilter.RECENT,
    acting_user_id: int | None = None,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> list[DiscussionView]:
    """Return one page of the feed, each discussion paired with its author.

    ``my`` and ``bookmarks`` need a caller; anonymous requests for them get
    an empty list.

    Raises:
        ValueError: If ``feed_filter`` names no known filter.
    """
    feed_filter = FeedFilter(feed_filter)
    page_size = limit if limit is not None else settings.feed_page_size
    repo = DiscussionRepository(db)

    if feed_filter is FeedFilter.HELPFUL:
        discussions = repo.list_most_helpful(limit=page_size, offset=offset)
    elif feed_filter is FeedFilter.MY:
        if acting_user_id is None:
            return []
        discussions = repo.list_recent(limit=page_size, offset=offset, owner_id=acting_user_id)
    elif feed_filter is FeedFilter.BOOKMARKS:
        if acting_user_id is None:
            return []
        discussions = repo.list_bookmarked(acting_user_id, limit=page_size, offset=offset)
    else:
        discussions = repo.list_recent(limit=page_size, offset=offset)

    return _with_authors(db, discussions)

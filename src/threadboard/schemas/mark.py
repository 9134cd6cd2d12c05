"""Helpful-mark and bookmark Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from threadboard.models.mark import SaveMode


class HelpfulMarkRequest(BaseModel):
    """Target of a helpful mark: exactly one of discussion_id or reply_id."""

    discussion_id: int | None = Field(None, description="Discussion being marked")
    reply_id: int | None = Field(None, description="Reply being marked")

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "HelpfulMarkRequest":
        if (self.discussion_id is None) == (self.reply_id is None):
            raise ValueError("Provide exactly one of discussion_id or reply_id")
        return self


class HelpfulMarkResponse(BaseModel):
    """Stored helpful mark."""

    id: int
    user_id: int
    discussion_id: int | None
    reply_id: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MarkStatusResponse(BaseModel):
    """Whether the caller has marked the target."""

    marked: bool


class BookmarkRequest(BaseModel):
    """Bookmark a discussion, or change how an existing bookmark follows it."""

    discussion_id: int
    save_mode: SaveMode = Field(
        SaveMode.TRACK,
        description="'current' snapshots the thread, 'updates' keeps tracking it",
    )


class BookmarkResponse(BaseModel):
    """Stored bookmark."""

    id: int
    user_id: int
    discussion_id: int
    save_mode: SaveMode
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookmarkStatusResponse(BaseModel):
    """Whether the caller has bookmarked the discussion."""

    bookmarked: bool
    save_mode: SaveMode | None = None

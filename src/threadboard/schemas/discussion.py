"""Discussion and reply Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserPublic


class ImageFields(BaseModel):
    """Image URLs returned by the blob store with their captions."""

    image_paths: list[str] = Field(default_factory=list, description="Uploaded image URLs")
    captions: list[str] = Field(default_factory=list, description="Caption per image URL")


class DiscussionCreate(ImageFields):
    """Schema for starting a discussion."""

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1, max_length=20000)


class DiscussionUpdate(BaseModel):
    """Partial update of a discussion; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1, max_length=20000)
    image_paths: list[str] | None = None
    captions: list[str] | None = None


class DiscussionResponse(BaseModel):
    """Discussion fields as stored."""

    id: int
    title: str
    content: str
    user_id: int
    image_paths: list[str]
    captions: list[str]
    helpful_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscussionView(DiscussionResponse):
    """Feed entry: a discussion paired with its author."""

    author: UserPublic


class ReplyCreate(ImageFields):
    """Schema for posting a reply."""

    discussion_id: int
    content: str = Field(..., min_length=1, max_length=20000)
    parent_id: int | None = Field(None, description="Reply being answered; omit for top level")


class ReplyUpdate(BaseModel):
    """Partial update of a reply."""

    content: str | None = Field(None, min_length=1, max_length=20000)
    image_paths: list[str] | None = None
    captions: list[str] | None = None


class ReplyResponse(BaseModel):
    """Reply fields as stored."""

    id: int
    content: str
    user_id: int
    discussion_id: int
    parent_id: int | None
    image_paths: list[str]
    captions: list[str]
    helpful_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReplyNodeResponse(ReplyResponse):
    """Reply with its author and nested answers."""

    author: UserPublic
    children: list[ReplyNodeResponse] = Field(default_factory=list)


class DiscussionDetail(DiscussionView):
    """Full discussion read: author, reply forest and presentation limits."""

    replies: list[ReplyNodeResponse]
    max_reply_depth: int = Field(..., description="Depth beyond which clients hide reply buttons")


ReplyNodeResponse.model_rebuild()

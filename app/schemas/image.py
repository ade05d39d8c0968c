# app/schemas/image.py
from datetime import datetime

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field


class GalleryReadModel(SQLModel):
    """
    Shared config for response models.

    Fields are declared in snake_case and serialized in camelCase
    (imageUrl, createdAt, ...), which is what the web client reads.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CommentRead(GalleryReadModel):
    """
    A single comment as returned by the API.
    """

    id: int
    text: str
    timestamp: datetime
    image_id: int = Field(alias="ImageId")
    created_at: datetime
    updated_at: datetime


class ImageRead(GalleryReadModel):
    """
    Image record as returned right after upload.
    """

    id: int
    name: str
    email: str
    description: str
    image_url: str
    likes: int
    created_at: datetime
    updated_at: datetime


class ImageWithComments(ImageRead):
    """
    Image record with its comments eagerly attached (GET /images).
    """

    comments: list[CommentRead] = Field(default_factory=list, alias="Comments")


class CommentCreate(SQLModel):
    """
    Payload for POST /images/{id}/comment.

    `text` is optional here so that a missing value is reported by the
    service with the same message as a blank one.
    """

    text: str | None = None


class LikeCount(SQLModel):
    """
    Response of POST /images/{id}/like.
    """

    likes: int

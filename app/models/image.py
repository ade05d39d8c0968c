# app/models/image.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.dialects import mysql
from sqlmodel import SQLModel, Field, Relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# MySQL DATETIME defaults to whole seconds; keep microseconds everywhere.
PreciseDateTime = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


def timestamp_column(index: bool = False) -> Column:
    return Column(PreciseDateTime, nullable=False, index=index)


class Image(SQLModel, table=True):
    """
    A photo submitted to the community gallery.

    - likes only changes through the atomic increment in ImageRepository.
    - Rows are never updated otherwise and never deleted via the API;
      deleting one removes its comments (DB cascade + ORM delete-orphan).
    """

    __tablename__ = "images"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        max_length=255,
        description="Display name of the uploader",
    )

    email: str = Field(
        max_length=255,
        description="Contact email (format not validated)",
    )

    description: str = Field(
        max_length=600,
        description="Photo description, at most 600 chars (enforced by client)",
    )

    image_url: str = Field(
        max_length=1024,
        description="Reference to the stored binary (path or public URL)",
    )

    likes: int = Field(
        default=0,
        ge=0,
        description="Aggregate like count",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(index=True),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Last modification timestamp (UTC)",
    )

    comments: list["Comment"] = Relationship(
        back_populates="image",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "[Comment.timestamp, Comment.id]",
        },
    )


class Comment(SQLModel, table=True):
    """
    Text annotation attached to exactly one image. Immutable.
    """

    __tablename__ = "comments"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    text: str = Field(
        sa_column=Column(Text, nullable=False),
    )

    timestamp: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="When the comment was posted (UTC)",
    )

    image_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("images.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())

    image: Image | None = Relationship(back_populates="comments")

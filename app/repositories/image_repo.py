# app/repositories/image_repo.py
from sqlalchemy import update
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.models.image import Comment, Image, utcnow


class ImageRepository:
    """
    Data access layer for Image & Comment.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Images -----

    def get_by_id(self, session: Session, image_id: int) -> Image | None:
        return session.get(Image, image_id)

    def list_with_comments(self, session: Session) -> list[Image]:
        """
        All images, newest first, each with its comments loaded.
        """
        stmt = (
            select(Image)
            .options(selectinload(Image.comments))
            .order_by(Image.created_at.desc(), Image.id.desc())
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, image: Image) -> Image:
        session.add(image)
        session.commit()
        session.refresh(image)
        return image

    def increment_likes(self, session: Session, image_id: int) -> int | None:
        """
        Add exactly one like in a single UPDATE and return the new count.

        The row stays locked by the UPDATE until commit, so the value read
        back is the one this call produced. Returns None (and changes
        nothing) when the image does not exist.
        """
        stmt = (
            update(Image)
            .where(Image.id == image_id)
            .values(likes=Image.likes + 1, updated_at=utcnow())
        )
        result = session.execute(stmt)
        if result.rowcount == 0:
            session.rollback()
            return None

        likes = session.exec(select(Image.likes).where(Image.id == image_id)).one()
        session.commit()
        return likes

    # ----- Comments -----

    def list_comments(self, session: Session, image_id: int) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.image_id == image_id)
            .order_by(Comment.timestamp, Comment.id)
        )
        return list(session.exec(stmt).all())

    def create_comment(self, session: Session, comment: Comment) -> Comment:
        session.add(comment)
        session.commit()
        session.refresh(comment)
        return comment

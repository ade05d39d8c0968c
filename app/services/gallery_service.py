# app/services/gallery_service.py
import logging
from pathlib import PurePath

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.errors import NotFoundError, PersistenceError, ValidationError
from app.core.storage_utils import BlobStorage, generate_filename
from app.models.image import Comment, Image
from app.repositories.image_repo import ImageRepository
from app.schemas.image import CommentRead, ImageRead, ImageWithComments, LikeCount

logger = logging.getLogger(__name__)

# Used when the uploaded filename carries no extension.
CONTENT_TYPE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class GalleryService:
    """
    Business logic for the community photo gallery.

    Responsibilities:
      - presence validation of upload and comment payloads
      - blob upload orchestration (store file, then row; undo file on failure)
      - mapping DB/storage failures to PersistenceError
      - shaping responses into read models
    """

    def __init__(self, repo: ImageRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _extension_for(filename: str | None, content_type: str | None) -> str:
        suffix = PurePath(filename or "").suffix.lower()
        if suffix:
            return suffix
        return CONTENT_TYPE_EXTENSIONS.get(content_type or "", "")

    def _require_image(self, session: Session, image_id: int) -> Image:
        image = self.repo.get_by_id(session, image_id)
        if image is None:
            raise NotFoundError("Image not found")
        return image

    # ----- Images -----

    def upload_image(
        self,
        session: Session,
        storage: BlobStorage,
        *,
        name: str | None,
        email: str | None,
        description: str | None,
        filename: str | None,
        content_type: str | None,
        file_bytes: bytes | None,
    ) -> ImageRead:
        """
        Store the binary, then create the Image row with likes=0.

        Rules:
          - name, email, description and the file are all required
          - no MIME / size checks here (client-side allow-list only)
          - if the row cannot be written, the stored file is removed
        """
        if (
            _blank(name)
            or _blank(email)
            or _blank(description)
            or file_bytes is None
            or _blank(filename)
        ):
            raise ValidationError("Please fill all fields and select an image.")

        stored_name = generate_filename(self._extension_for(filename, content_type))

        try:
            reference = storage.save(stored_name, file_bytes, content_type)
        except Exception:
            logger.exception("Upload failed: could not store %s", stored_name)
            raise PersistenceError("Upload failed.")

        try:
            image = self.repo.create(
                session,
                Image(
                    name=name,
                    email=email,
                    description=description,
                    image_url=reference,
                    likes=0,
                ),
            )
        except SQLAlchemyError:
            logger.exception("Upload failed: could not insert image row")
            session.rollback()
            # Best-effort cleanup of the orphaned file
            try:
                storage.delete(reference)
            except Exception:
                logger.warning("Could not remove orphaned upload %s", reference)
            raise PersistenceError("Upload failed.")

        logger.info("Image %s uploaded by %s", image.id, image.name)
        return ImageRead.model_validate(image)

    def list_images(self, session: Session) -> list[ImageWithComments]:
        """
        All images with their comments, most recent first.
        """
        try:
            images = self.repo.list_with_comments(session)
            return [ImageWithComments.model_validate(img) for img in images]
        except SQLAlchemyError:
            logger.exception("Failed to fetch images")
            raise PersistenceError("Failed to fetch images.")

    # ----- Likes -----

    def like_image(self, session: Session, image_id: int) -> LikeCount:
        """
        Increment the like counter by exactly one.

        Uses the database's atomic UPDATE; concurrent likes never lose updates.
        """
        try:
            likes = self.repo.increment_likes(session, image_id)
        except SQLAlchemyError:
            logger.exception("Failed to like image %s", image_id)
            session.rollback()
            raise PersistenceError("Failed to like image.")

        if likes is None:
            raise NotFoundError("Image not found")
        return LikeCount(likes=likes)

    # ----- Comments -----

    def add_comment(
        self,
        session: Session,
        image_id: int,
        text: str | None,
    ) -> list[CommentRead]:
        """
        Attach a comment to an image and return all of the image's comments.

        Rules:
          - blank text => 400 (checked before the image lookup)
          - unknown image => 404, nothing written
        """
        if _blank(text):
            raise ValidationError("Comment text is required.")

        try:
            image = self._require_image(session, image_id)
            self.repo.create_comment(session, Comment(text=text, image_id=image.id))
            comments = self.repo.list_comments(session, image.id)
            return [CommentRead.model_validate(c) for c in comments]
        except SQLAlchemyError:
            logger.exception("Failed to comment on image %s", image_id)
            session.rollback()
            raise PersistenceError("Failed to comment.")

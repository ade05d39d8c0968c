# app/routers/gallery.py
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session

from app.core.storage_utils import BlobStorage, get_storage
from app.database import get_session
from app.repositories.image_repo import ImageRepository
from app.schemas.image import (
    CommentCreate,
    CommentRead,
    ImageRead,
    ImageWithComments,
    LikeCount,
)
from app.services.gallery_service import GalleryService

router = APIRouter(tags=["Gallery"])

repo = ImageRepository()
service = GalleryService(repo)


@router.post("/upload", response_model=ImageRead)
def upload_image(
    name: str | None = Form(None),
    email: str | None = Form(None),
    description: str | None = Form(None),
    image: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    storage: BlobStorage = Depends(get_storage),
):
    """
    Submit a photo to the gallery.

    - multipart/form-data: name, email, description, image
    - Returns the stored Image record (likes = 0).
    """
    file_bytes = image.file.read() if image is not None else None
    return service.upload_image(
        session,
        storage,
        name=name,
        email=email,
        description=description,
        filename=image.filename if image is not None else None,
        content_type=image.content_type if image is not None else None,
        file_bytes=file_bytes,
    )


@router.get("/images", response_model=list[ImageWithComments])
def list_images(session: Session = Depends(get_session)):
    """
    List every image with its comments, newest first.
    """
    return service.list_images(session)


@router.post("/images/{image_id}/like", response_model=LikeCount)
def like_image(
    image_id: int,
    session: Session = Depends(get_session),
):
    """
    Add one like and return the new count.
    """
    return service.like_image(session, image_id)


@router.post("/images/{image_id}/comment", response_model=list[CommentRead])
def comment_on_image(
    image_id: int,
    payload: CommentCreate,
    session: Session = Depends(get_session),
):
    """
    Add a comment and return all comments of the image.
    """
    return service.add_comment(session, image_id, payload.text)

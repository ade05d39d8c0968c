# app/client/gallery_page.py
import itertools

from sqlmodel import SQLModel, Field

from app.client.gallery_client import GalleryApiClient, GalleryClientError

MAX_DESCRIPTION_LENGTH = 600

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif")

_notification_ids = itertools.count(1)


class Notification(SQLModel):
    """A transient, dismissible message shown to the user."""

    level: str  # "success" | "error"
    message: str
    id: int = Field(default_factory=lambda: next(_notification_ids))


class SelectedFile(SQLModel):
    filename: str
    content_type: str
    content: bytes


class GalleryImage(SQLModel):
    """Local copy of one image as rendered on the page."""

    id: int
    name: str
    email: str
    description: str
    image_url: str
    likes: int
    timestamp: str
    comments: list[dict] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "GalleryImage":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            description=data["description"],
            image_url=data["imageUrl"],
            likes=data["likes"],
            timestamp=data["createdAt"],
            comments=[
                {"text": c["text"], "timestamp": c["timestamp"]}
                for c in data.get("Comments") or []
            ],
        )


class GalleryPage:
    """
    State and behaviour of the gallery page.

    Mirrors what the web page keeps in component state: the upload form,
    the list of images (server copy), per-image comment drafts, upload
    progress and toast-style notifications. All server calls go through
    GalleryApiClient; local state is only replaced with what the server
    returns, never updated ahead of it.

    - Description input refuses edits past 600 characters.
    - Only allow-listed MIME types can be selected.
    - Submit is disabled while an upload is in flight.
    """

    def __init__(self, api: GalleryApiClient):
        self.api = api
        self.name = ""
        self.email = ""
        self.description = ""
        self.selected_file: SelectedFile | None = None
        self.images: list[GalleryImage] = []
        self.comment_drafts: dict[int, str] = {}
        self.is_uploading = False
        self.upload_progress = 0
        self.notifications: list[Notification] = []

    # ---- notifications ----

    def _notify(self, level: str, message: str) -> Notification:
        note = Notification(level=level, message=message)
        self.notifications.append(note)
        return note

    def dismiss(self, notification_id: int) -> None:
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    # ---- loading ----

    def load(self) -> None:
        try:
            self.images = [GalleryImage.from_api(img) for img in self.api.list_images()]
        except GalleryClientError as exc:
            self._notify("error", exc.message)

    # ---- form inputs ----

    def set_description(self, value: str) -> bool:
        """
        Apply an edit to the description field.

        Returns False (and keeps the previous value) when the edit would
        exceed MAX_DESCRIPTION_LENGTH.
        """
        if len(value) > MAX_DESCRIPTION_LENGTH:
            return False
        self.description = value
        return True

    @property
    def description_counter(self) -> str:
        return f"{len(self.description)}/{MAX_DESCRIPTION_LENGTH} characters"

    def select_file(self, filename: str, content_type: str, content: bytes) -> bool:
        if content_type not in ALLOWED_IMAGE_TYPES:
            self._notify(
                "error",
                "Please upload only image files (.jpg, .jpeg, .png, .gif)",
            )
            return False
        self.selected_file = SelectedFile(
            filename=filename, content_type=content_type, content=content
        )
        return True

    # ---- upload ----

    @property
    def can_submit(self) -> bool:
        return not self.is_uploading

    @property
    def submit_label(self) -> str:
        if self.is_uploading:
            return f"Uploading... {self.upload_progress}%"
        return "Upload Photo"

    def _on_progress(self, percent: int) -> None:
        self.upload_progress = percent

    def submit(self) -> GalleryImage | None:
        if self.is_uploading:
            return None

        if not (self.name and self.email and self.description and self.selected_file):
            self._notify("error", "Please fill in all fields and select an image")
            return None

        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            self._notify(
                "error",
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
            )
            return None

        self.is_uploading = True
        self.upload_progress = 0
        try:
            data = self.api.upload_image(
                name=self.name,
                email=self.email,
                description=self.description,
                filename=self.selected_file.filename,
                content=self.selected_file.content,
                content_type=self.selected_file.content_type,
                on_progress=self._on_progress,
            )
        except GalleryClientError as exc:
            self._notify("error", exc.message)
            return None
        finally:
            self.is_uploading = False
            self.upload_progress = 0

        image = GalleryImage.from_api(data)
        self.images = [image] + self.images
        self._notify("success", "Image uploaded successfully!")
        self.name = self.email = self.description = ""
        self.selected_file = None
        return image

    # ---- likes & comments ----

    def _find(self, image_id: int) -> GalleryImage | None:
        return next((img for img in self.images if img.id == image_id), None)

    def like(self, image_id: int) -> None:
        try:
            likes = self.api.like_image(image_id)
        except GalleryClientError as exc:
            self._notify("error", exc.message)
            return
        image = self._find(image_id)
        if image is not None:
            image.likes = likes

    def set_comment_draft(self, image_id: int, text: str) -> None:
        self.comment_drafts[image_id] = text

    def comment(self, image_id: int) -> None:
        text = self.comment_drafts.get(image_id, "")
        if not text:
            return
        try:
            comments = self.api.comment_on_image(image_id, text)
        except GalleryClientError as exc:
            self._notify("error", exc.message)
            return
        image = self._find(image_id)
        if image is not None:
            image.comments = [
                {"text": c["text"], "timestamp": c["timestamp"]} for c in comments or []
            ]
        self.comment_drafts[image_id] = ""

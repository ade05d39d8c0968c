# app/core/storage_utils.py
import logging
import uuid
from functools import lru_cache
from pathlib import Path

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class BlobStorage:
    """
    Where uploaded image binaries live.

    `save` returns the reference stored on the Image row (a URL or a path
    the client can resolve against the API origin); `delete` accepts the
    same reference.
    """

    def save(self, filename: str, file_bytes: bytes, content_type: str | None = None) -> str:
        raise NotImplementedError

    def delete(self, reference: str) -> None:
        raise NotImplementedError


class LocalBlobStorage(BlobStorage):
    """
    Store files in a local directory that the app serves as static files.

    Example:
        directory="uploads", url_prefix="/uploads"
        save("abc.png", ...) -> "/uploads/abc.png"
    """

    def __init__(self, directory: str | Path, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.url_prefix = "/" + url_prefix.strip("/")

    def save(self, filename: str, file_bytes: bytes, content_type: str | None = None) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / filename
        # "xb" refuses to overwrite an existing blob
        with open(target, "xb") as fh:
            fh.write(file_bytes)
        return f"{self.url_prefix}/{filename}"

    def delete(self, reference: str) -> None:
        """No-op if the reference does not point into this directory."""
        marker = self.url_prefix + "/"
        if not reference.startswith(marker):
            return
        name = reference[len(marker) :]
        if "/" in name or name in ("", ".", ".."):
            return
        (self.directory / name).unlink(missing_ok=True)


class SupabaseBlobStorage(BlobStorage):
    """
    Store files in a Supabase Storage bucket and reference them by public URL.
    """

    def __init__(self, client, bucket: str, folder: str = "images"):
        self.client = client
        self.bucket = bucket
        self.folder = folder.strip("/")

    def _path(self, filename: str) -> str:
        return f"{self.folder}/{filename}" if self.folder else filename

    def save(self, filename: str, file_bytes: bytes, content_type: str | None = None) -> str:
        path = self._path(filename)
        options = {"content-type": content_type} if content_type else {}
        self.client.storage.from_(self.bucket).upload(path, file_bytes, options)
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def extract_path_from_public_url(self, url: str) -> str | None:
        """
        Given a public URL, extract the object path relative to the bucket.

        Example:
            https://<proj>.supabase.co/storage/v1/object/public/gallery/images/a.png
            -> 'images/a.png'
        """
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = url.find(marker)
        if idx == -1:
            return None
        return url[idx + len(marker) :].split("?", 1)[0]

    def delete(self, reference: str) -> None:
        path = self.extract_path_from_public_url(reference)
        if path:
            # Supabase Python client expects a list of paths.
            self.client.storage.from_(self.bucket).remove([path])


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension with or without the dot (e.g. ".png", "jpg"),
             or an empty string.

    Returns:
        A filename like "<uuid4 hex>.png"
    """
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return f"{uuid.uuid4().hex}{ext}"


@lru_cache
def get_storage() -> BlobStorage:
    """
    FastAPI dependency returning the configured blob storage backend.
    """
    settings = get_settings()
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "local":
        return LocalBlobStorage(settings.UPLOAD_DIR, settings.UPLOADS_URL_PREFIX)

    if backend == "supabase":
        from app.core.supabase_client import supabase_admin

        logger.info("Using Supabase bucket %r for uploads", settings.SUPABASE_BUCKET)
        return SupabaseBlobStorage(supabase_admin(), settings.SUPABASE_BUCKET)

    raise RuntimeError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")

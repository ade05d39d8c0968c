# app/client/gallery_client.py
from typing import Any, Callable

import httpx

# Bytes per chunk when streaming an upload body; progress is reported per chunk.
UPLOAD_CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int], None]


class GalleryClientError(Exception):
    """
    Raised when the gallery API answers with an error (or cannot be reached).

    `message` is the server's `error` text when there is one.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GalleryApiClient:
    """
    Thin HTTP client for the gallery API.

    Usage:

        client = GalleryApiClient(httpx.Client(base_url="http://localhost:3001"))
        images = client.list_images()
        client.like_image(images[0]["id"])

    Any `httpx.Client` works, including `fastapi.testclient.TestClient`.
    """

    def __init__(self, http: httpx.Client):
        self.http = http

    # ---- helpers ----

    def absolute_url(self, reference: str) -> str:
        """
        Turn a stored image reference into a URL the browser can load.

        Local references ("/uploads/x.png") are resolved against the API
        origin; absolute URLs (remote storage) are returned unchanged.
        """
        if reference.startswith(("http://", "https://")):
            return reference
        return str(self.http.base_url.join(reference))

    def _request(self, method: str, url: str, fallback: str, **kwargs) -> Any:
        try:
            response = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise GalleryClientError(fallback) from exc

        if response.is_error:
            message = fallback
            try:
                message = response.json().get("error") or fallback
            except (ValueError, AttributeError):
                pass
            raise GalleryClientError(message, response.status_code)
        return response.json()

    # ---- operations ----

    def list_images(self) -> list[dict]:
        return self._request("GET", "/images", "Failed to fetch images.")

    def upload_image(
        self,
        *,
        name: str,
        email: str,
        description: str,
        filename: str,
        content: bytes,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        """
        POST /upload as multipart/form-data.

        The encoded body is streamed in chunks; after each chunk
        `on_progress` receives round(bytes_sent * 100 / bytes_total).
        """
        request = self.http.build_request(
            "POST",
            "/upload",
            data={"name": name, "email": email, "description": description},
            files={"image": (filename, content, content_type)},
        )
        body = request.read()
        total = len(body) or 1

        def stream():
            sent = 0
            for start in range(0, len(body), UPLOAD_CHUNK_SIZE):
                chunk = body[start : start + UPLOAD_CHUNK_SIZE]
                yield chunk
                sent += len(chunk)
                if on_progress is not None:
                    on_progress(round(sent * 100 / total))

        headers = {
            "Content-Type": request.headers["Content-Type"],
            "Content-Length": str(len(body)),
        }
        return self._request(
            "POST", "/upload", "Upload failed", content=stream(), headers=headers
        )

    def like_image(self, image_id: int) -> int:
        data = self._request(
            "POST", f"/images/{image_id}/like", "Failed to like image."
        )
        return data["likes"]

    def comment_on_image(self, image_id: int, text: str) -> list[dict]:
        return self._request(
            "POST",
            f"/images/{image_id}/comment",
            "Failed to comment.",
            json={"text": text},
        )

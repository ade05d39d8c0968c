# tests/test_gallery_api.py
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy.dialects import mysql
from sqlalchemy.exc import OperationalError
from sqlalchemy.schema import CreateTable
from sqlmodel import Session, select

from app.core.config import get_settings
from app.models.image import Comment, Image
from app.routers import gallery as gallery_router


def _as_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------- health ----------


def test_root_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "woodland-gallery"}


# ---------- upload ----------


def test_upload_returns_record_with_zero_likes(upload, storage):
    record = upload()

    assert record["likes"] == 0
    assert record["name"] == "Jane Doe"
    assert record["email"] == "jane@example.com"
    assert record["description"] == "Misty pines"
    assert isinstance(record["id"], int)
    assert record["imageUrl"].startswith("/uploads/")
    assert record["imageUrl"].endswith(".png")
    assert "createdAt" in record

    stored = storage.directory / record["imageUrl"].rsplit("/", 1)[1]
    assert stored.read_bytes() == b"\x89PNG\r\n\x1a\nfake"


def test_uploads_of_same_file_get_distinct_references(upload):
    references = {upload(filename="same.png")["imageUrl"] for _ in range(5)}
    assert len(references) == 5


def test_concurrent_uploads_get_distinct_references(client):
    def _post(i):
        return client.post(
            "/upload",
            data={"name": f"n{i}", "email": "e@x.org", "description": "d"},
            files={"image": ("burst.jpg", b"jpeg-bytes", "image/jpeg")},
        ).json()["imageUrl"]

    with ThreadPoolExecutor(max_workers=4) as pool:
        references = list(pool.map(_post, range(8)))

    assert len(set(references)) == 8


def test_upload_missing_field_is_rejected(client, engine):
    response = client.post(
        "/upload",
        data={"name": "Jane", "email": "", "description": "desc"},
        files={"image": ("a.png", b"x", "image/png")},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Please fill all fields and select an image."}

    with Session(engine) as session:
        assert session.exec(select(Image)).all() == []


def test_upload_without_file_is_rejected(client):
    response = client.post(
        "/upload",
        data={"name": "Jane", "email": "jane@example.com", "description": "desc"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_upload_storage_failure_is_generic_500(client, storage, monkeypatch):
    def broken_save(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(storage, "save", broken_save)
    response = client.post(
        "/upload",
        data={"name": "Jane", "email": "jane@example.com", "description": "desc"},
        files={"image": ("a.png", b"x", "image/png")},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Upload failed."}


def test_upload_db_failure_removes_stored_file(client, storage, monkeypatch):
    def broken_create(session, image):
        raise OperationalError("INSERT", {}, Exception("db down"))

    monkeypatch.setattr(gallery_router.repo, "create", broken_create)
    response = client.post(
        "/upload",
        data={"name": "Jane", "email": "jane@example.com", "description": "desc"},
        files={"image": ("a.png", b"x", "image/png")},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Upload failed."}
    assert list(storage.directory.iterdir()) == []


def test_uploaded_file_is_served_back(client, upload, storage):
    # The static mount serves UPLOAD_DIR; copy the stored blob there.
    record = upload()
    filename = record["imageUrl"].rsplit("/", 1)[1]
    served_dir = Path(get_settings().UPLOAD_DIR)
    served_dir.mkdir(parents=True, exist_ok=True)
    (served_dir / filename).write_bytes((storage.directory / filename).read_bytes())

    response = client.get(record["imageUrl"])
    assert response.status_code == 200
    assert response.content == b"\x89PNG\r\n\x1a\nfake"


# ---------- list ----------


def test_list_images_newest_first_with_comments(client, upload):
    first = upload(name="first")
    second = upload(name="second")
    third = upload(name="third")
    client.post(f"/images/{second['id']}/comment", json={"text": "lovely"})

    response = client.get("/images")
    assert response.status_code == 200
    body = response.json()

    assert [img["id"] for img in body] == [third["id"], second["id"], first["id"]]
    by_id = {img["id"]: img for img in body}
    assert [c["text"] for c in by_id[second["id"]]["Comments"]] == ["lovely"]
    assert by_id[first["id"]]["Comments"] == []


def test_list_images_empty(client):
    response = client.get("/images")
    assert response.status_code == 200
    assert response.json() == []


# ---------- likes ----------


def test_like_increments_by_one(client, upload):
    image = upload()
    assert client.post(f"/images/{image['id']}/like").json() == {"likes": 1}
    assert client.post(f"/images/{image['id']}/like").json() == {"likes": 2}

    listed = client.get("/images").json()
    assert listed[0]["likes"] == 2


def test_like_unknown_image_is_404(client, upload):
    image = upload()
    response = client.post("/images/9999/like")

    assert response.status_code == 404
    assert response.json() == {"error": "Image not found"}
    assert client.get("/images").json()[0]["likes"] == image["likes"]


def test_like_non_numeric_id_is_client_error(client):
    response = client.post("/images/abc/like")
    assert response.status_code == 400
    assert "error" in response.json()


def test_concurrent_likes_do_not_lose_updates(client, upload):
    image = upload()
    n = 20

    def _like(_):
        return client.post(f"/images/{image['id']}/like").json()["likes"]

    with ThreadPoolExecutor(max_workers=5) as pool:
        counts = list(pool.map(_like, range(n)))

    # Every caller saw the value its own increment produced
    assert sorted(counts) == list(range(1, n + 1))
    assert client.get("/images").json()[0]["likes"] == n


def test_like_db_failure_is_generic_500(client, upload, monkeypatch):
    image = upload()

    def broken(session, image_id):
        raise OperationalError("UPDATE", {}, Exception("deadlock"))

    monkeypatch.setattr(gallery_router.repo, "increment_likes", broken)
    response = client.post(f"/images/{image['id']}/like")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to like image."}


# ---------- comments ----------


def test_comment_returns_full_list_in_insertion_order(client, upload):
    image = upload()
    client.post(f"/images/{image['id']}/comment", json={"text": "first!"})
    before = datetime.now(timezone.utc)
    response = client.post(f"/images/{image['id']}/comment", json={"text": "second"})

    assert response.status_code == 200
    comments = response.json()
    assert [c["text"] for c in comments] == ["first!", "second"]
    assert all(c["ImageId"] == image["id"] for c in comments)
    assert _as_utc(comments[-1]["timestamp"]) >= before


def test_timestamps_keep_microseconds_on_mysql():
    for table in (Image.__table__, Comment.__table__):
        ddl = str(CreateTable(table).compile(dialect=mysql.dialect()))
        assert "DATETIME(6)" in ddl
        assert "DATETIME," not in ddl


def test_comment_appears_exactly_once_in_listing(client, upload):
    image = upload()
    client.post(f"/images/{image['id']}/comment", json={"text": "unique words"})

    listed = client.get("/images").json()[0]["Comments"]
    assert [c["text"] for c in listed].count("unique words") == 1


def test_comment_empty_text_is_400(client, upload, engine):
    image = upload()
    for payload in ({"text": ""}, {"text": "   "}, {}):
        response = client.post(f"/images/{image['id']}/comment", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Comment text is required."}

    with Session(engine) as session:
        assert session.exec(select(Comment)).all() == []


def test_comment_unknown_image_is_404_and_writes_nothing(client, engine):
    response = client.post("/images/42/comment", json={"text": "hello"})

    assert response.status_code == 404
    assert response.json() == {"error": "Image not found"}
    with Session(engine) as session:
        assert session.exec(select(Comment)).all() == []


def test_comments_cascade_when_image_deleted(engine, upload, client):
    image = upload()
    client.post(f"/images/{image['id']}/comment", json={"text": "bye"})

    with Session(engine) as session:
        session.delete(session.get(Image, image["id"]))
        session.commit()
        assert session.exec(select(Comment)).all() == []

# tests/test_uploads.py
import inspect
import io
import unittest
from unittest import mock

from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.endpoints.uploads import attach_to_artwork
from app.main import app
from app.middleware.auth import get_current_admin, get_current_user
from app.models.artwork import ArtworkImage
from tests.base import ApiTestCase


def png_bytes(size=(16, 16), color=(200, 40, 40)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class UploadTestCase(ApiTestCase):
    def upload(self, files, data=None, path="/api/upload/image", headers=None):
        return self.client.post(
            path, files=files, data=data or {}, headers=self.admin_headers() if headers is None else headers
        )

    def test_single_image(self):
        response = self.upload({"image": ("photo.png", png_bytes(), "image/png")})
        self.assertEqual(response.status_code, 200, response.text)
        image = response.json()["data"]

        self.assertEqual(image["size"], len(png_bytes()))
        self.assertRegex(image["filename"], r"^artwork-[0-9a-f]{32}\.png$")
        self.assertEqual(image["url"], f"/uploads/{image['filename']}")
        self.assertEqual(image["originalName"], "photo.png")
        self.assertEqual(self.public_files(), [image["filename"]])
        self.assertEqual(self.staged_files(), [])

        served = self.client.get(image["url"])
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, png_bytes())

    def test_requires_admin(self):
        response = self.upload({"image": ("photo.png", png_bytes(), "image/png")}, headers={})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.public_files(), [])

    def test_text_file_rejected_and_nothing_written(self):
        response = self.upload({"image": ("notes.txt", b"just some text", "text/plain")})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "INVALID_FILE_TYPE")
        self.assertEqual(self.public_files(), [])
        self.assertEqual(self.staged_files(), [])

    def test_disguised_file_rejected(self):
        response = self.upload({"image": ("photo.png", b"definitely not a png", "image/png")})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "INVALID_FILE_TYPE")
        self.assertEqual(self.public_files(), [])

    def test_content_must_match_extension(self):
        response = self.upload({"image": ("photo.jpg", png_bytes(), "image/jpeg")})
        self.assertEqual(response.status_code, 400)

    def test_no_file(self):
        response = self.upload({}, data={"artworkId": "1"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "NO_FILE")

    def test_too_large(self):
        self.override_setting("MAX_UPLOAD_SIZE", 32)
        response = self.upload({"image": ("photo.png", png_bytes((64, 64)), "image/png")})
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.json()["error"], "FILE_TOO_LARGE")
        self.assertEqual(self.public_files(), [])

    def test_multiple_images(self):
        files = [("images", (f"p{i}.png", png_bytes(), "image/png")) for i in range(3)]
        response = self.upload(files, path="/api/upload/images")
        self.assertEqual(response.status_code, 200, response.text)
        data = response.json()["data"]
        self.assertEqual(data["count"], 3)
        self.assertEqual({image["url"] for image in data["images"]}, {f"/uploads/{name}" for name in self.public_files()})
        self.assertEqual(len(self.public_files()), 3)

    def test_too_many_files(self):
        files = [("images", (f"p{i}.png", png_bytes(), "image/png")) for i in range(6)]
        response = self.upload(files, path="/api/upload/images")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "TOO_MANY_FILES")
        self.assertEqual(self.public_files(), [])

    def test_one_bad_file_rejects_the_batch(self):
        files = [
            ("images", ("good.png", png_bytes(), "image/png")),
            ("images", ("bad.txt", b"text", "text/plain")),
        ]
        response = self.upload(files, path="/api/upload/images")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.public_files(), [])
        self.assertEqual(self.staged_files(), [])


class ArtworkUploadTestCase(ApiTestCase):
    def setUp(self):
        super().setUp()
        category = self.create_category("Photography")
        self.artwork = self.create_artwork(category["id"])

    def upload_to_artwork(self, name="photo.png", is_primary=False, artwork_id=None):
        data = {"artworkId": str(artwork_id or self.artwork["id"])}
        if is_primary:
            data["isPrimary"] = "true"
        return self.client.post(
            "/api/upload/image",
            files={"image": (name, png_bytes(), "image/png")},
            data=data,
            headers=self.admin_headers(),
        )

    def test_unknown_artwork(self):
        response = self.upload_to_artwork(artwork_id=999)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "ARTWORK_NOT_FOUND")
        self.assertEqual(self.public_files(), [])

    def test_first_image_becomes_primary(self):
        response = self.upload_to_artwork()
        self.assertEqual(response.status_code, 200, response.text)
        image = response.json()["data"]
        self.assertTrue(image["isPrimary"])
        self.assertEqual(image["artworkId"], self.artwork["id"])

        fetched = self.client.get(f"/api/artworks/{self.artwork['id']}").json()["data"]["artwork"]
        self.assertEqual(fetched["primaryImage"], image["url"])

    def test_primary_moves_to_new_upload(self):
        first = self.upload_to_artwork("one.png").json()["data"]
        second = self.upload_to_artwork("two.png").json()["data"]
        self.assertFalse(second["isPrimary"])

        third = self.upload_to_artwork("three.png", is_primary=True).json()["data"]
        self.assertTrue(third["isPrimary"])

        with self.db_session() as db:
            primaries = db.query(ArtworkImage).filter(ArtworkImage.is_primary.is_(True)).all()
            self.assertEqual([p.id for p in primaries], [third["id"]])
        self.assertNotEqual(first["id"], third["id"])

    def test_upload_refreshes_artwork_listing(self):
        self.client.get("/api/artworks")
        image = self.upload_to_artwork().json()["data"]
        listed = self.client.get("/api/artworks").json()
        self.assertNotIn("meta", listed)
        self.assertEqual(listed["data"]["artworks"][0]["primaryImage"], image["url"])

    def test_failed_database_step_leaves_nothing_on_disk(self):
        headers = self.admin_headers()
        client = TestClient(app, raise_server_exceptions=False)

        with mock.patch.object(Session, "commit", side_effect=RuntimeError("database went away")):
            response = client.post(
                "/api/upload/image",
                files={"image": ("photo.png", png_bytes(), "image/png")},
                data={"artworkId": str(self.artwork["id"])},
                headers=headers,
            )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "INTERNAL_SERVER_ERROR")
        self.assertEqual(self.public_files(), [])
        self.assertEqual(self.staged_files(), [])
        with self.db_session() as db:
            self.assertEqual(db.query(ArtworkImage).count(), 0)

    def test_database_and_disk_work_runs_on_worker_threads(self):
        self.assertFalse(inspect.iscoroutinefunction(get_current_admin))
        self.assertFalse(inspect.iscoroutinefunction(get_current_user))

        with mock.patch("app.api.endpoints.uploads.run_in_threadpool", wraps=run_in_threadpool) as offload:
            response = self.upload_to_artwork()

        self.assertEqual(response.status_code, 200, response.text)
        self.assertIn(attach_to_artwork, [call.args[0] for call in offload.call_args_list])

    def test_replacing_primary_removes_old_upload(self):
        image = self.upload_to_artwork().json()["data"]
        self.assertEqual(self.public_files(), [image["filename"]])

        response = self.client.put(
            f"/api/artworks/{self.artwork['id']}",
            json={"imageUrl": "https://cdn.example.com/new.jpg"},
            headers=self.admin_headers(),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["artwork"]["primaryImage"], "https://cdn.example.com/new.jpg")
        self.assertEqual(self.public_files(), [])

    def test_deleting_artwork_removes_uploaded_files(self):
        self.upload_to_artwork()
        self.assertEqual(len(self.public_files()), 1)

        response = self.client.delete(f"/api/artworks/{self.artwork['id']}", headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.public_files(), [])


if __name__ == "__main__":
    unittest.main()

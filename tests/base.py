# tests/base.py
import os
import shutil
import unittest
from contextlib import contextmanager

from fastapi.testclient import TestClient

from app.main import app
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.core.config import settings
from app.middleware.rate_limit import api_rate_limit, auth_rate_limit
from app.services.cache import resource_cache
from app.services.storage import storage_service


class ApiTestCase(unittest.TestCase):
    """
    Fresh in-memory database, empty caches and an empty upload directory for
    every test. The app lifespan runs on entering the client, which creates
    the bootstrap admin.
    """

    def setUp(self):
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        resource_cache.clear()
        api_rate_limit.reset()
        auth_rate_limit.reset()
        shutil.rmtree(storage_service.storage_dir, ignore_errors=True)

        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    @contextmanager
    def db_session(self):
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def override_setting(self, name, value):
        original = getattr(settings, name)
        setattr(settings, name, value)
        self.addCleanup(setattr, settings, name, original)

    def login_admin(self):
        response = self.client.post(
            "/api/admin/login",
            json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD},
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]["tokens"]["accessToken"]

    def admin_headers(self):
        if not hasattr(self, "_admin_token"):
            self._admin_token = self.login_admin()
        return {"Authorization": f"Bearer {self._admin_token}"}

    def create_category(self, name="Paintings", **fields):
        response = self.client.post(
            "/api/categories", json={"name": name, **fields}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]["category"]

    def create_artwork(self, category_id, name="Sunset", price=100, **fields):
        body = {"name": name, "description": f"{name} description", "price": price, "categoryId": category_id}
        body.update(fields)
        response = self.client.post("/api/artworks", json=body, headers=self.admin_headers())
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]["artwork"]

    def public_files(self):
        """Files published under the upload directory, staging excluded"""
        if not os.path.isdir(storage_service.storage_dir):
            return []
        return [name for name in os.listdir(storage_service.storage_dir) if name != ".staging"]

    def staged_files(self):
        if not os.path.isdir(storage_service.staging_dir):
            return []
        return os.listdir(storage_service.staging_dir)

# tests/test_seo.py
import unittest
from unittest import mock
from xml.etree import ElementTree

from app.core.config import settings
from app.db.database import database
from tests.base import ApiTestCase

SITEMAP_NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"


class SitemapTestCase(ApiTestCase):
    def locations(self):
        response = self.client.get("/sitemap.xml")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("application/xml"))
        root = ElementTree.fromstring(response.content)
        return [url.find(f"{SITEMAP_NS}loc").text for url in root.findall(f"{SITEMAP_NS}url")]

    def test_static_pages(self):
        base = settings.FRONTEND_URL.rstrip("/")
        locations = self.locations()
        self.assertEqual(locations[0], base)
        self.assertIn(f"{base}/artwork", locations)

    def test_lists_active_categories_and_available_artworks(self):
        base = settings.FRONTEND_URL.rstrip("/")
        category = self.create_category("Digital Art")
        available = self.create_artwork(category["id"], name="Pixels")
        sold = self.create_artwork(category["id"], name="Gone", status="SOLD")

        locations = self.locations()
        self.assertIn(f"{base}/category/digital-art", locations)
        self.assertIn(f"{base}/artwork/{available['id']}", locations)
        self.assertNotIn(f"{base}/artwork/{sold['id']}", locations)

    def test_robots(self):
        response = self.client.get("/robots.txt")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Crawl-delay: 1", response.text)
        self.assertIn(f"Sitemap: {settings.FRONTEND_URL.rstrip('/')}/sitemap.xml", response.text)
        for path in ("/admin/", "/api/", "/login/", "/register/"):
            self.assertIn(f"Disallow: {path}", response.text)


class HealthTestCase(ApiTestCase):
    def test_database_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["database"], "connected")
        self.assertIn("pool", data)

    def test_database_down(self):
        with mock.patch.object(database, "check_connection", return_value=False):
            response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 503)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "DATABASE_UNAVAILABLE")
        self.assertEqual(body["meta"]["database"], "disconnected")


if __name__ == "__main__":
    unittest.main()

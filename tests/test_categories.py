# tests/test_categories.py
import unittest

from app.models.artwork import Artwork
from tests.base import ApiTestCase


class CategoryTestCase(ApiTestCase):
    def test_list_is_public_and_ordered(self):
        self.create_category("Sculptures")
        self.create_category("Paintings")

        response = self.client.get("/api/categories")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["total"], 2)
        # New categories go to the end of the sort order
        self.assertEqual([c["name"] for c in data["categories"]], ["Sculptures", "Paintings"])
        self.assertEqual(data["categories"][0]["artworkCount"], 0)

    def test_create_defaults(self):
        category = self.create_category("Prints", description="  Fine art prints  ")
        self.assertEqual(category["color"], "#6366f1")
        self.assertEqual(category["description"], "Fine art prints")
        self.assertTrue(category["isActive"])
        self.assertIn("id", category)

    def test_create_requires_admin(self):
        response = self.client.post("/api/categories", json={"name": "Prints"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "UNAUTHORIZED")

    def test_name_unique_case_insensitive(self):
        self.create_category("Prints")
        response = self.client.post(
            "/api/categories", json={"name": "  PRINTS "}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CATEGORY_EXISTS")

    def test_rename_to_colliding_name(self):
        self.create_category("Prints")
        other = self.create_category("Posters")
        response = self.client.put(
            f"/api/categories/{other['id']}", json={"name": "prints"}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CATEGORY_EXISTS")

    def test_inactive_name_can_be_reused(self):
        old = self.create_category("Prints")
        self.client.put(f"/api/categories/{old['id']}", json={"isActive": False}, headers=self.admin_headers())
        self.create_category("Prints")

        # Reactivating the old one would now collide
        response = self.client.put(
            f"/api/categories/{old['id']}", json={"isActive": True}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 409)

    def test_partial_update(self):
        category = self.create_category("Prints", description="Paper", color="#112233")
        response = self.client.put(
            f"/api/categories/{category['id']}", json={"color": "#445566"}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()["data"]["category"]
        self.assertEqual(updated["color"], "#445566")
        self.assertEqual(updated["name"], "Prints")
        self.assertEqual(updated["description"], "Paper")

    def test_explicit_null(self):
        category = self.create_category("Prints", description="Paper")

        response = self.client.put(
            f"/api/categories/{category['id']}", json={"description": None}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["data"]["category"]["description"])

        response = self.client.put(
            f"/api/categories/{category['id']}", json={"name": None}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["type"], "VALIDATION_ERROR")

    def test_get_with_artworks(self):
        category = self.create_category("Prints")
        self.create_artwork(category["id"], name="Blue")

        response = self.client.get(f"/api/categories/{category['id']}")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]["category"]
        self.assertEqual(data["artworkCount"], 1)
        self.assertEqual([a["name"] for a in data["artworks"]], ["Blue"])

    def test_get_missing(self):
        response = self.client.get("/api/categories/999")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "CATEGORY_NOT_FOUND")

    def test_delete_with_artworks_reports_count(self):
        category = self.create_category("Prints")
        self.create_artwork(category["id"], name="One")
        self.create_artwork(category["id"], name="Two")

        response = self.client.delete(f"/api/categories/{category['id']}", headers=self.admin_headers())
        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertEqual(body["error"], "CATEGORY_HAS_ARTWORKS")
        self.assertIn("2", body["message"])

    def test_delete_detaches_inactive_artworks(self):
        category = self.create_category("Prints")
        artwork = self.create_artwork(category["id"])
        self.client.put(f"/api/artworks/{artwork['id']}", json={"isActive": False}, headers=self.admin_headers())

        response = self.client.delete(f"/api/categories/{category['id']}", headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        with self.db_session() as db:
            self.assertIsNone(db.get(Artwork, artwork["id"]).category_id)

    def test_prints_scenario(self):
        category = self.create_category("Prints", description="Limited editions", color="#112233")
        artwork = self.create_artwork(category["id"], name="Edition 1")

        response = self.client.delete(f"/api/categories/{category['id']}", headers=self.admin_headers())
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CATEGORY_HAS_ARTWORKS")

        response = self.client.delete(f"/api/artworks/{artwork['id']}", headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)

        response = self.client.delete(f"/api/categories/{category['id']}", headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], {"id": category["id"]})


class CategoryCacheTestCase(ApiTestCase):
    def test_second_read_is_cached(self):
        self.create_category("Prints")
        first = self.client.get("/api/categories").json()
        second = self.client.get("/api/categories").json()

        self.assertNotIn("meta", first)
        self.assertEqual(second["meta"], {"cached": True})
        self.assertEqual(first["data"], second["data"])

    def test_writes_are_visible_immediately(self):
        category = self.create_category("Prints")
        self.client.get("/api/categories")

        self.create_category("Posters")
        names = [c["name"] for c in self.client.get("/api/categories").json()["data"]["categories"]]
        self.assertIn("Posters", names)

        self.client.put(f"/api/categories/{category['id']}", json={"name": "Etchings"}, headers=self.admin_headers())
        names = [c["name"] for c in self.client.get("/api/categories").json()["data"]["categories"]]
        self.assertEqual(sorted(names), ["Etchings", "Posters"])

        self.client.delete(f"/api/categories/{category['id']}", headers=self.admin_headers())
        names = [c["name"] for c in self.client.get("/api/categories").json()["data"]["categories"]]
        self.assertEqual(names, ["Posters"])

    def test_artwork_write_refreshes_counts(self):
        category = self.create_category("Prints")
        self.client.get("/api/categories")

        self.create_artwork(category["id"])
        listed = self.client.get("/api/categories").json()["data"]["categories"][0]
        self.assertEqual(listed["artworkCount"], 1)


if __name__ == "__main__":
    unittest.main()

# tests/test_init_db.py
import unittest

from app.db.init_db import SAMPLE_ARTWORKS, SAMPLE_CATEGORIES, seed_sample_data
from app.models.artwork import Artwork, ArtworkImage
from app.models.category import Category
from tests.base import ApiTestCase


class SeedDataTestCase(ApiTestCase):
    def test_seed_sample_data(self):
        with self.db_session() as db:
            seed_sample_data(db)
            seed_sample_data(db)

            self.assertEqual(db.query(Category).count(), len(SAMPLE_CATEGORIES))
            self.assertEqual(db.query(Artwork).count(), len(SAMPLE_ARTWORKS))
            self.assertEqual(db.query(ArtworkImage).filter(ArtworkImage.is_primary.is_(True)).count(), 2)

        categories = self.client.get("/api/categories").json()["data"]["categories"]
        self.assertEqual(categories[0]["name"], "Paintings")
        self.assertEqual(categories[0]["artworkCount"], 1)

        featured = self.client.get("/api/artworks", params={"featured": "true"}).json()["data"]["artworks"]
        self.assertEqual([a["name"] for a in featured], ["Sunset Dreams"])


if __name__ == "__main__":
    unittest.main()

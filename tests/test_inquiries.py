# tests/test_inquiries.py
import unittest

from tests.base import ApiTestCase


class InquiryTestCase(ApiTestCase):
    def submit(self, **overrides):
        body = {"name": "Sam", "email": "sam@example.com", "subject": "Commission", "message": "Hello"}
        body.update(overrides)
        return self.client.post("/api/inquiries", json=body)

    def test_submit_is_public(self):
        response = self.submit()
        self.assertEqual(response.status_code, 201)
        inquiry = response.json()["data"]["inquiry"]
        self.assertEqual(inquiry["status"], "NEW")
        self.assertIsNone(inquiry["artworkId"])

    def test_submit_about_unknown_artwork(self):
        response = self.submit(artworkId=999)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "ARTWORK_NOT_FOUND")

    def test_submit_validation(self):
        response = self.submit(email="nope", message="")
        self.assertEqual(response.status_code, 400)
        fields = {d["field"] for d in response.json()["error"]["details"]}
        self.assertEqual(fields, {"email", "message"})

    def test_list_requires_admin_and_filters(self):
        self.submit()
        second = self.submit(name="Kim").json()["data"]["inquiry"]
        self.assertEqual(self.client.get("/api/inquiries").status_code, 401)

        self.client.put(f"/api/inquiries/{second['id']}", json={"status": "READ"}, headers=self.admin_headers())

        data = self.client.get("/api/inquiries", headers=self.admin_headers()).json()["data"]
        self.assertEqual(data["pagination"]["total"], 2)

        data = self.client.get(
            "/api/inquiries", params={"status": "NEW"}, headers=self.admin_headers()
        ).json()["data"]
        self.assertEqual([i["name"] for i in data["inquiries"]], ["Sam"])

    def test_reply(self):
        inquiry = self.submit().json()["data"]["inquiry"]
        response = self.client.put(
            f"/api/inquiries/{inquiry['id']}",
            json={"status": "REPLIED", "adminReply": "Thanks, we will be in touch."},
            headers=self.admin_headers(),
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()["data"]["inquiry"]
        self.assertEqual(updated["status"], "REPLIED")
        self.assertEqual(updated["adminReply"], "Thanks, we will be in touch.")

        response = self.client.put(
            f"/api/inquiries/{inquiry['id']}", json={"status": None}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 400)

    def test_update_missing(self):
        response = self.client.put("/api/inquiries/42", json={"status": "READ"}, headers=self.admin_headers())
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "INQUIRY_NOT_FOUND")


if __name__ == "__main__":
    unittest.main()

import unittest

from fastapi.testclient import TestClient

from tracker.app import create_app
from tracker.dependencies import get_document_store
from tracker.documents import HybridDocumentStore, LocalDocumentStore


class DocumentRoutesTests(unittest.TestCase):
    def setUp(self):
        self.local = LocalDocumentStore()
        self.remote = LocalDocumentStore()
        self.store = HybridDocumentStore(self.local, self.remote, online=True)
        app = create_app()
        app.dependency_overrides[get_document_store] = lambda: self.store
        self.client = TestClient(app)

    def test_collection_crud(self):
        response = self.client.post("/api/documents/properties", json={"address": "1 Main St"})
        self.assertEqual(response.status_code, 201)
        doc = response.json()

        listed = self.client.get("/api/documents/properties").json()
        self.assertEqual([d["id"] for d in listed], [doc["id"]])

        response = self.client.put(
            f"/api/documents/properties/{doc['id']}", json={"address": "2 Main St"}
        )
        self.assertEqual(response.json()["address"], "2 Main St")
        self.assertEqual(
            self.client.get(f"/api/documents/properties/{doc['id']}").json()["address"],
            "2 Main St",
        )

        response = self.client.delete(f"/api/documents/properties/{doc['id']}")
        self.assertEqual(response.json(), {"message": "Document deleted successfully"})
        response = self.client.delete(f"/api/documents/properties/{doc['id']}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Document not found"})

    def test_unknown_collection_is_404(self):
        response = self.client.get("/api/documents/guests")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Unknown collection: guests"})

    def test_property_filter(self):
        self.client.post("/api/documents/expenses", json={"property_id": "p1", "amount": 3})
        self.client.post("/api/documents/expenses", json={"property_id": "p2", "amount": 4})
        docs = self.client.get("/api/documents/expenses/property/p1").json()
        self.assertEqual([d["amount"] for d in docs], [3])

    def test_connectivity_toggle_syncs(self):
        response = self.client.put("/api/storage/connectivity", json={"online": False})
        body = response.json()
        self.assertEqual(body["status"]["isOnline"], False)
        self.assertEqual(body["status"]["storage"], "localStorage")
        self.assertIsNone(body["sync"])

        self.client.post("/api/documents/bookings", json={"guest": "Ada"})
        self.assertEqual(len(self.local.get_collection("bookings")), 1)

        response = self.client.put("/api/storage/connectivity", json={"online": True})
        body = response.json()
        self.assertEqual(body["sync"], {"synced": 1, "failed": 0})
        self.assertEqual(len(self.remote.get_collection("bookings")), 1)

        status = self.client.get("/api/storage/status").json()
        self.assertEqual(
            status, {"isOnline": True, "storage": "firebase", "remoteConfigured": True}
        )

    def test_sync_requires_remote(self):
        self.store.set_online(False)
        self.assertEqual(self.client.post("/api/storage/sync").status_code, 409)
        self.store.online = True
        self.assertEqual(
            self.client.post("/api/storage/sync").json(), {"synced": 0, "failed": 0}
        )

    def test_export_import_and_clear(self):
        self.client.post("/api/documents/properties", json={"address": "1 Main St"})
        exported = self.client.get("/api/storage/export").json()
        self.assertEqual(len(exported["properties"]), 1)

        response = self.client.delete("/api/storage/data")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get("/api/documents/properties").json(), [])

        response = self.client.post("/api/storage/import", json=exported)
        self.assertEqual(response.json(), {"status": "ok"})
        self.assertEqual(len(self.client.get("/api/documents/properties").json()), 1)
        self.assertTrue(self.client.get("/api/storage/info").json()["available"])

    def test_imported_numeric_ids_are_addressable(self):
        response = self.client.post(
            "/api/storage/import", json={"properties": [{"id": 1, "address": "1 Main St"}]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get("/api/documents/properties").json()[0]["id"], 1)

        response = self.client.get("/api/documents/properties/1")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["address"], "1 Main St")

        response = self.client.delete("/api/documents/properties/1")
        self.assertEqual(response.json(), {"message": "Document deleted successfully"})

    def test_import_rejects_malformed_collections(self):
        self.client.post("/api/documents/properties", json={"address": "1 Main St"})

        response = self.client.post("/api/storage/import", json={"properties": {"a": 1}})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid request")

        response = self.client.post("/api/storage/import", json={"settings": ["USD"]})
        self.assertEqual(response.status_code, 400)

        self.assertEqual(len(self.client.get("/api/documents/properties").json()), 1)
        response = self.client.get("/api/documents/properties/x")
        self.assertEqual(response.status_code, 404)

    def test_settings(self):
        self.assertEqual(self.client.get("/api/storage/settings").json()["defaultCurrency"], "USD")
        saved = self.client.put("/api/storage/settings", json={"defaultCurrency": "EUR"}).json()
        self.assertEqual(saved["defaultCurrency"], "EUR")
        self.assertTrue(saved["notifications"])

    def test_material_participation_summary(self):
        prop = self.client.post("/api/documents/properties", json={"address": "1 Main St"}).json()
        self.client.post(
            "/api/documents/materialParticipation",
            json={"property_id": prop["id"], "date": "2024-06-01", "hours": 12.5},
        )
        summary = self.client.get(
            "/api/material-participation/summary", params={"year": 2024}
        ).json()
        self.assertEqual(summary["year_hours"], 12.5)
        self.assertFalse(summary["meets_professional_threshold"])
        self.assertEqual(summary["hours_by_property"][0]["property"], "1 Main St")


if __name__ == "__main__":
    unittest.main()

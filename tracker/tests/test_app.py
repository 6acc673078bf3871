import datetime as dt
import unittest
from decimal import Decimal

from fastapi.testclient import TestClient

from tracker.app import create_app
from tracker.db import InMemoryDbClient
from tracker.dependencies import get_db_client

PROPERTY = {
    "address": "12 Ocean Ave",
    "property_type": "condo",
    "purchase_price": 300000,
    "down_payment": 60000,
    "monthly_mortgage": 1500,
    "monthly_taxes": 250,
    "monthly_insurance": 100,
    "monthly_hoa_fees": 50,
}


class TrackerApiTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.app = create_app()
        self.app.dependency_overrides[get_db_client] = lambda: self.db
        self.client = TestClient(self.app)

    def _create_property(self, **overrides):
        response = self.client.post("/api/properties", json={**PROPERTY, **overrides})
        self.assertEqual(response.status_code, 201)
        return response.json()

    def _create_booking(self, property_id, **overrides):
        payload = {
            "property_id": property_id,
            "guest_name": "Ada",
            "check_in_date": "2024-03-01",
            "check_out_date": "2024-03-05",
            "total_amount": 800,
            **overrides,
        }
        response = self.client.post("/api/bookings", json=payload)
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "OK")

    def test_property_crud_contract(self):
        created = self._create_property()
        self.assertEqual(created["address"], "12 Ocean Ave")
        self.assertEqual(Decimal(created["total_income"]), Decimal("0"))

        response = self.client.get(f"/api/properties/{created['id']}")
        self.assertEqual(response.status_code, 200)

        response = self.client.put(
            f"/api/properties/{created['id']}", json={"monthly_hoa_fees": 75}
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()
        self.assertEqual(Decimal(updated["monthly_hoa_fees"]), Decimal("75"))
        self.assertEqual(updated["address"], "12 Ocean Ave")

        response = self.client.delete(f"/api/properties/{created['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Property deleted successfully"})

        response = self.client.delete(f"/api/properties/{created['id']}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Property not found"})

    def test_missing_required_field_is_400(self):
        payload = dict(PROPERTY)
        del payload["address"]
        response = self.client.post("/api/properties", json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Missing required fields")

    def test_invalid_enum_is_400(self):
        prop = self._create_property()
        response = self.client.post(
            "/api/transactions",
            json={
                "property_id": prop["id"],
                "type": "refund",
                "category": "misc",
                "amount": 10,
                "date": "2024-01-01",
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid request")

    def test_unknown_property_is_404(self):
        response = self.client.get("/api/properties/999")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Property not found"})

    def test_list_properties_includes_totals(self):
        prop = self._create_property()
        self._create_booking(prop["id"], total_amount=1000)
        self.client.post(
            "/api/transactions",
            json={
                "property_id": prop["id"],
                "type": "expense",
                "category": "repairs",
                "amount": 200,
                "date": "2024-03-10",
            },
        )
        listed = self.client.get("/api/properties").json()
        self.assertEqual(len(listed), 1)
        self.assertEqual(Decimal(listed[0]["total_income"]), Decimal("1000"))
        self.assertEqual(Decimal(listed[0]["total_expenses"]), Decimal("200"))

    def test_booking_creates_income_transaction(self):
        prop = self._create_property()
        booking = self._create_booking(prop["id"])
        self.assertEqual(booking["status"], "confirmed")
        self.assertEqual(booking["property_address"], "12 Ocean Ave")

        transactions = self.client.get(f"/api/transactions/property/{prop['id']}").json()
        self.assertEqual(len(transactions), 1)
        txn = transactions[0]
        self.assertEqual(txn["booking_id"], booking["id"])
        self.assertEqual(txn["type"], "income")
        self.assertEqual(txn["category"], "rental_income")
        self.assertEqual(txn["date"], "2024-03-01")
        self.assertEqual(txn["description"], "Rental income for Ada")

    def test_booking_for_unknown_property_is_404(self):
        response = self.client.post(
            "/api/bookings",
            json={
                "property_id": 42,
                "guest_name": "Ada",
                "check_in_date": "2024-03-01",
                "check_out_date": "2024-03-05",
                "total_amount": 800,
            },
        )
        self.assertEqual(response.status_code, 404)

    def test_booking_dates_must_be_ordered(self):
        prop = self._create_property()
        response = self.client.post(
            "/api/bookings",
            json={
                "property_id": prop["id"],
                "guest_name": "Ada",
                "check_in_date": "2024-03-05",
                "check_out_date": "2024-03-01",
                "total_amount": 800,
            },
        )
        self.assertEqual(response.status_code, 400)

        booking = self._create_booking(prop["id"])
        response = self.client.put(
            f"/api/bookings/{booking['id']}", json={"check_out_date": "2024-02-01"}
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_booking_keeps_transaction_unlinked(self):
        prop = self._create_property()
        booking = self._create_booking(prop["id"])
        response = self.client.delete(f"/api/bookings/{booking['id']}")
        self.assertEqual(response.json(), {"message": "Booking deleted successfully"})
        self.assertEqual(self.client.delete(f"/api/bookings/{booking['id']}").status_code, 404)

        transactions = self.client.get("/api/transactions").json()
        self.assertEqual(len(transactions), 1)
        self.assertIsNone(transactions[0]["booking_id"])

    def test_booking_stats(self):
        prop = self._create_property()
        self._create_booking(prop["id"], total_amount=500)
        self._create_booking(
            prop["id"], total_amount=300, status="completed", check_in_date="2024-04-01",
            check_out_date="2024-04-03",
        )
        stats = self.client.get("/api/bookings/stats/summary").json()
        self.assertEqual(stats["total_bookings"], 2)
        self.assertEqual(Decimal(stats["total_revenue"]), Decimal("800"))
        self.assertEqual(Decimal(stats["avg_booking_amount"]), Decimal("400"))
        self.assertEqual(stats["confirmed_bookings"], 1)
        self.assertEqual(stats["completed_bookings"], 1)

    def test_booking_stats_without_bookings(self):
        stats = self.client.get("/api/bookings/stats/summary").json()
        self.assertEqual(stats["total_bookings"], 0)
        self.assertIsNone(stats["avg_booking_amount"])

    def test_transaction_with_unknown_booking_is_404(self):
        prop = self._create_property()
        response = self.client.post(
            "/api/transactions",
            json={
                "property_id": prop["id"],
                "booking_id": 77,
                "type": "expense",
                "category": "cleaning",
                "amount": 80,
                "date": "2024-01-02",
            },
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Booking not found"})

    def test_transaction_summary_by_year(self):
        prop = self._create_property()
        for amount, date in ((100, "2023-05-01"), (40, "2024-05-01"), (60, "2024-06-01")):
            self.client.post(
                "/api/transactions",
                json={
                    "property_id": prop["id"],
                    "type": "expense",
                    "category": "utilities",
                    "amount": amount,
                    "date": date,
                },
            )
        summary = self.client.get(
            f"/api/transactions/summary/property/{prop['id']}", params={"year": 2024}
        ).json()
        self.assertEqual(len(summary), 1)
        self.assertEqual(summary[0]["category"], "utilities")
        self.assertEqual(Decimal(summary[0]["total_amount"]), Decimal("100"))
        self.assertEqual(summary[0]["transaction_count"], 2)

    def test_depreciation_total_and_uniqueness(self):
        prop = self._create_property()
        payload = {
            "property_id": prop["id"],
            "year": 2024,
            "straight_line": 1000,
            "bonus_depreciation": 2000,
            "section_179_deduction": 500,
        }
        response = self.client.post("/api/depreciation", json=payload)
        self.assertEqual(response.status_code, 201)
        record = response.json()
        self.assertEqual(Decimal(record["total_depreciation"]), Decimal("3500"))
        self.assertEqual(Decimal(record["business_use_percentage"]), Decimal("100"))

        duplicate = self.client.post("/api/depreciation", json=payload)
        self.assertEqual(duplicate.status_code, 400)
        self.assertIn("already exists", duplicate.json()["error"])

        response = self.client.put(
            f"/api/depreciation/{record['id']}", json={"straight_line": 1500}
        )
        self.assertEqual(Decimal(response.json()["total_depreciation"]), Decimal("4000"))

        summary = self.client.get(
            f"/api/depreciation/summary/property/{prop['id']}"
        ).json()
        self.assertEqual(summary[0]["year"], 2024)
        self.assertEqual(Decimal(summary[0]["total_depreciation"]), Decimal("4000"))

    def test_depreciation_update_into_existing_year_is_400(self):
        prop = self._create_property()
        first = self.client.post(
            "/api/depreciation", json={"property_id": prop["id"], "year": 2023}
        ).json()
        self.client.post("/api/depreciation", json={"property_id": prop["id"], "year": 2024})
        response = self.client.put(f"/api/depreciation/{first['id']}", json={"year": 2024})
        self.assertEqual(response.status_code, 400)

    def test_property_delete_cascades(self):
        prop = self._create_property()
        self._create_booking(prop["id"])
        self.client.post("/api/depreciation", json={"property_id": prop["id"], "year": 2024})
        self.client.delete(f"/api/properties/{prop['id']}")
        self.assertEqual(self.client.get("/api/bookings").json(), [])
        self.assertEqual(self.client.get("/api/transactions").json(), [])
        self.assertEqual(self.client.get("/api/depreciation").json(), [])

    def test_dashboard_overview_uses_camel_case_keys(self):
        prop = self._create_property()
        year = dt.date.today().year
        self._create_booking(
            prop["id"],
            check_in_date=f"{year}-01-10",
            check_out_date=f"{year}-01-12",
            total_amount=900,
        )
        overview = self.client.get("/api/dashboard/overview").json()
        self.assertEqual(
            set(overview),
            {"portfolio", "monthlyData", "cashFlowByProperty", "depreciation", "currentYear"},
        )
        self.assertEqual(overview["currentYear"], year)
        self.assertEqual(overview["portfolio"]["total_properties"], 1)
        self.assertEqual(overview["monthlyData"][0]["month"], 1)
        self.assertEqual(Decimal(overview["cashFlowByProperty"][0]["net_cash_flow"]), Decimal("900"))

    def test_dashboard_endpoints(self):
        prop = self._create_property()
        self._create_property(address="9 Hill St", property_type="house", purchase_price=500000)
        self._create_booking(prop["id"])

        performance = self.client.get("/api/dashboard/property-performance").json()
        self.assertEqual(performance[0]["id"], prop["id"])

        cashflow = self.client.get("/api/dashboard/monthly-cashflow", params={"year": 2024}).json()
        self.assertEqual(cashflow[0]["month"], 3)
        self.assertEqual(Decimal(cashflow[0]["net_cash_flow"]), Decimal("800"))

        categories = self.client.get(
            "/api/dashboard/transaction-categories", params={"year": 2024}
        ).json()
        self.assertEqual(categories[0]["category"], "rental_income")

        distribution = self.client.get("/api/dashboard/property-distribution").json()
        self.assertEqual(distribution[0]["property_type"], "house")
        self.assertEqual(self.client.get("/api/dashboard/depreciation-chart").json(), [])

    def test_tax_forms(self):
        prop = self._create_property()
        self._create_booking(prop["id"], total_amount=1200)
        self.client.post(
            "/api/depreciation",
            json={
                "property_id": prop["id"],
                "year": 2024,
                "bonus_depreciation": 3000,
                "section_179_deduction": 1000,
                "business_use_percentage": 50,
            },
        )

        forms = self.client.get("/api/tax-forms/forms/2024").json()
        self.assertEqual(forms["year"], 2024)
        self.assertEqual(len(forms["forms_needed"]), 4)
        self.assertEqual(Decimal(forms["totals"]["total_rental_income"]), Decimal("1200"))
        self.assertEqual(Decimal(forms["properties"][0]["annual_insurance"]), Decimal("1200"))

        section179 = self.client.get("/api/tax-forms/section179/2024").json()
        self.assertEqual(
            Decimal(section179[0]["qualified_business_use_amount"]), Decimal("150000")
        )
        bonus = self.client.get("/api/tax-forms/bonus-depreciation/2024").json()
        self.assertEqual(Decimal(bonus[0]["bonus_depreciation"]), Decimal("3000"))
        self.assertEqual(self.client.get("/api/tax-forms/section179/2023").json(), [])

        rental = self.client.get("/api/tax-forms/rental-income/2024").json()
        self.assertEqual(Decimal(rental[0]["net_rental_income"]), Decimal("1200"))
        expenses = self.client.get("/api/tax-forms/expenses/2024").json()
        self.assertEqual(Decimal(expenses[0]["annual_mortgage"]), Decimal("18000"))
        summary = self.client.get("/api/tax-forms/summary/2024").json()
        self.assertEqual(summary[0]["year"], 2024)

    def test_tax_document_download(self):
        prop = self._create_property()
        self._create_booking(prop["id"], total_amount=1234.56)
        response = self.client.get("/api/tax-forms/documents/2024/schedule-e")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/plain"))
        self.assertIn("schedule-e-2024.txt", response.headers["content-disposition"])
        self.assertIn("Line 1: Rents received: $1,235", response.text)

        response = self.client.get("/api/tax-forms/documents/2024/form-1040")
        self.assertEqual(response.status_code, 404)

    def test_unexpected_error_is_500(self):
        class BrokenDb(InMemoryDbClient):
            def list_properties(self):
                raise RuntimeError("boom")

        self.app.dependency_overrides[get_db_client] = lambda: BrokenDb()
        client = TestClient(self.app, raise_server_exceptions=False)
        with self.assertLogs("tracker.errors", level="ERROR"):
            response = client.get("/api/properties")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Something went wrong!"})


if __name__ == "__main__":
    unittest.main()

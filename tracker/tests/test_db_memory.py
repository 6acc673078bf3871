import datetime as dt
import unittest
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from tracker.db import InMemoryDbClient
from tracker.types import BookingStatus


class InMemoryDbClientTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def _property(self, n: int):
        return self.db.create_property(
            {
                "address": f"{n} Main St",
                "property_type": "house",
                "purchase_price": Decimal("100000"),
                "down_payment": Decimal("20000"),
                "monthly_mortgage": Decimal("500"),
            }
        )

    def test_concurrent_creates_get_distinct_ids(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            created = list(pool.map(self._property, range(200)))
        ids = sorted(p.id for p in created)
        self.assertEqual(ids, list(range(1, 201)))
        self.assertEqual(len(self.db.list_properties()), 200)

    def test_concurrent_bookings_each_get_an_income_transaction(self):
        prop = self._property(1)

        def book(n):
            return self.db.create_booking(
                {
                    "property_id": prop.id,
                    "guest_name": f"Guest {n}",
                    "check_in_date": dt.date(2024, 7, 1),
                    "check_out_date": dt.date(2024, 7, 3),
                    "total_amount": Decimal("300"),
                    "status": BookingStatus.CONFIRMED,
                    "notes": None,
                }
            )

        with ThreadPoolExecutor(max_workers=8) as pool:
            bookings = list(pool.map(book, range(50)))

        self.assertEqual(len({b.id for b in bookings}), 50)
        linked = {t.booking_id for t in self.db.list_transactions(prop.id)}
        self.assertEqual(linked, {b.id for b in bookings})

    def test_reset_restarts_ids(self):
        self._property(1)
        self.db.reset()
        self.assertEqual(self._property(2).id, 1)


if __name__ == "__main__":
    unittest.main()

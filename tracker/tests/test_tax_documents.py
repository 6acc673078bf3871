import datetime as dt
import unittest
from decimal import Decimal

from tracker import tax_documents
from tracker.reports import FORMS_NEEDED


def _forms_data():
    return {
        "year": 2024,
        "properties": [
            {
                "property_id": 1,
                "address": "1 Main St",
                "purchase_price": Decimal("250000"),
                "down_payment": Decimal("50000"),
                "annual_mortgage_interest": Decimal("14400"),
                "annual_property_taxes": Decimal("3000"),
                "annual_insurance": Decimal("1200"),
                "annual_hoa_fees": Decimal("600"),
                "section_179_deduction": Decimal("1000"),
                "bonus_depreciation": Decimal("2500.50"),
                "straight_line": Decimal("0"),
                "total_depreciation": Decimal("3500.50"),
                "placed_in_service_date": dt.date(2024, 1, 15),
                "business_use_percentage": Decimal("80.00"),
                "rental_income": Decimal("12345.67"),
                "other_expenses": Decimal("2000"),
                "net_rental_income": Decimal("10345.67"),
            },
            {
                "property_id": 2,
                "address": "9 Hill St",
                "purchase_price": Decimal("100000"),
                "down_payment": Decimal("20000"),
                "annual_mortgage_interest": Decimal("6000"),
                "annual_property_taxes": Decimal("1000"),
                "annual_insurance": Decimal("300"),
                "annual_hoa_fees": Decimal("0"),
                "section_179_deduction": None,
                "bonus_depreciation": None,
                "straight_line": None,
                "total_depreciation": None,
                "placed_in_service_date": None,
                "business_use_percentage": None,
                "rental_income": Decimal("0"),
                "other_expenses": Decimal("500"),
                "net_rental_income": Decimal("-500"),
            },
        ],
        "totals": {
            "total_purchase_price": Decimal("350000"),
            "total_section_179": Decimal("1000"),
            "total_bonus_depreciation": Decimal("2500.50"),
            "total_rental_income": Decimal("12345.67"),
            "total_expenses": Decimal("2500"),
            "total_net_income": Decimal("9845.67"),
        },
        "forms_needed": list(FORMS_NEEDED),
    }


class FormatCurrencyTests(unittest.TestCase):
    def test_whole_dollars(self):
        self.assertEqual(tax_documents.format_currency(Decimal("1234.5")), "$1,235")
        self.assertEqual(tax_documents.format_currency(Decimal("999.49")), "$999")
        self.assertEqual(tax_documents.format_currency(None), "$0")
        self.assertEqual(tax_documents.format_currency(Decimal("-500")), "-$500")


class TaxDocumentTests(unittest.TestCase):
    def setUp(self):
        self.data = _forms_data()

    def test_tax_report(self):
        text = tax_documents.render("tax-report", self.data)
        self.assertTrue(text.startswith("TAX REPORT FOR 2024"))
        self.assertIn("Property: 1 Main St", text)
        self.assertIn("Rental Income: $12,346", text)
        self.assertIn("Placed in Service: 2024-01-15", text)
        self.assertIn("Business Use %: 80%", text)
        self.assertIn("Placed in Service: N/A", text)
        self.assertIn("Total Net Income: $9,846", text)
        for form in FORMS_NEEDED:
            self.assertIn(f"- {form}", text)

    def test_form_4562(self):
        text = tax_documents.render("form-4562", self.data)
        self.assertIn(
            "Line 1: Total cost of section 179 property placed in service: $350,000", text
        )
        self.assertIn("Line 2: Total section 179 deduction: $1,000", text)
        self.assertIn("Line 14: Special depreciation allowance: $2,501", text)
        self.assertIn("Line 19: Total depreciation: $3,501", text)

    def test_schedule_e(self):
        text = tax_documents.render("schedule-e", self.data)
        self.assertIn("Property 1: 1 Main St", text)
        self.assertIn("Property 2: 9 Hill St", text)
        self.assertIn("Line 6: Mortgage interest: $14,400", text)
        self.assertIn("Line 13: Depreciation: $3,501", text)
        self.assertIn("Line 20: Net rental income (loss): -$500", text)
        self.assertIn("TOTAL NET RENTAL INCOME: $9,846", text)

    def test_schedule_c(self):
        text = tax_documents.render("schedule-c", self.data)
        self.assertIn("Line 1: Gross receipts or sales: $12,346", text)
        self.assertIn("Line 14: Insurance: $1,500", text)
        self.assertIn("Line 21: Taxes and licenses: $4,000", text)
        self.assertIn("Line 25: Other expenses: $600", text)
        self.assertIn("Line 26: Total expenses: $6,001", text)
        self.assertIn("Line 35: Net profit or (loss): $9,846", text)

    def test_unknown_form(self):
        with self.assertRaises(KeyError):
            tax_documents.render("form-1040", self.data)


if __name__ == "__main__":
    unittest.main()

"""
Plain-text tax worksheets rendered from the ``reports.tax_forms_data`` payload.

These are preparation aids for an accountant, not filled-in IRS forms.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict

RULE = "=" * 58


def format_currency(amount: Any) -> str:
    """Whole US dollars with thousands separators, e.g. ``$1,235``."""
    value = Decimal(amount or 0).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def _format_date(value: Any) -> str:
    return value.isoformat() if value else "N/A"


def _format_percentage(value: Any) -> str:
    if value is None:
        return "N/A"
    return f"{Decimal(value).normalize():f}%"


def _money(row: Dict[str, Any], key: str) -> Decimal:
    return Decimal(row.get(key) or 0)


def _depreciation_total(row: Dict[str, Any], s179: str, bonus: str) -> Decimal:
    return _money(row, s179) + _money(row, bonus)


def _join(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def tax_report(data: Dict[str, Any]) -> str:
    totals = data["totals"]
    lines = [f"TAX REPORT FOR {data['year']}", RULE, "", "PROPERTIES SUMMARY:"]
    for prop in data["properties"]:
        lines += [
            "",
            f"Property: {prop['address']}",
            f"Purchase Price: {format_currency(prop['purchase_price'])}",
            f"Section 179 Deduction: {format_currency(prop['section_179_deduction'])}",
            f"Bonus Depreciation: {format_currency(prop['bonus_depreciation'])}",
            f"Rental Income: {format_currency(prop['rental_income'])}",
            f"Net Rental Income: {format_currency(prop['net_rental_income'])}",
            f"Placed in Service: {_format_date(prop['placed_in_service_date'])}",
            f"Business Use %: {_format_percentage(prop['business_use_percentage'])}",
        ]
    lines += [
        "",
        "TOTALS:",
        f"Total Purchase Price: {format_currency(totals['total_purchase_price'])}",
        f"Total Section 179: {format_currency(totals['total_section_179'])}",
        f"Total Bonus Depreciation: {format_currency(totals['total_bonus_depreciation'])}",
        f"Total Rental Income: {format_currency(totals['total_rental_income'])}",
        f"Total Net Income: {format_currency(totals['total_net_income'])}",
        "",
        "FORMS NEEDED:",
        *(f"- {form}" for form in data["forms_needed"]),
    ]
    return _join(lines)


def form_4562(data: Dict[str, Any]) -> str:
    totals = data["totals"]
    lines = [
        f"FORM 4562 - DEPRECIATION AND AMORTIZATION ({data['year']})",
        RULE,
        "",
        "PART I - ELECTION TO EXPENSE CERTAIN PROPERTY UNDER SECTION 179",
        "Line 1: Total cost of section 179 property placed in service: "
        + format_currency(totals["total_purchase_price"]),
        f"Line 2: Total section 179 deduction: {format_currency(totals['total_section_179'])}",
        "",
        "PART II - SPECIAL DEPRECIATION ALLOWANCE AND OTHER DEPRECIATION",
        "Line 14: Special depreciation allowance: "
        + format_currency(totals["total_bonus_depreciation"]),
        "",
        "PART III - MACRS DEPRECIATION",
        "Line 19: Total depreciation: "
        + format_currency(
            _depreciation_total(totals, "total_section_179", "total_bonus_depreciation")
        ),
        "",
        "PROPERTY DETAILS:",
    ]
    for prop in data["properties"]:
        lines += [
            "",
            f"Property: {prop['address']}",
            f"Purchase Price: {format_currency(prop['purchase_price'])}",
            f"Section 179: {format_currency(prop['section_179_deduction'])}",
            f"Bonus Depreciation: {format_currency(prop['bonus_depreciation'])}",
            f"Placed in Service: {_format_date(prop['placed_in_service_date'])}",
            f"Business Use %: {_format_percentage(prop['business_use_percentage'])}",
        ]
    return _join(lines)


def schedule_e(data: Dict[str, Any]) -> str:
    lines = [
        f"SCHEDULE E - SUPPLEMENTAL INCOME AND LOSS ({data['year']})",
        RULE,
        "",
        "PART I - INCOME OR LOSS FROM RENTALS AND ROYALTIES",
        "",
        "Property Details:",
    ]
    for index, prop in enumerate(data["properties"], start=1):
        depreciation = _depreciation_total(prop, "section_179_deduction", "bonus_depreciation")
        lines += [
            "",
            f"Property {index}: {prop['address']}",
            f"Line 1: Rents received: {format_currency(prop['rental_income'])}",
            f"Line 5: Insurance: {format_currency(prop['annual_insurance'])}",
            f"Line 6: Mortgage interest: {format_currency(prop['annual_mortgage_interest'])}",
            "Line 7: Other interest: $0",
            "Line 8: Repairs: $0",
            "Line 9: Supplies: $0",
            f"Line 10: Taxes: {format_currency(prop['annual_property_taxes'])}",
            "Line 11: Utilities: $0",
            f"Line 12: Other: {format_currency(prop['annual_hoa_fees'])}",
            f"Line 13: Depreciation: {format_currency(depreciation)}",
            f"Line 20: Net rental income (loss): {format_currency(prop['net_rental_income'])}",
        ]
    lines += [
        "",
        f"TOTAL NET RENTAL INCOME: {format_currency(data['totals']['total_net_income'])}",
    ]
    return _join(lines)


def schedule_c(data: Dict[str, Any]) -> str:
    totals = data["totals"]
    properties = data["properties"]
    depreciation = _depreciation_total(totals, "total_section_179", "total_bonus_depreciation")
    insurance = sum((_money(p, "annual_insurance") for p in properties), Decimal(0))
    taxes = sum((_money(p, "annual_property_taxes") for p in properties), Decimal(0))
    hoa = sum((_money(p, "annual_hoa_fees") for p in properties), Decimal(0))
    lines = [
        f"SCHEDULE C - PROFIT OR LOSS FROM BUSINESS ({data['year']})",
        RULE,
        "",
        "Note: This form is used if you operate rental properties as a business.",
        "Most rental activities are reported on Schedule E, not Schedule C.",
        "",
        "PART I - INCOME",
        f"Line 1: Gross receipts or sales: {format_currency(totals['total_rental_income'])}",
        f"Line 6: Gross income: {format_currency(totals['total_rental_income'])}",
        "",
        "PART II - EXPENSES",
        "Line 8: Advertising: $0",
        "Line 9: Car and truck expenses: $0",
        "Line 10: Commissions and fees: $0",
        "Line 11: Contract labor: $0",
        f"Line 12: Depreciation and section 179: {format_currency(depreciation)}",
        "Line 13: Employee benefit programs: $0",
        f"Line 14: Insurance: {format_currency(insurance)}",
        "Line 15: Legal and professional services: $0",
        "Line 16: Office expense: $0",
        "Line 17: Pension and profit-sharing plans: $0",
        "Line 18: Rent or lease: $0",
        "Line 19: Repairs and maintenance: $0",
        "Line 20: Supplies: $0",
        f"Line 21: Taxes and licenses: {format_currency(taxes)}",
        "Line 22: Travel, meals, and entertainment: $0",
        "Line 23: Utilities: $0",
        "Line 24: Wages: $0",
        f"Line 25: Other expenses: {format_currency(hoa)}",
        "Line 26: Total expenses: "
        + format_currency(_money(totals, "total_expenses") + depreciation),
        "",
        f"Line 35: Net profit or (loss): {format_currency(totals['total_net_income'])}",
    ]
    return _join(lines)


RENDERERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "tax-report": tax_report,
    "schedule-e": schedule_e,
    "form-4562": form_4562,
    "schedule-c": schedule_c,
}


def render(form: str, data: Dict[str, Any]) -> str:
    """Render ``form`` by name; raises KeyError for unknown forms."""
    return RENDERERS[form](data)

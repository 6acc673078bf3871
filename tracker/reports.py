"""
Derived aggregates for dashboards and tax forms.

Every function here is pure: it takes the record lists returned by a
``DbClient`` (or plain documents from the document store) and returns
JSON-ready dicts. Both relational backends share these, so the in-memory
client and the SQL client always agree on the numbers.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence

from tracker.db import (
    BookingRecord,
    DepreciationRecord,
    PropertyRecord,
    TransactionRecord,
)
from tracker.types import BookingStatus, ITEMIZED_EXPENSE_CATEGORIES, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
MONTHS_PER_YEAR = 12
PROFESSIONAL_HOURS_THRESHOLD = 750

FORMS_NEEDED = [
    "Schedule E - Rental Income",
    "Form 4562 - Depreciation and Amortization",
    "Form 4797 - Sales of Business Property (if applicable)",
    "Schedule C - Business Income (if applicable)",
]


def _sum(values: Iterable[Any]) -> Decimal:
    return sum((Decimal(v or 0) for v in values), ZERO)


def _in_year(txn: TransactionRecord, year: Optional[int]) -> bool:
    return year is None or txn.date.year == year


def totals_by_property(
    transactions: Iterable[TransactionRecord], year: Optional[int] = None
) -> Dict[int, Dict[str, Decimal]]:
    """Income and expense sums keyed by property id."""
    totals: Dict[int, Dict[str, Decimal]] = defaultdict(
        lambda: {"total_income": ZERO, "total_expenses": ZERO}
    )
    for txn in transactions:
        if not _in_year(txn, year):
            continue
        key = "total_income" if txn.type == TransactionType.INCOME else "total_expenses"
        totals[txn.property_id][key] += Decimal(txn.amount)
    return dict(totals)


def _property_totals(
    totals: Dict[int, Dict[str, Decimal]], property_id: int
) -> Dict[str, Decimal]:
    return totals.get(property_id, {"total_income": ZERO, "total_expenses": ZERO})


def property_with_totals(
    prop: PropertyRecord, transactions: Iterable[TransactionRecord]
) -> Dict[str, Any]:
    totals = totals_by_property(transactions)
    return {**vars(prop), **_property_totals(totals, prop.id)}


def properties_with_totals(
    properties: Sequence[PropertyRecord], transactions: Iterable[TransactionRecord]
) -> list[Dict[str, Any]]:
    totals = totals_by_property(transactions)
    return [{**vars(p), **_property_totals(totals, p.id)} for p in properties]


def booking_stats(bookings: Sequence[BookingRecord]) -> Dict[str, Any]:
    total_revenue = _sum(b.total_amount for b in bookings)
    return {
        "total_bookings": len(bookings),
        "total_revenue": total_revenue,
        "avg_booking_amount": total_revenue / len(bookings) if bookings else None,
        "confirmed_bookings": sum(
            1 for b in bookings if b.status == BookingStatus.CONFIRMED
        ),
        "completed_bookings": sum(
            1 for b in bookings if b.status == BookingStatus.COMPLETED
        ),
    }


def _category_groups(
    transactions: Iterable[TransactionRecord], year: Optional[int]
) -> list[Dict[str, Any]]:
    groups: Dict[tuple[str, str], Dict[str, Any]] = {}
    for txn in transactions:
        if not _in_year(txn, year):
            continue
        key = (txn.category, TransactionType(txn.type).value)
        group = groups.setdefault(
            key,
            {
                "category": key[0],
                "type": key[1],
                "total_amount": ZERO,
                "transaction_count": 0,
            },
        )
        group["total_amount"] += Decimal(txn.amount)
        group["transaction_count"] += 1
    return list(groups.values())


def transaction_summary(
    transactions: Iterable[TransactionRecord], year: Optional[int] = None
) -> list[Dict[str, Any]]:
    """Totals per (category, type), ordered by category then type."""
    rows = _category_groups(transactions, year)
    rows.sort(key=lambda r: (r["category"], r["type"]))
    return rows


def depreciation_summary(
    records: Iterable[DepreciationRecord],
) -> list[Dict[str, Any]]:
    by_year: Dict[int, list[DepreciationRecord]] = defaultdict(list)
    for record in records:
        by_year[record.year].append(record)
    return [
        {
            "year": year,
            "total_straight_line": _sum(r.straight_line for r in items),
            "total_bonus_depreciation": _sum(r.bonus_depreciation for r in items),
            "total_depreciation": _sum(r.total_depreciation for r in items),
        }
        for year, items in sorted(by_year.items(), reverse=True)
    ]


# Dashboard


def property_performance(
    properties: Sequence[PropertyRecord], transactions: Iterable[TransactionRecord]
) -> list[Dict[str, Any]]:
    totals = totals_by_property(transactions)
    rows = []
    for prop in properties:
        income_expenses = _property_totals(totals, prop.id)
        rows.append(
            {
                "id": prop.id,
                "address": prop.address,
                "property_type": prop.property_type,
                "purchase_price": prop.purchase_price,
                **income_expenses,
                "net_cash_flow": income_expenses["total_income"]
                - income_expenses["total_expenses"],
            }
        )
    rows.sort(key=lambda r: (-r["net_cash_flow"], r["id"]))
    return rows


def monthly_cash_flow(
    transactions: Iterable[TransactionRecord], year: int
) -> list[Dict[str, Any]]:
    """Income, expenses and net per month; months without activity are omitted."""
    months: Dict[int, Dict[str, Any]] = {}
    for txn in transactions:
        if txn.date.year != year:
            continue
        row = months.setdefault(
            txn.date.month,
            {"month": txn.date.month, "income": ZERO, "expenses": ZERO},
        )
        if txn.type == TransactionType.INCOME:
            row["income"] += Decimal(txn.amount)
        else:
            row["expenses"] += Decimal(txn.amount)
    rows = [months[m] for m in sorted(months)]
    for row in rows:
        row["net_cash_flow"] = row["income"] - row["expenses"]
    return rows


def _year_depreciation_totals(
    records: Iterable[DepreciationRecord], year: int
) -> Dict[str, Decimal]:
    in_year = [r for r in records if r.year == year]
    return {
        "total_straight_line": _sum(r.straight_line for r in in_year),
        "total_bonus_depreciation": _sum(r.bonus_depreciation for r in in_year),
        "total_depreciation": _sum(r.total_depreciation for r in in_year),
    }


def portfolio_overview(
    properties: Sequence[PropertyRecord],
    transactions: Sequence[TransactionRecord],
    depreciation: Sequence[DepreciationRecord],
    year: int,
) -> Dict[str, Any]:
    purchase_value = _sum(p.purchase_price for p in properties)
    cash_flow = [
        {
            "id": row["id"],
            "address": row["address"],
            "total_income": row["total_income"],
            "total_expenses": row["total_expenses"],
            "net_cash_flow": row["net_cash_flow"],
        }
        for row in property_performance(properties, transactions)
    ]
    monthly = [
        {"month": row["month"], "income": row["income"], "expenses": row["expenses"]}
        for row in monthly_cash_flow(transactions, year)
    ]
    return {
        "portfolio": {
            "total_properties": len(properties),
            "total_purchase_value": purchase_value,
            "total_portfolio_value": purchase_value,
        },
        "monthly_data": monthly,
        "cash_flow_by_property": cash_flow,
        "depreciation": _year_depreciation_totals(depreciation, year),
        "current_year": year,
    }


def depreciation_chart(
    records: Iterable[DepreciationRecord], limit: int = 10
) -> list[Dict[str, Any]]:
    return [
        {
            "year": row["year"],
            "straight_line_total": row["total_straight_line"],
            "bonus_depreciation_total": row["total_bonus_depreciation"],
            "total_depreciation": row["total_depreciation"],
        }
        for row in depreciation_summary(records)[:limit]
    ]


def transaction_categories(
    transactions: Iterable[TransactionRecord], year: int
) -> list[Dict[str, Any]]:
    """Totals per (category, type) for a year, ordered by type then largest total."""
    rows = _category_groups(transactions, year)
    rows.sort(key=lambda r: (r["type"], -r["total_amount"], r["category"]))
    return rows


def property_distribution(
    properties: Iterable[PropertyRecord],
) -> list[Dict[str, Any]]:
    by_type: Dict[str, list[PropertyRecord]] = defaultdict(list)
    for prop in properties:
        by_type[prop.property_type].append(prop)
    rows = []
    for property_type, items in by_type.items():
        total = _sum(p.purchase_price for p in items)
        rows.append(
            {
                "property_type": property_type,
                "property_count": len(items),
                "total_value": total,
                "avg_value": total / len(items),
            }
        )
    rows.sort(key=lambda r: (-r["total_value"], r["property_type"]))
    return rows


# Tax forms


def _depreciation_for_year(
    records: Iterable[DepreciationRecord], year: int
) -> Dict[int, DepreciationRecord]:
    return {r.property_id: r for r in records if r.year == year}


def _by_address(properties: Iterable[PropertyRecord]) -> list[PropertyRecord]:
    return sorted(properties, key=lambda p: (p.address, p.id))


def _depreciation_fields(record: Optional[DepreciationRecord]) -> Dict[str, Any]:
    if record is None:
        return {
            "year": None,
            "straight_line": None,
            "bonus_depreciation": None,
            "section_179_deduction": None,
            "total_depreciation": None,
            "placed_in_service_date": None,
            "business_use_percentage": None,
        }
    return {
        "year": record.year,
        "straight_line": record.straight_line,
        "bonus_depreciation": record.bonus_depreciation,
        "section_179_deduction": record.section_179_deduction,
        "total_depreciation": record.total_depreciation,
        "placed_in_service_date": record.placed_in_service_date,
        "business_use_percentage": record.business_use_percentage,
    }


def tax_summary(
    properties: Sequence[PropertyRecord],
    transactions: Iterable[TransactionRecord],
    depreciation: Iterable[DepreciationRecord],
    year: int,
) -> list[Dict[str, Any]]:
    totals = totals_by_property(transactions, year)
    records = _depreciation_for_year(depreciation, year)
    rows = []
    for prop in _by_address(properties):
        rows.append(
            {
                "property_id": prop.id,
                "address": prop.address,
                "purchase_price": prop.purchase_price,
                "down_payment": prop.down_payment,
                "monthly_mortgage": prop.monthly_mortgage,
                "monthly_taxes": prop.monthly_taxes,
                "monthly_insurance": prop.monthly_insurance,
                "monthly_hoa_fees": prop.monthly_hoa_fees,
                **_depreciation_fields(records.get(prop.id)),
                **_property_totals(totals, prop.id),
            }
        )
    return rows


def section_179_summary(
    properties: Sequence[PropertyRecord],
    depreciation: Iterable[DepreciationRecord],
    year: int,
) -> list[Dict[str, Any]]:
    records = _depreciation_for_year(depreciation, year)
    rows = []
    for prop in _by_address(properties):
        record = records.get(prop.id)
        if record is None or Decimal(record.section_179_deduction) <= 0:
            continue
        rows.append(
            {
                "property_id": prop.id,
                "address": prop.address,
                "purchase_price": prop.purchase_price,
                "section_179_deduction": record.section_179_deduction,
                "placed_in_service_date": record.placed_in_service_date,
                "business_use_percentage": record.business_use_percentage,
                "qualified_business_use_amount": Decimal(prop.purchase_price)
                * Decimal(record.business_use_percentage)
                / 100,
            }
        )
    return rows


def bonus_depreciation_summary(
    properties: Sequence[PropertyRecord],
    depreciation: Iterable[DepreciationRecord],
    year: int,
) -> list[Dict[str, Any]]:
    records = _depreciation_for_year(depreciation, year)
    rows = []
    for prop in _by_address(properties):
        record = records.get(prop.id)
        if record is None or Decimal(record.bonus_depreciation) <= 0:
            continue
        rows.append(
            {
                "property_id": prop.id,
                "address": prop.address,
                "purchase_price": prop.purchase_price,
                "bonus_depreciation": record.bonus_depreciation,
                "placed_in_service_date": record.placed_in_service_date,
                "business_use_percentage": record.business_use_percentage,
            }
        )
    return rows


def rental_income_summary(
    properties: Sequence[PropertyRecord],
    transactions: Iterable[TransactionRecord],
    year: int,
) -> list[Dict[str, Any]]:
    totals = totals_by_property(transactions, year)
    rows = []
    for prop in _by_address(properties):
        income_expenses = _property_totals(totals, prop.id)
        rows.append(
            {
                "property_id": prop.id,
                "address": prop.address,
                "rental_income": income_expenses["total_income"],
                "rental_expenses": income_expenses["total_expenses"],
                "net_rental_income": income_expenses["total_income"]
                - income_expenses["total_expenses"],
            }
        )
    return rows


def expense_breakdown(
    properties: Sequence[PropertyRecord],
    transactions: Iterable[TransactionRecord],
    year: int,
) -> list[Dict[str, Any]]:
    buckets: Dict[int, Dict[str, Decimal]] = defaultdict(
        lambda: {"maintenance": ZERO, "utilities": ZERO, "repairs": ZERO, "other": ZERO}
    )
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE or txn.date.year != year:
            continue
        bucket = txn.category if txn.category in ITEMIZED_EXPENSE_CATEGORIES else "other"
        buckets[txn.property_id][bucket] += Decimal(txn.amount)

    rows = []
    for prop in _by_address(properties):
        spent = buckets[prop.id]
        rows.append(
            {
                "property_id": prop.id,
                "address": prop.address,
                "annual_mortgage": Decimal(prop.monthly_mortgage) * MONTHS_PER_YEAR,
                "annual_taxes": Decimal(prop.monthly_taxes) * MONTHS_PER_YEAR,
                "annual_insurance": Decimal(prop.monthly_insurance) * MONTHS_PER_YEAR,
                "annual_hoa_fees": Decimal(prop.monthly_hoa_fees) * MONTHS_PER_YEAR,
                "maintenance_expenses": spent["maintenance"],
                "utility_expenses": spent["utilities"],
                "repair_expenses": spent["repairs"],
                "other_expenses": spent["other"],
            }
        )
    return rows


def tax_forms_data(
    properties: Sequence[PropertyRecord],
    transactions: Iterable[TransactionRecord],
    depreciation: Iterable[DepreciationRecord],
    year: int,
) -> Dict[str, Any]:
    """Everything an accountant needs for the year: per-property rows plus totals."""
    totals = totals_by_property(transactions, year)
    records = _depreciation_for_year(depreciation, year)
    rows = []
    for prop in _by_address(properties):
        record = records.get(prop.id)
        income_expenses = _property_totals(totals, prop.id)
        dep = _depreciation_fields(record)
        dep.pop("year")
        rows.append(
            {
                "property_id": prop.id,
                "address": prop.address,
                "purchase_price": prop.purchase_price,
                "down_payment": prop.down_payment,
                "annual_mortgage_interest": Decimal(prop.monthly_mortgage)
                * MONTHS_PER_YEAR,
                "annual_property_taxes": Decimal(prop.monthly_taxes) * MONTHS_PER_YEAR,
                "annual_insurance": Decimal(prop.monthly_insurance) * MONTHS_PER_YEAR,
                "annual_hoa_fees": Decimal(prop.monthly_hoa_fees) * MONTHS_PER_YEAR,
                **dep,
                "rental_income": income_expenses["total_income"],
                "other_expenses": income_expenses["total_expenses"],
                "net_rental_income": income_expenses["total_income"]
                - income_expenses["total_expenses"],
            }
        )

    return {
        "year": year,
        "properties": rows,
        "totals": {
            "total_purchase_price": _sum(r["purchase_price"] for r in rows),
            "total_section_179": _sum(r["section_179_deduction"] for r in rows),
            "total_bonus_depreciation": _sum(r["bonus_depreciation"] for r in rows),
            "total_rental_income": _sum(r["rental_income"] for r in rows),
            "total_expenses": _sum(r["other_expenses"] for r in rows),
            "total_net_income": _sum(r["net_rental_income"] for r in rows),
        },
        "forms_needed": list(FORMS_NEEDED),
    }


# Material participation


def _log_hours(log: Dict[str, Any]) -> float:
    try:
        return float(log.get("hours") or 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparseable hours on log %s", log.get("id"))
        return 0.0


def _log_year(log: Dict[str, Any]) -> Optional[int]:
    raw = log.get("date")
    if not raw:
        return None
    try:
        return dt.date.fromisoformat(str(raw)[:10]).year
    except ValueError:
        return None


def material_participation_summary(
    logs: Iterable[Dict[str, Any]],
    properties: Iterable[Dict[str, Any]],
    year: int,
) -> Dict[str, Any]:
    """Hours worked, overall and for ``year``, grouped by property address."""
    addresses = {str(p.get("id")): p.get("address") for p in properties}
    total_hours = 0.0
    year_hours = 0.0
    by_property: Dict[str, Dict[str, Any]] = {}
    for log in logs:
        hours = _log_hours(log)
        total_hours += hours
        if _log_year(log) == year:
            year_hours += hours
        name = addresses.get(str(log.get("property_id"))) or "Unknown Property"
        group = by_property.setdefault(name, {"property": name, "hours": 0.0, "log_count": 0})
        group["hours"] += hours
        group["log_count"] += 1

    return {
        "year": year,
        "total_hours": total_hours,
        "year_hours": year_hours,
        "threshold_hours": PROFESSIONAL_HOURS_THRESHOLD,
        "meets_professional_threshold": year_hours > PROFESSIONAL_HOURS_THRESHOLD,
        "hours_by_property": sorted(by_property.values(), key=lambda g: g["property"]),
    }

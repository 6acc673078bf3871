from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from tracker import reports, tax_documents
from tracker.db import DbClient
from tracker.dependencies import get_db_client
from tracker.schemas import (
    BonusDepreciationRow,
    ExpenseBreakdownRow,
    RentalIncomeRow,
    Section179Row,
    TaxFormsResponse,
    TaxSummaryRow,
)

router = APIRouter(prefix="/tax-forms", tags=["tax-forms"])


@router.get("/summary/{year}", response_model=list[TaxSummaryRow])
def tax_summary(year: int, db: DbClient = Depends(get_db_client)):
    return reports.tax_summary(
        db.list_properties(), db.list_transactions(), db.list_depreciation(), year
    )


@router.get("/section179/{year}", response_model=list[Section179Row])
def section_179(year: int, db: DbClient = Depends(get_db_client)):
    return reports.section_179_summary(db.list_properties(), db.list_depreciation(), year)


@router.get("/bonus-depreciation/{year}", response_model=list[BonusDepreciationRow])
def bonus_depreciation(year: int, db: DbClient = Depends(get_db_client)):
    return reports.bonus_depreciation_summary(
        db.list_properties(), db.list_depreciation(), year
    )


@router.get("/rental-income/{year}", response_model=list[RentalIncomeRow])
def rental_income(year: int, db: DbClient = Depends(get_db_client)):
    return reports.rental_income_summary(db.list_properties(), db.list_transactions(), year)


@router.get("/expenses/{year}", response_model=list[ExpenseBreakdownRow])
def expenses(year: int, db: DbClient = Depends(get_db_client)):
    return reports.expense_breakdown(db.list_properties(), db.list_transactions(), year)


def _forms_data(db: DbClient, year: int) -> dict:
    return reports.tax_forms_data(
        db.list_properties(), db.list_transactions(), db.list_depreciation(), year
    )


@router.get("/forms/{year}", response_model=TaxFormsResponse)
def tax_forms(year: int, db: DbClient = Depends(get_db_client)):
    return _forms_data(db, year)


@router.get("/documents/{year}/{form}", response_class=PlainTextResponse)
def tax_document(year: int, form: str, db: DbClient = Depends(get_db_client)):
    """Download a plain-text worksheet (tax-report, schedule-e, form-4562, schedule-c)."""
    if form not in tax_documents.RENDERERS:
        raise HTTPException(status_code=404, detail=f"Unknown tax form: {form}")
    body = tax_documents.render(form, _forms_data(db, year))
    return PlainTextResponse(
        body,
        headers={"Content-Disposition": f'attachment; filename="{form}-{year}.txt"'},
    )

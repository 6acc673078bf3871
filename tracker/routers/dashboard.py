from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tracker import reports
from tracker.db import DbClient
from tracker.dependencies import get_db_client
from tracker.schemas import (
    CategorySummary,
    DashboardOverview,
    DepreciationChartPoint,
    MonthlyCashFlow,
    PropertyPerformance,
    PropertyTypeDistribution,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _year_or_current(year: Optional[int]) -> int:
    return year if year is not None else dt.date.today().year


@router.get("/overview", response_model=DashboardOverview)
def overview(db: DbClient = Depends(get_db_client)):
    return reports.portfolio_overview(
        db.list_properties(),
        db.list_transactions(),
        db.list_depreciation(),
        dt.date.today().year,
    )


@router.get("/property-performance", response_model=list[PropertyPerformance])
def property_performance(db: DbClient = Depends(get_db_client)):
    return reports.property_performance(db.list_properties(), db.list_transactions())


@router.get("/monthly-cashflow", response_model=list[MonthlyCashFlow])
def monthly_cashflow(
    year: Optional[int] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    return reports.monthly_cash_flow(db.list_transactions(), _year_or_current(year))


@router.get("/depreciation-chart", response_model=list[DepreciationChartPoint])
def depreciation_chart(db: DbClient = Depends(get_db_client)):
    return reports.depreciation_chart(db.list_depreciation())


@router.get("/transaction-categories", response_model=list[CategorySummary])
def transaction_categories(
    year: Optional[int] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    return reports.transaction_categories(
        db.list_transactions(), _year_or_current(year)
    )


@router.get("/property-distribution", response_model=list[PropertyTypeDistribution])
def property_distribution(db: DbClient = Depends(get_db_client)):
    return reports.property_distribution(db.list_properties())

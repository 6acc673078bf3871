"""
Pydantic schemas for the tracker API.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracker.types import BookingStatus, TransactionType


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: Literal["OK"]
    timestamp: str


class PartialUpdate(BaseModel):
    """Body of a PUT: only the fields the client sent are applied."""

    # Fields that may be explicitly cleared with null.
    nullable_fields: ClassVar[tuple[str, ...]] = ()

    def changes(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in self.nullable_fields
        }


# Properties


class PropertyCreate(BaseModel):
    address: str = Field(..., min_length=1, max_length=255)
    property_type: str = Field(..., min_length=1, max_length=100)
    purchase_price: Decimal = Field(..., gt=0)
    down_payment: Decimal = Field(..., ge=0)
    monthly_mortgage: Decimal = Field(..., ge=0)
    monthly_taxes: Decimal = Field(default=Decimal("0"), ge=0)
    monthly_insurance: Decimal = Field(default=Decimal("0"), ge=0)
    monthly_hoa_fees: Decimal = Field(default=Decimal("0"), ge=0)


class PropertyUpdate(PartialUpdate):
    address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    property_type: Optional[str] = Field(default=None, min_length=1, max_length=100)
    purchase_price: Optional[Decimal] = Field(default=None, gt=0)
    down_payment: Optional[Decimal] = Field(default=None, ge=0)
    monthly_mortgage: Optional[Decimal] = Field(default=None, ge=0)
    monthly_taxes: Optional[Decimal] = Field(default=None, ge=0)
    monthly_insurance: Optional[Decimal] = Field(default=None, ge=0)
    monthly_hoa_fees: Optional[Decimal] = Field(default=None, ge=0)


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    address: str
    property_type: str
    purchase_price: Decimal
    down_payment: Decimal
    monthly_mortgage: Decimal
    monthly_taxes: Decimal
    monthly_insurance: Decimal
    monthly_hoa_fees: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")


# Bookings


class BookingCreate(BaseModel):
    property_id: int
    guest_name: str = Field(..., min_length=1, max_length=255)
    check_in_date: dt.date
    check_out_date: dt.date
    total_amount: Decimal = Field(..., ge=0)
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        if self.check_out_date < self.check_in_date:
            raise ValueError("check_out_date must not be before check_in_date")
        return self


class BookingUpdate(PartialUpdate):
    nullable_fields = ("notes",)

    guest_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    check_in_date: Optional[dt.date] = None
    check_out_date: Optional[dt.date] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    guest_name: str
    check_in_date: dt.date
    check_out_date: dt.date
    total_amount: Decimal
    status: BookingStatus
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
    property_address: Optional[str] = None


class BookingStatsResponse(BaseModel):
    total_bookings: int
    total_revenue: Decimal
    avg_booking_amount: Optional[Decimal] = None
    confirmed_bookings: int
    completed_bookings: int


# Transactions


class TransactionCreate(BaseModel):
    property_id: int
    booking_id: Optional[int] = None
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    date: dt.date


class TransactionUpdate(PartialUpdate):
    nullable_fields = ("booking_id", "description")

    property_id: Optional[int] = None
    booking_id: Optional[int] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    description: Optional[str] = None
    date: Optional[dt.date] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    booking_id: Optional[int] = None
    type: TransactionType
    category: str
    amount: Decimal
    description: Optional[str] = None
    date: dt.date
    created_at: dt.datetime
    property_address: Optional[str] = None


class CategorySummary(BaseModel):
    category: str
    type: TransactionType
    total_amount: Decimal
    transaction_count: int


# Depreciation


class DepreciationCreate(BaseModel):
    property_id: int
    year: int = Field(..., ge=1900, le=2200)
    straight_line: Decimal = Field(default=Decimal("0"), ge=0)
    bonus_depreciation: Decimal = Field(default=Decimal("0"), ge=0)
    section_179_deduction: Decimal = Field(default=Decimal("0"), ge=0)
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Decimal = Field(default=Decimal("100"), ge=0, le=100)


class DepreciationUpdate(PartialUpdate):
    nullable_fields = ("placed_in_service_date",)

    property_id: Optional[int] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2200)
    straight_line: Optional[Decimal] = Field(default=None, ge=0)
    bonus_depreciation: Optional[Decimal] = Field(default=None, ge=0)
    section_179_deduction: Optional[Decimal] = Field(default=None, ge=0)
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)


class DepreciationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    year: int
    straight_line: Decimal
    bonus_depreciation: Decimal
    section_179_deduction: Decimal
    total_depreciation: Decimal
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime
    property_address: Optional[str] = None


class DepreciationYearSummary(BaseModel):
    year: int
    total_straight_line: Decimal
    total_bonus_depreciation: Decimal
    total_depreciation: Decimal


# Dashboard


class PortfolioTotals(BaseModel):
    total_properties: int
    total_purchase_value: Decimal
    total_portfolio_value: Decimal


class MonthlyIncomeExpenses(BaseModel):
    month: int
    income: Decimal
    expenses: Decimal


class MonthlyCashFlow(MonthlyIncomeExpenses):
    net_cash_flow: Decimal


class PropertyCashFlow(BaseModel):
    id: int
    address: str
    total_income: Decimal
    total_expenses: Decimal
    net_cash_flow: Decimal


class PropertyPerformance(PropertyCashFlow):
    property_type: str
    purchase_price: Decimal


class DepreciationTotals(BaseModel):
    total_straight_line: Decimal
    total_bonus_depreciation: Decimal
    total_depreciation: Decimal


class DashboardOverview(BaseModel):
    # Wire keys stay camelCase for existing dashboard clients.
    model_config = ConfigDict(populate_by_name=True)

    portfolio: PortfolioTotals
    monthly_data: list[MonthlyIncomeExpenses] = Field(alias="monthlyData")
    cash_flow_by_property: list[PropertyCashFlow] = Field(alias="cashFlowByProperty")
    depreciation: DepreciationTotals
    current_year: int = Field(alias="currentYear")


class DepreciationChartPoint(BaseModel):
    year: int
    straight_line_total: Decimal
    bonus_depreciation_total: Decimal
    total_depreciation: Decimal


class PropertyTypeDistribution(BaseModel):
    property_type: str
    property_count: int
    total_value: Decimal
    avg_value: Decimal


# Tax forms


class TaxSummaryRow(BaseModel):
    property_id: int
    address: str
    purchase_price: Decimal
    down_payment: Decimal
    monthly_mortgage: Decimal
    monthly_taxes: Decimal
    monthly_insurance: Decimal
    monthly_hoa_fees: Decimal
    year: Optional[int] = None
    straight_line: Optional[Decimal] = None
    bonus_depreciation: Optional[Decimal] = None
    section_179_deduction: Optional[Decimal] = None
    total_depreciation: Optional[Decimal] = None
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Optional[Decimal] = None
    total_income: Decimal
    total_expenses: Decimal


class Section179Row(BaseModel):
    property_id: int
    address: str
    purchase_price: Decimal
    section_179_deduction: Decimal
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Decimal
    qualified_business_use_amount: Decimal


class BonusDepreciationRow(BaseModel):
    property_id: int
    address: str
    purchase_price: Decimal
    bonus_depreciation: Decimal
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Decimal


class RentalIncomeRow(BaseModel):
    property_id: int
    address: str
    rental_income: Decimal
    rental_expenses: Decimal
    net_rental_income: Decimal


class ExpenseBreakdownRow(BaseModel):
    property_id: int
    address: str
    annual_mortgage: Decimal
    annual_taxes: Decimal
    annual_insurance: Decimal
    annual_hoa_fees: Decimal
    maintenance_expenses: Decimal
    utility_expenses: Decimal
    repair_expenses: Decimal
    other_expenses: Decimal


class TaxFormPropertyRow(BaseModel):
    property_id: int
    address: str
    purchase_price: Decimal
    down_payment: Decimal
    annual_mortgage_interest: Decimal
    annual_property_taxes: Decimal
    annual_insurance: Decimal
    annual_hoa_fees: Decimal
    section_179_deduction: Optional[Decimal] = None
    bonus_depreciation: Optional[Decimal] = None
    straight_line: Optional[Decimal] = None
    total_depreciation: Optional[Decimal] = None
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Optional[Decimal] = None
    rental_income: Decimal
    other_expenses: Decimal
    net_rental_income: Decimal


class TaxFormTotals(BaseModel):
    total_purchase_price: Decimal
    total_section_179: Decimal
    total_bonus_depreciation: Decimal
    total_rental_income: Decimal
    total_expenses: Decimal
    total_net_income: Decimal


class TaxFormsResponse(BaseModel):
    year: int
    properties: list[TaxFormPropertyRow]
    totals: TaxFormTotals
    forms_needed: list[str]


# Document store


class ConnectionStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_online: bool = Field(alias="isOnline")
    storage: Literal["firebase", "localStorage"]
    remote_configured: bool = Field(alias="remoteConfigured")


class ConnectivityRequest(BaseModel):
    online: bool


class SyncResponse(BaseModel):
    synced: int
    failed: int


class ConnectivityResponse(BaseModel):
    status: ConnectionStatusResponse
    sync: Optional[SyncResponse] = None


class ImportRequest(BaseModel):
    """A document export; collections left out or null are not touched."""

    model_config = ConfigDict(populate_by_name=True)

    properties: Optional[list[dict[str, Any]]] = None
    bookings: Optional[list[dict[str, Any]]] = None
    expenses: Optional[list[dict[str, Any]]] = None
    depreciation: Optional[list[dict[str, Any]]] = None
    material_participation: Optional[list[dict[str, Any]]] = Field(
        default=None, alias="materialParticipation"
    )
    tax_estimates: Optional[list[dict[str, Any]]] = Field(
        default=None, alias="taxEstimates"
    )
    settings: Optional[dict[str, Any]] = None


class ImportResponse(BaseModel):
    status: Literal["ok"]


class PropertyHours(BaseModel):
    property: str
    hours: float
    log_count: int


class MaterialParticipationSummary(BaseModel):
    year: int
    total_hours: float
    year_hours: float
    threshold_hours: int
    meets_professional_threshold: bool
    hours_by_property: list[PropertyHours]

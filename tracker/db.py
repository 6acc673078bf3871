"""
Relational store abstraction with a SQLAlchemy implementation and an
in-memory implementation for development and tests.
"""

from __future__ import annotations

import datetime as dt
import functools
import logging
import threading
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from tracker.types import BookingStatus, RENTAL_INCOME_CATEGORY, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class DuplicateDepreciationError(ValueError):
    """A depreciation record already exists for the property and year."""

    def __init__(self, property_id: int, year: int):
        super().__init__(
            f"Depreciation record already exists for property {property_id} "
            f"and year {year}"
        )
        self.property_id = property_id
        self.year = year


@dataclass
class PropertyRecord:
    id: int
    address: str
    property_type: str
    purchase_price: Decimal
    down_payment: Decimal
    monthly_mortgage: Decimal
    monthly_taxes: Decimal = ZERO
    monthly_insurance: Decimal = ZERO
    monthly_hoa_fees: Decimal = ZERO
    created_at: dt.datetime = field(default_factory=_utcnow)
    updated_at: dt.datetime = field(default_factory=_utcnow)


@dataclass
class BookingRecord:
    id: int
    property_id: int
    guest_name: str
    check_in_date: dt.date
    check_out_date: dt.date
    total_amount: Decimal
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: Optional[str] = None
    created_at: dt.datetime = field(default_factory=_utcnow)
    updated_at: dt.datetime = field(default_factory=_utcnow)
    property_address: Optional[str] = None


@dataclass
class TransactionRecord:
    id: int
    property_id: int
    type: TransactionType
    category: str
    amount: Decimal
    date: dt.date
    booking_id: Optional[int] = None
    description: Optional[str] = None
    created_at: dt.datetime = field(default_factory=_utcnow)
    property_address: Optional[str] = None


@dataclass
class DepreciationRecord:
    id: int
    property_id: int
    year: int
    straight_line: Decimal = ZERO
    bonus_depreciation: Decimal = ZERO
    section_179_deduction: Decimal = ZERO
    total_depreciation: Decimal = ZERO
    placed_in_service_date: Optional[dt.date] = None
    business_use_percentage: Decimal = Decimal("100")
    created_at: dt.datetime = field(default_factory=_utcnow)
    updated_at: dt.datetime = field(default_factory=_utcnow)
    property_address: Optional[str] = None


def total_depreciation(
    straight_line: Decimal, bonus_depreciation: Decimal, section_179_deduction: Decimal
) -> Decimal:
    return (
        Decimal(straight_line or 0)
        + Decimal(bonus_depreciation or 0)
        + Decimal(section_179_deduction or 0)
    )


def _booking_income(booking_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """Fields of the income transaction written alongside a new booking."""
    return {
        "property_id": data["property_id"],
        "booking_id": booking_id,
        "type": TransactionType.INCOME,
        "category": RENTAL_INCOME_CATEGORY,
        "amount": data["total_amount"],
        "description": f"Rental income for {data['guest_name']}",
        "date": data["check_in_date"],
    }


class DbClient(Protocol):
    """Interface for relational store access."""

    def list_properties(self) -> list[PropertyRecord]:
        ...

    def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        ...

    def create_property(self, data: Dict[str, Any]) -> PropertyRecord:
        ...

    def update_property(
        self, property_id: int, changes: Dict[str, Any]
    ) -> Optional[PropertyRecord]:
        ...

    def delete_property(self, property_id: int) -> bool:
        ...

    def list_bookings(self, property_id: Optional[int] = None) -> list[BookingRecord]:
        ...

    def get_booking(self, booking_id: int) -> Optional[BookingRecord]:
        ...

    def create_booking(self, data: Dict[str, Any]) -> BookingRecord:
        ...

    def update_booking(
        self, booking_id: int, changes: Dict[str, Any]
    ) -> Optional[BookingRecord]:
        ...

    def delete_booking(self, booking_id: int) -> bool:
        ...

    def list_transactions(
        self, property_id: Optional[int] = None
    ) -> list[TransactionRecord]:
        ...

    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        ...

    def create_transaction(self, data: Dict[str, Any]) -> TransactionRecord:
        ...

    def update_transaction(
        self, transaction_id: int, changes: Dict[str, Any]
    ) -> Optional[TransactionRecord]:
        ...

    def delete_transaction(self, transaction_id: int) -> bool:
        ...

    def list_depreciation(
        self, property_id: Optional[int] = None
    ) -> list[DepreciationRecord]:
        ...

    def get_depreciation(self, record_id: int) -> Optional[DepreciationRecord]:
        ...

    def find_depreciation(
        self, property_id: int, year: int
    ) -> Optional[DepreciationRecord]:
        ...

    def create_depreciation(self, data: Dict[str, Any]) -> DepreciationRecord:
        ...

    def update_depreciation(
        self, record_id: int, changes: Dict[str, Any]
    ) -> Optional[DepreciationRecord]:
        ...

    def delete_depreciation(self, record_id: int) -> bool:
        ...


def _synchronized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.properties: Dict[int, PropertyRecord] = {}
        self.bookings: Dict[int, BookingRecord] = {}
        self.transactions: Dict[int, TransactionRecord] = {}
        self.depreciation: Dict[int, DepreciationRecord] = {}
        self._last_ids: Dict[str, int] = {}
        self._lock = threading.RLock()

    @_synchronized
    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.properties.clear()
        self.bookings.clear()
        self.transactions.clear()
        self.depreciation.clear()
        self._last_ids.clear()

    def _next_id(self, table: str) -> int:
        self._last_ids[table] = self._last_ids.get(table, 0) + 1
        return self._last_ids[table]

    def _address(self, property_id: int) -> Optional[str]:
        prop = self.properties.get(property_id)
        return prop.address if prop else None

    def _view(self, record):
        # Hand out copies so callers cannot mutate stored state.
        if hasattr(record, "property_address"):
            return replace(record, property_address=self._address(record.property_id))
        return replace(record)

    # Properties

    def list_properties(self) -> list[PropertyRecord]:
        items = sorted(
            self.properties.values(),
            key=lambda p: (p.created_at, p.id),
            reverse=True,
        )
        return [self._view(p) for p in items]

    def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        prop = self.properties.get(property_id)
        return self._view(prop) if prop else None

    @_synchronized
    def create_property(self, data: Dict[str, Any]) -> PropertyRecord:
        record = PropertyRecord(id=self._next_id("properties"), **data)
        self.properties[record.id] = record
        return self._view(record)

    @_synchronized
    def update_property(
        self, property_id: int, changes: Dict[str, Any]
    ) -> Optional[PropertyRecord]:
        prop = self.properties.get(property_id)
        if not prop:
            return None
        for name, value in changes.items():
            setattr(prop, name, value)
        prop.updated_at = _utcnow()
        return self._view(prop)

    @_synchronized
    def delete_property(self, property_id: int) -> bool:
        if self.properties.pop(property_id, None) is None:
            return False
        for table in (self.bookings, self.transactions, self.depreciation):
            for key in [k for k, v in table.items() if v.property_id == property_id]:
                del table[key]
        return True

    # Bookings

    def list_bookings(self, property_id: Optional[int] = None) -> list[BookingRecord]:
        items = [
            b
            for b in self.bookings.values()
            if property_id is None or b.property_id == property_id
        ]
        items.sort(key=lambda b: (b.check_in_date, b.id), reverse=True)
        return [self._view(b) for b in items]

    def get_booking(self, booking_id: int) -> Optional[BookingRecord]:
        booking = self.bookings.get(booking_id)
        return self._view(booking) if booking else None

    @_synchronized
    def create_booking(self, data: Dict[str, Any]) -> BookingRecord:
        record = BookingRecord(id=self._next_id("bookings"), **data)
        self.bookings[record.id] = record
        self.create_transaction(_booking_income(record.id, data))
        return self._view(record)

    @_synchronized
    def update_booking(
        self, booking_id: int, changes: Dict[str, Any]
    ) -> Optional[BookingRecord]:
        booking = self.bookings.get(booking_id)
        if not booking:
            return None
        for name, value in changes.items():
            setattr(booking, name, value)
        booking.updated_at = _utcnow()
        return self._view(booking)

    @_synchronized
    def delete_booking(self, booking_id: int) -> bool:
        if self.bookings.pop(booking_id, None) is None:
            return False
        for txn in self.transactions.values():
            if txn.booking_id == booking_id:
                txn.booking_id = None
        return True

    # Transactions

    def list_transactions(
        self, property_id: Optional[int] = None
    ) -> list[TransactionRecord]:
        items = [
            t
            for t in self.transactions.values()
            if property_id is None or t.property_id == property_id
        ]
        items.sort(key=lambda t: (t.date, t.created_at, t.id), reverse=True)
        return [self._view(t) for t in items]

    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        txn = self.transactions.get(transaction_id)
        return self._view(txn) if txn else None

    @_synchronized
    def create_transaction(self, data: Dict[str, Any]) -> TransactionRecord:
        record = TransactionRecord(id=self._next_id("transactions"), **data)
        self.transactions[record.id] = record
        return self._view(record)

    @_synchronized
    def update_transaction(
        self, transaction_id: int, changes: Dict[str, Any]
    ) -> Optional[TransactionRecord]:
        txn = self.transactions.get(transaction_id)
        if not txn:
            return None
        for name, value in changes.items():
            setattr(txn, name, value)
        return self._view(txn)

    @_synchronized
    def delete_transaction(self, transaction_id: int) -> bool:
        return self.transactions.pop(transaction_id, None) is not None

    # Depreciation

    def list_depreciation(
        self, property_id: Optional[int] = None
    ) -> list[DepreciationRecord]:
        items = [
            d
            for d in self.depreciation.values()
            if property_id is None or d.property_id == property_id
        ]
        items.sort(key=lambda d: (d.property_id, -d.year, d.id))
        return [self._view(d) for d in items]

    def get_depreciation(self, record_id: int) -> Optional[DepreciationRecord]:
        record = self.depreciation.get(record_id)
        return self._view(record) if record else None

    def find_depreciation(
        self, property_id: int, year: int
    ) -> Optional[DepreciationRecord]:
        for record in self.depreciation.values():
            if record.property_id == property_id and record.year == year:
                return self._view(record)
        return None

    @_synchronized
    def create_depreciation(self, data: Dict[str, Any]) -> DepreciationRecord:
        if self.find_depreciation(data["property_id"], data["year"]):
            raise DuplicateDepreciationError(data["property_id"], data["year"])
        record = DepreciationRecord(id=self._next_id("depreciation"), **data)
        record.total_depreciation = total_depreciation(
            record.straight_line,
            record.bonus_depreciation,
            record.section_179_deduction,
        )
        self.depreciation[record.id] = record
        return self._view(record)

    @_synchronized
    def update_depreciation(
        self, record_id: int, changes: Dict[str, Any]
    ) -> Optional[DepreciationRecord]:
        record = self.depreciation.get(record_id)
        if not record:
            return None
        property_id = changes.get("property_id", record.property_id)
        year = changes.get("year", record.year)
        existing = self.find_depreciation(property_id, year)
        if existing and existing.id != record_id:
            raise DuplicateDepreciationError(property_id, year)
        for name, value in changes.items():
            setattr(record, name, value)
        record.total_depreciation = total_depreciation(
            record.straight_line,
            record.bonus_depreciation,
            record.section_179_deduction,
        )
        record.updated_at = _utcnow()
        return self._view(record)

    @_synchronized
    def delete_depreciation(self, record_id: int) -> bool:
        return self.depreciation.pop(record_id, None) is not None


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_property_record(self, row: "PropertyRow") -> PropertyRecord:
        return PropertyRecord(
            id=row.id,
            address=row.address,
            property_type=row.property_type,
            purchase_price=row.purchase_price,
            down_payment=row.down_payment,
            monthly_mortgage=row.monthly_mortgage,
            monthly_taxes=row.monthly_taxes,
            monthly_insurance=row.monthly_insurance,
            monthly_hoa_fees=row.monthly_hoa_fees,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_booking_record(self, row: "BookingRow") -> BookingRecord:
        return BookingRecord(
            id=row.id,
            property_id=row.property_id,
            guest_name=row.guest_name,
            check_in_date=row.check_in_date,
            check_out_date=row.check_out_date,
            total_amount=row.total_amount,
            status=BookingStatus(row.status),
            notes=row.notes,
            created_at=row.created_at,
            updated_at=row.updated_at,
            property_address=row.property.address if row.property else None,
        )

    def _to_transaction_record(self, row: "TransactionRow") -> TransactionRecord:
        return TransactionRecord(
            id=row.id,
            property_id=row.property_id,
            booking_id=row.booking_id,
            type=TransactionType(row.type),
            category=row.category,
            amount=row.amount,
            description=row.description,
            date=row.date,
            created_at=row.created_at,
            property_address=row.property.address if row.property else None,
        )

    def _to_depreciation_record(self, row: "DepreciationRow") -> DepreciationRecord:
        return DepreciationRecord(
            id=row.id,
            property_id=row.property_id,
            year=row.year,
            straight_line=row.straight_line,
            bonus_depreciation=row.bonus_depreciation,
            section_179_deduction=row.section_179_deduction,
            total_depreciation=row.total_depreciation,
            placed_in_service_date=row.placed_in_service_date,
            business_use_percentage=row.business_use_percentage,
            created_at=row.created_at,
            updated_at=row.updated_at,
            property_address=row.property.address if row.property else None,
        )

    # Properties

    def list_properties(self) -> list[PropertyRecord]:
        with self.Session() as session:
            stmt = select(PropertyRow).order_by(
                PropertyRow.created_at.desc(), PropertyRow.id.desc()
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_property_record(row) for row in rows]

    def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        with self.Session() as session:
            row = session.get(PropertyRow, property_id)
            return self._to_property_record(row) if row else None

    def create_property(self, data: Dict[str, Any]) -> PropertyRecord:
        with self.Session() as session:
            row = PropertyRow(**data)
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_property_record(row)

    def update_property(
        self, property_id: int, changes: Dict[str, Any]
    ) -> Optional[PropertyRecord]:
        with self.Session() as session:
            row = session.get(PropertyRow, property_id)
            if not row:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            row.updated_at = _utcnow()
            session.commit()
            session.refresh(row)
            return self._to_property_record(row)

    def delete_property(self, property_id: int) -> bool:
        with self.Session() as session:
            row = session.get(PropertyRow, property_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    # Bookings

    def list_bookings(self, property_id: Optional[int] = None) -> list[BookingRecord]:
        with self.Session() as session:
            stmt = select(BookingRow).order_by(
                BookingRow.check_in_date.desc(), BookingRow.id.desc()
            )
            if property_id is not None:
                stmt = stmt.where(BookingRow.property_id == property_id)
            rows = session.execute(stmt).scalars().all()
            return [self._to_booking_record(row) for row in rows]

    def get_booking(self, booking_id: int) -> Optional[BookingRecord]:
        with self.Session() as session:
            row = session.get(BookingRow, booking_id)
            return self._to_booking_record(row) if row else None

    def create_booking(self, data: Dict[str, Any]) -> BookingRecord:
        with self.Session() as session:
            row = BookingRow(**data)
            session.add(row)
            session.flush()
            session.add(TransactionRow(**_booking_income(row.id, data)))
            session.commit()
            session.refresh(row)
            return self._to_booking_record(row)

    def update_booking(
        self, booking_id: int, changes: Dict[str, Any]
    ) -> Optional[BookingRecord]:
        with self.Session() as session:
            row = session.get(BookingRow, booking_id)
            if not row:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            row.updated_at = _utcnow()
            session.commit()
            session.refresh(row)
            return self._to_booking_record(row)

    def delete_booking(self, booking_id: int) -> bool:
        with self.Session() as session:
            row = session.get(BookingRow, booking_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    # Transactions

    def list_transactions(
        self, property_id: Optional[int] = None
    ) -> list[TransactionRecord]:
        with self.Session() as session:
            stmt = select(TransactionRow).order_by(
                TransactionRow.date.desc(),
                TransactionRow.created_at.desc(),
                TransactionRow.id.desc(),
            )
            if property_id is not None:
                stmt = stmt.where(TransactionRow.property_id == property_id)
            rows = session.execute(stmt).scalars().all()
            return [self._to_transaction_record(row) for row in rows]

    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        with self.Session() as session:
            row = session.get(TransactionRow, transaction_id)
            return self._to_transaction_record(row) if row else None

    def create_transaction(self, data: Dict[str, Any]) -> TransactionRecord:
        with self.Session() as session:
            row = TransactionRow(**data)
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_transaction_record(row)

    def update_transaction(
        self, transaction_id: int, changes: Dict[str, Any]
    ) -> Optional[TransactionRecord]:
        with self.Session() as session:
            row = session.get(TransactionRow, transaction_id)
            if not row:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            session.commit()
            session.refresh(row)
            return self._to_transaction_record(row)

    def delete_transaction(self, transaction_id: int) -> bool:
        with self.Session() as session:
            row = session.get(TransactionRow, transaction_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    # Depreciation

    def list_depreciation(
        self, property_id: Optional[int] = None
    ) -> list[DepreciationRecord]:
        with self.Session() as session:
            stmt = select(DepreciationRow).order_by(
                DepreciationRow.property_id.asc(),
                DepreciationRow.year.desc(),
                DepreciationRow.id.asc(),
            )
            if property_id is not None:
                stmt = stmt.where(DepreciationRow.property_id == property_id)
            rows = session.execute(stmt).scalars().all()
            return [self._to_depreciation_record(row) for row in rows]

    def get_depreciation(self, record_id: int) -> Optional[DepreciationRecord]:
        with self.Session() as session:
            row = session.get(DepreciationRow, record_id)
            return self._to_depreciation_record(row) if row else None

    def find_depreciation(
        self, property_id: int, year: int
    ) -> Optional[DepreciationRecord]:
        with self.Session() as session:
            stmt = (
                select(DepreciationRow)
                .where(
                    DepreciationRow.property_id == property_id,
                    DepreciationRow.year == year,
                )
                .limit(1)
            )
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_depreciation_record(row) if row else None

    def create_depreciation(self, data: Dict[str, Any]) -> DepreciationRecord:
        with self.Session() as session:
            row = DepreciationRow(**data)
            row.total_depreciation = total_depreciation(
                row.straight_line, row.bonus_depreciation, row.section_179_deduction
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateDepreciationError(data["property_id"], data["year"]) from exc
            session.refresh(row)
            return self._to_depreciation_record(row)

    def update_depreciation(
        self, record_id: int, changes: Dict[str, Any]
    ) -> Optional[DepreciationRecord]:
        with self.Session() as session:
            row = session.get(DepreciationRow, record_id)
            if not row:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            row.total_depreciation = total_depreciation(
                row.straight_line, row.bonus_depreciation, row.section_179_deduction
            )
            row.updated_at = _utcnow()
            property_id, year = row.property_id, row.year
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateDepreciationError(property_id, year) from exc
            session.refresh(row)
            return self._to_depreciation_record(row)

    def delete_depreciation(self, record_id: int) -> bool:
        with self.Session() as session:
            row = session.get(DepreciationRow, record_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True


Base = declarative_base()


def _enum_column(enum_cls, name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        values_callable=lambda members: [m.value for m in members],
    )


class PropertyRow(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    address = Column(String(255), nullable=False)
    property_type = Column(String(100), nullable=False)
    purchase_price = Column(Numeric(12, 2), nullable=False)
    down_payment = Column(Numeric(12, 2), nullable=False)
    monthly_mortgage = Column(Numeric(10, 2), nullable=False)
    monthly_taxes = Column(Numeric(10, 2), nullable=False, default=ZERO)
    monthly_insurance = Column(Numeric(10, 2), nullable=False, default=ZERO)
    monthly_hoa_fees = Column(Numeric(10, 2), nullable=False, default=ZERO)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    bookings = relationship(
        "BookingRow", back_populates="property", cascade="all, delete-orphan"
    )
    transactions = relationship(
        "TransactionRow", back_populates="property", cascade="all, delete-orphan"
    )
    depreciation = relationship(
        "DepreciationRow", back_populates="property", cascade="all, delete-orphan"
    )


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_name = Column(String(255), nullable=False)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        _enum_column(BookingStatus, "booking_status"),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    property = relationship("PropertyRow", back_populates="bookings")
    # No delete cascade: removing a booking detaches its transactions.
    transactions = relationship("TransactionRow", back_populates="booking")


class TransactionRow(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    booking_id = Column(
        Integer, ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True
    )
    type = Column(_enum_column(TransactionType, "transaction_type"), nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    property = relationship("PropertyRow", back_populates="transactions")
    booking = relationship("BookingRow", back_populates="transactions")


class DepreciationRow(Base):
    __tablename__ = "depreciation"
    __table_args__ = (
        UniqueConstraint("property_id", "year", name="uq_depreciation_property_year"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    year = Column(Integer, nullable=False)
    straight_line = Column(Numeric(10, 2), nullable=False, default=ZERO)
    bonus_depreciation = Column(Numeric(10, 2), nullable=False, default=ZERO)
    section_179_deduction = Column(Numeric(10, 2), nullable=False, default=ZERO)
    total_depreciation = Column(Numeric(10, 2), nullable=False, default=ZERO)
    placed_in_service_date = Column(Date, nullable=True)
    business_use_percentage = Column(
        Numeric(5, 2), nullable=False, default=Decimal("100")
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    property = relationship("PropertyRow", back_populates="depreciation")

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tracker import reports
from tracker.db import DbClient
from tracker.dependencies import get_db_client
from tracker.schemas import (
    BookingCreate,
    BookingResponse,
    BookingStatsResponse,
    BookingUpdate,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=list[BookingResponse])
def list_bookings(db: DbClient = Depends(get_db_client)):
    return db.list_bookings()


@router.get("/stats/summary", response_model=BookingStatsResponse)
def booking_stats(db: DbClient = Depends(get_db_client)):
    return reports.booking_stats(db.list_bookings())


@router.get("/property/{property_id}", response_model=list[BookingResponse])
def list_property_bookings(property_id: int, db: DbClient = Depends(get_db_client)):
    return db.list_bookings(property_id)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: int, db: DbClient = Depends(get_db_client)):
    booking = db.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(payload: BookingCreate, db: DbClient = Depends(get_db_client)):
    """Create a booking together with its rental income transaction."""
    if not db.get_property(payload.property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    booking = db.create_booking(payload.model_dump())
    logger.info(
        "Created booking %s for property %s (%s)",
        booking.id,
        booking.property_id,
        booking.total_amount,
    )
    return booking


@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: int,
    payload: BookingUpdate,
    db: DbClient = Depends(get_db_client),
):
    current = db.get_booking(booking_id)
    if not current:
        raise HTTPException(status_code=404, detail="Booking not found")
    changes = payload.changes()
    check_in = changes.get("check_in_date", current.check_in_date)
    check_out = changes.get("check_out_date", current.check_out_date)
    if check_out < check_in:
        raise HTTPException(
            status_code=400, detail="check_out_date must not be before check_in_date"
        )
    booking = db.update_booking(booking_id, changes)
    logger.info("Updated booking %s", booking_id)
    return booking


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete_booking(booking_id: int, db: DbClient = Depends(get_db_client)):
    if not db.delete_booking(booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")
    logger.info("Deleted booking %s", booking_id)
    return {"message": "Booking deleted successfully"}

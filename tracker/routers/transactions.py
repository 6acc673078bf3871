from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tracker import reports
from tracker.db import DbClient
from tracker.dependencies import get_db_client
from tracker.schemas import (
    CategorySummary,
    MessageResponse,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _check_references(db: DbClient, property_id: Optional[int], booking_id: Optional[int]):
    if property_id is not None and not db.get_property(property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    if booking_id is not None and not db.get_booking(booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")


@router.get("", response_model=list[TransactionResponse])
def list_transactions(db: DbClient = Depends(get_db_client)):
    return db.list_transactions()


@router.get("/property/{property_id}", response_model=list[TransactionResponse])
def list_property_transactions(property_id: int, db: DbClient = Depends(get_db_client)):
    return db.list_transactions(property_id)


@router.get("/summary/property/{property_id}", response_model=list[CategorySummary])
def property_transaction_summary(
    property_id: int,
    year: Optional[int] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    return reports.transaction_summary(db.list_transactions(property_id), year)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: int, db: DbClient = Depends(get_db_client)):
    txn = db.get_transaction(transaction_id)
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@router.post(
    "", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED
)
def create_transaction(
    payload: TransactionCreate, db: DbClient = Depends(get_db_client)
):
    _check_references(db, payload.property_id, payload.booking_id)
    txn = db.create_transaction(payload.model_dump())
    logger.info(
        "Created %s transaction %s for property %s",
        txn.type.value,
        txn.id,
        txn.property_id,
    )
    return txn


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    db: DbClient = Depends(get_db_client),
):
    if not db.get_transaction(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    changes = payload.changes()
    _check_references(db, changes.get("property_id"), changes.get("booking_id"))
    txn = db.update_transaction(transaction_id, changes)
    logger.info("Updated transaction %s", transaction_id)
    return txn


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(transaction_id: int, db: DbClient = Depends(get_db_client)):
    if not db.delete_transaction(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info("Deleted transaction %s", transaction_id)
    return {"message": "Transaction deleted successfully"}

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tracker import reports
from tracker.db import DbClient
from tracker.dependencies import get_db_client
from tracker.schemas import (
    DepreciationCreate,
    DepreciationResponse,
    DepreciationUpdate,
    DepreciationYearSummary,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/depreciation", tags=["depreciation"])

DUPLICATE_YEAR = "Depreciation record already exists for this property and year"


@router.get("", response_model=list[DepreciationResponse])
def list_depreciation(db: DbClient = Depends(get_db_client)):
    return db.list_depreciation()


@router.get("/property/{property_id}", response_model=list[DepreciationResponse])
def list_property_depreciation(property_id: int, db: DbClient = Depends(get_db_client)):
    return db.list_depreciation(property_id)


@router.get(
    "/summary/property/{property_id}", response_model=list[DepreciationYearSummary]
)
def property_depreciation_summary(
    property_id: int, db: DbClient = Depends(get_db_client)
):
    return reports.depreciation_summary(db.list_depreciation(property_id))


@router.get("/{record_id}", response_model=DepreciationResponse)
def get_depreciation(record_id: int, db: DbClient = Depends(get_db_client)):
    record = db.get_depreciation(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Depreciation record not found")
    return record


@router.post(
    "", response_model=DepreciationResponse, status_code=status.HTTP_201_CREATED
)
def create_depreciation(
    payload: DepreciationCreate, db: DbClient = Depends(get_db_client)
):
    if not db.get_property(payload.property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    if db.find_depreciation(payload.property_id, payload.year):
        raise HTTPException(status_code=400, detail=DUPLICATE_YEAR)
    record = db.create_depreciation(payload.model_dump())
    logger.info(
        "Created depreciation %s for property %s year %s (total %s)",
        record.id,
        record.property_id,
        record.year,
        record.total_depreciation,
    )
    return record


@router.put("/{record_id}", response_model=DepreciationResponse)
def update_depreciation(
    record_id: int,
    payload: DepreciationUpdate,
    db: DbClient = Depends(get_db_client),
):
    current = db.get_depreciation(record_id)
    if not current:
        raise HTTPException(status_code=404, detail="Depreciation record not found")
    changes = payload.changes()
    property_id = changes.get("property_id", current.property_id)
    if property_id != current.property_id and not db.get_property(property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    existing = db.find_depreciation(property_id, changes.get("year", current.year))
    if existing and existing.id != record_id:
        raise HTTPException(status_code=400, detail=DUPLICATE_YEAR)
    record = db.update_depreciation(record_id, changes)
    logger.info("Updated depreciation %s", record_id)
    return record


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_depreciation(record_id: int, db: DbClient = Depends(get_db_client)):
    if not db.delete_depreciation(record_id):
        raise HTTPException(status_code=404, detail="Depreciation record not found")
    logger.info("Deleted depreciation %s", record_id)
    return {"message": "Depreciation record deleted successfully"}

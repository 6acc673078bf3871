from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tracker import reports
from tracker.db import DbClient
from tracker.dependencies import get_db_client
from tracker.schemas import (
    MessageResponse,
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyResponse])
def list_properties(db: DbClient = Depends(get_db_client)):
    return reports.properties_with_totals(db.list_properties(), db.list_transactions())


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: int, db: DbClient = Depends(get_db_client)):
    prop = db.get_property(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return reports.property_with_totals(prop, db.list_transactions(property_id))


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(payload: PropertyCreate, db: DbClient = Depends(get_db_client)):
    prop = db.create_property(payload.model_dump())
    logger.info("Created property %s (%s)", prop.id, prop.address)
    return prop


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    payload: PropertyUpdate,
    db: DbClient = Depends(get_db_client),
):
    prop = db.update_property(property_id, payload.changes())
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    logger.info("Updated property %s", property_id)
    return reports.property_with_totals(prop, db.list_transactions(property_id))


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_property(property_id: int, db: DbClient = Depends(get_db_client)):
    if not db.delete_property(property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    logger.info("Deleted property %s", property_id)
    return {"message": "Property deleted successfully"}

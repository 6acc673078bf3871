"""
Routes over the hybrid document store: connectivity and data management,
generic collection CRUD, and the material participation summary.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from tracker import reports
from tracker.dependencies import get_document_store
from tracker.documents import HybridDocumentStore
from tracker.schemas import (
    ConnectionStatusResponse,
    ConnectivityRequest,
    ConnectivityResponse,
    ImportRequest,
    ImportResponse,
    MaterialParticipationSummary,
    MessageResponse,
    SyncResponse,
)

logger = logging.getLogger(__name__)

storage_router = APIRouter(prefix="/storage", tags=["storage"])
documents_router = APIRouter(prefix="/documents", tags=["documents"])
participation_router = APIRouter(
    prefix="/material-participation", tags=["material-participation"]
)


# Storage management


@storage_router.get("/status", response_model=ConnectionStatusResponse)
def storage_status(store: HybridDocumentStore = Depends(get_document_store)):
    return store.connection_status()


@storage_router.put("/connectivity", response_model=ConnectivityResponse)
def set_connectivity(
    payload: ConnectivityRequest,
    store: HybridDocumentStore = Depends(get_document_store),
):
    report = store.set_online(payload.online)
    return {
        "status": store.connection_status(),
        "sync": report.as_dict() if report else None,
    }


@storage_router.post("/sync", response_model=SyncResponse)
def sync(store: HybridDocumentStore = Depends(get_document_store)):
    if not store.uses_remote:
        raise HTTPException(
            status_code=409, detail="Remote document store is not available"
        )
    return store.sync_local_to_remote().as_dict()


@storage_router.get("/export")
def export_data(store: HybridDocumentStore = Depends(get_document_store)):
    return store.export_all()


@storage_router.post("/import", response_model=ImportResponse)
def import_data(
    payload: ImportRequest,
    store: HybridDocumentStore = Depends(get_document_store),
):
    data = payload.model_dump(by_alias=True, exclude_none=True)
    store.import_data(data)
    logger.info("Imported document data (%s)", ", ".join(sorted(data)))
    return {"status": "ok"}


@storage_router.delete("/data", response_model=MessageResponse)
def clear_data(store: HybridDocumentStore = Depends(get_document_store)):
    store.clear_all()
    logger.info("Cleared all document data")
    return {"message": "All data cleared successfully"}


@storage_router.get("/info")
def storage_info(store: HybridDocumentStore = Depends(get_document_store)):
    return store.storage_info()


@storage_router.get("/settings")
def get_settings(store: HybridDocumentStore = Depends(get_document_store)):
    return store.get_settings()


@storage_router.put("/settings")
def save_settings(
    settings: Dict[str, Any] = Body(...),
    store: HybridDocumentStore = Depends(get_document_store),
):
    return store.save_settings(settings)


# Collections


@documents_router.get("/{collection}")
def list_documents(
    collection: str, store: HybridDocumentStore = Depends(get_document_store)
):
    return store.get_collection(collection)


@documents_router.get("/{collection}/property/{property_id}")
def list_property_documents(
    collection: str,
    property_id: str,
    store: HybridDocumentStore = Depends(get_document_store),
):
    return store.get_property_documents(collection, property_id)


@documents_router.get("/{collection}/{doc_id}")
def get_document(
    collection: str,
    doc_id: str,
    store: HybridDocumentStore = Depends(get_document_store),
):
    document = store.get_document(collection, doc_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@documents_router.post("/{collection}", status_code=status.HTTP_201_CREATED)
def add_document(
    collection: str,
    data: Dict[str, Any] = Body(...),
    store: HybridDocumentStore = Depends(get_document_store),
):
    document = store.add_document(collection, data)
    logger.info("Added %s document %s", collection, document.get("id"))
    return document


@documents_router.put("/{collection}/{doc_id}")
def update_document(
    collection: str,
    doc_id: str,
    data: Dict[str, Any] = Body(...),
    store: HybridDocumentStore = Depends(get_document_store),
):
    document = store.update_document(collection, doc_id, data)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    logger.info("Updated %s document %s", collection, doc_id)
    return document


@documents_router.delete("/{collection}/{doc_id}", response_model=MessageResponse)
def delete_document(
    collection: str,
    doc_id: str,
    store: HybridDocumentStore = Depends(get_document_store),
):
    if not store.delete_document(collection, doc_id):
        raise HTTPException(status_code=404, detail="Document not found")
    logger.info("Deleted %s document %s", collection, doc_id)
    return {"message": "Document deleted successfully"}


# Material participation


@participation_router.get("/summary", response_model=MaterialParticipationSummary)
def participation_summary(
    year: Optional[int] = Query(default=None),
    store: HybridDocumentStore = Depends(get_document_store),
):
    return reports.material_participation_summary(
        store.get_collection("materialParticipation"),
        store.get_collection("properties"),
        year if year is not None else dt.date.today().year,
    )

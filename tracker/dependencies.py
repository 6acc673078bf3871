"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from tracker.config import Settings, get_settings
from tracker.db import DbClient, InMemoryDbClient, SqlDbClient
from tracker.documents import (
    FirestoreDocumentStore,
    HybridDocumentStore,
    LocalDocumentStore,
)

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_document_store: HybridDocumentStore | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlDbClient(settings.database_url)
    return _db_client


def _firestore_store(settings: Settings) -> FirestoreDocumentStore | None:
    if settings.use_in_memory_backends or not settings.firebase_project_id:
        return None
    try:
        firebase_admin.get_app()
    except ValueError:
        options = {"projectId": settings.firebase_project_id}
        if settings.firebase_credentials_path:
            cred = credentials.Certificate(settings.firebase_credentials_path)
            firebase_admin.initialize_app(cred, options)
        else:
            firebase_admin.initialize_app(options=options)
    logger.info("Firestore configured for project %s", settings.firebase_project_id)
    return FirestoreDocumentStore(firestore.client())


def get_document_store() -> HybridDocumentStore:
    """
    Return a singleton hybrid store so the connectivity flag survives requests.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    local_dir = None if settings.use_in_memory_backends else settings.local_document_dir
    _document_store = HybridDocumentStore(
        local=LocalDocumentStore(local_dir),
        remote=_firestore_store(settings),
        online=settings.start_online,
    )
    return _document_store

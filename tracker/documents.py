"""
Document store path: a local JSON blob store, a Firestore store, and the
hybrid dispatcher that picks between them based on connectivity.

The hybrid store keeps no queue of offline writes. Going back online pushes
every local item to Firestore once; nothing is merged or de-duplicated.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
import tempfile
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

logger = logging.getLogger(__name__)

COLLECTION_KEYS: Dict[str, str] = {
    "properties": "str_properties",
    "bookings": "str_bookings",
    "expenses": "str_expenses",
    "depreciation": "str_depreciation",
    "materialParticipation": "str_material_participation",
    "taxEstimates": "str_tax_estimates",
}
SETTINGS_KEY = "str_settings"
SETTINGS_COLLECTION = "settings"
SETTINGS_DOCUMENT = "app"

# Nominal browser localStorage quota, reported by storage_info().
LOCAL_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024

# Firestore rejects batches with more than 500 writes.
FIRESTORE_BATCH_LIMIT = 500

REMOTE_ERRORS = (exceptions.GoogleAPIError, ConnectionError)


class UnknownCollectionError(KeyError):
    """Raised for collection names outside COLLECTION_KEYS."""


def storage_key(collection: str) -> str:
    try:
        return COLLECTION_KEYS[collection]
    except KeyError:
        raise UnknownCollectionError(collection) from None


def _same_id(item: dict, doc_id: Any) -> bool:
    return item.get("id") is not None and str(item["id"]) == str(doc_id)


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def default_settings() -> Dict[str, Any]:
    return {
        "taxYear": dt.date.today().year,
        "defaultCurrency": "USD",
        "notifications": True,
    }


def check_import(data: dict) -> None:
    """Reject exports whose collections are not lists of documents."""
    for name in COLLECTION_KEYS:
        items = data.get(name)
        if items is None:
            continue
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise ValueError(f"{name} must be a list of documents")
    settings = data.get("settings")
    if settings is not None and not isinstance(settings, dict):
        raise ValueError("settings must be an object")


class DocumentStore(Protocol):
    """Operations the API needs from a document store."""

    def get_collection(self, collection: str) -> list[dict]:
        ...

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def add_document(self, collection: str, data: dict) -> dict:
        ...

    def update_document(self, collection: str, doc_id: str, data: dict) -> Optional[dict]:
        ...

    def delete_document(self, collection: str, doc_id: str) -> bool:
        ...

    def get_settings(self) -> dict:
        ...

    def save_settings(self, settings: dict) -> dict:
        ...

    def export_all(self) -> dict:
        ...

    def import_data(self, data: dict) -> None:
        ...

    def clear_all(self) -> None:
        ...

    def storage_info(self) -> dict:
        ...


@dataclass
class LocalDocumentStore:
    """
    Key-value JSON blobs, one per collection.

    With a directory each blob lives in ``<directory>/<key>.json``; without
    one the blobs are kept as JSON strings in memory.
    """

    directory: Optional[str] = None
    blobs: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.RLock()
        if self.directory:
            Path(self.directory).mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return Path(self.directory) / f"{key}.json"

    def _raw(self, key: str) -> Optional[str]:
        if not self.directory:
            return self.blobs.get(key)
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def get_item(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._raw(key)
            return json.loads(raw) if raw else default
        except (OSError, json.JSONDecodeError):
            logger.exception("Error reading local blob %s", key)
            return default

    def set_item(self, key: str, value: Any) -> None:
        raw = json.dumps(value, default=str)
        if not self.directory:
            self.blobs[key] = raw
            return
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(raw)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            os.unlink(tmp_path)
            raise

    def remove_item(self, key: str) -> None:
        if not self.directory:
            self.blobs.pop(key, None)
            return
        self._path(key).unlink(missing_ok=True)

    def is_available(self) -> bool:
        if not self.directory:
            return True
        return os.access(self.directory, os.W_OK)

    # Collections

    def get_collection(self, collection: str) -> list[dict]:
        return self.get_item(storage_key(collection), [])

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        for item in self.get_collection(collection):
            if _same_id(item, doc_id):
                return item
        return None

    def add_document(self, collection: str, data: dict) -> dict:
        now = _now_iso()
        item = {**data, "id": uuid.uuid4().hex, "createdAt": now, "updatedAt": now}
        with self._lock:
            items = self.get_collection(collection)
            items.append(item)
            self.set_item(storage_key(collection), items)
        return item

    def save_document(self, collection: str, document: dict) -> dict:
        """Upsert by id: merge into the existing item, or append a new one."""
        with self._lock:
            items = self.get_collection(collection)
            for index, item in enumerate(items):
                if document.get("id") is not None and _same_id(item, document["id"]):
                    items[index] = {**item, **document}
                    saved = items[index]
                    break
            else:
                doc_id = document.get("id")
                saved = {**document, "id": doc_id if doc_id is not None else uuid.uuid4().hex}
                items.append(saved)
            self.set_item(storage_key(collection), items)
        return saved

    def update_document(self, collection: str, doc_id: str, data: dict) -> Optional[dict]:
        with self._lock:
            items = self.get_collection(collection)
            for index, item in enumerate(items):
                if _same_id(item, doc_id):
                    items[index] = {**item, **data, "id": item["id"], "updatedAt": _now_iso()}
                    self.set_item(storage_key(collection), items)
                    return items[index]
        return None

    def delete_document(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            items = self.get_collection(collection)
            remaining = [item for item in items if not _same_id(item, doc_id)]
            if len(remaining) == len(items):
                return False
            self.set_item(storage_key(collection), remaining)
        return True

    # Settings

    def get_settings(self) -> dict:
        return self.get_item(SETTINGS_KEY, default_settings())

    def save_settings(self, settings: dict) -> dict:
        with self._lock:
            merged = {**self.get_settings(), **settings}
            self.set_item(SETTINGS_KEY, merged)
        return merged

    # Data management

    def export_all(self) -> dict:
        data: Dict[str, Any] = {
            name: self.get_collection(name) for name in COLLECTION_KEYS
        }
        data["settings"] = self.get_settings()
        data["exportDate"] = _now_iso()
        return data

    def import_data(self, data: dict) -> None:
        check_import(data)
        with self._lock:
            for name, key in COLLECTION_KEYS.items():
                if data.get(name) is not None:
                    self.set_item(key, data[name])
            if data.get("settings") is not None:
                self.set_item(SETTINGS_KEY, data["settings"])

    def clear_all(self) -> None:
        with self._lock:
            for key in [*COLLECTION_KEYS.values(), SETTINGS_KEY]:
                self.remove_item(key)

    def storage_info(self) -> dict:
        if not self.is_available():
            return {"available": False, "used": 0, "total": 0}
        used = 0
        for key in [*COLLECTION_KEYS.values(), SETTINGS_KEY]:
            raw = self._raw(key)
            if raw:
                used += len(raw)
        return {"available": True, "used": used, "total": LOCAL_STORAGE_QUOTA_BYTES}


@dataclass
class FirestoreDocumentStore:
    """
    Generic collection CRUD on Cloud Firestore with server-assigned timestamps.
    """

    client: Any

    def _collection(self, collection: str):
        storage_key(collection)
        return self.client.collection(collection)

    def _commit_in_batches(self, writes) -> int:
        count = 0
        batch = self.client.batch()
        pending = 0
        for write in writes:
            write(batch)
            pending += 1
            count += 1
            if pending == FIRESTORE_BATCH_LIMIT:
                batch.commit()
                batch = self.client.batch()
                pending = 0
        if pending:
            batch.commit()
        return count

    def get_collection(self, collection: str) -> list[dict]:
        return [
            {"id": snap.id, **(snap.to_dict() or {})}
            for snap in self._collection(collection).stream()
        ]

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        snap = self._collection(collection).document(doc_id).get()
        if not snap.exists:
            return None
        return {"id": snap.id, **(snap.to_dict() or {})}

    def add_document(self, collection: str, data: dict) -> dict:
        _, doc_ref = self._collection(collection).add(
            {**data, "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
        )
        return {"id": doc_ref.id, **data}

    def update_document(self, collection: str, doc_id: str, data: dict) -> Optional[dict]:
        doc_ref = self._collection(collection).document(doc_id)
        try:
            doc_ref.update({**data, "updatedAt": SERVER_TIMESTAMP})
        except exceptions.NotFound:
            return None
        return {"id": doc_id, **data}

    def delete_document(self, collection: str, doc_id: str) -> bool:
        doc_ref = self._collection(collection).document(doc_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True

    def get_settings(self) -> dict:
        snap = self.client.collection(SETTINGS_COLLECTION).document(SETTINGS_DOCUMENT).get()
        stored = snap.to_dict() if snap.exists else None
        return {**default_settings(), **(stored or {})}

    def save_settings(self, settings: dict) -> dict:
        doc_ref = self.client.collection(SETTINGS_COLLECTION).document(SETTINGS_DOCUMENT)
        doc_ref.set(settings, merge=True)
        return self.get_settings()

    def export_all(self) -> dict:
        data: Dict[str, Any] = {
            name: self.get_collection(name) for name in COLLECTION_KEYS
        }
        data["settings"] = self.get_settings()
        data["exportDate"] = _now_iso()
        return data

    def import_data(self, data: dict) -> None:
        def set_write(doc_ref, payload):
            return lambda batch: batch.set(doc_ref, payload)

        check_import(data)
        writes = []
        for name in COLLECTION_KEYS:
            collection_ref = self._collection(name)
            for item in data.get(name) or []:
                payload = {k: v for k, v in item.items() if k != "id"}
                doc_id = item.get("id")
                doc_ref = (
                    collection_ref.document(str(doc_id))
                    if doc_id
                    else collection_ref.document()
                )
                writes.append(set_write(doc_ref, payload))
        imported = self._commit_in_batches(writes)
        if data.get("settings") is not None:
            self.save_settings(data["settings"])
        logger.info("Imported %d documents into Firestore", imported)

    def clear_all(self) -> None:
        def delete_write(doc_ref):
            return lambda batch: batch.delete(doc_ref)

        writes = [
            delete_write(snap.reference)
            for name in COLLECTION_KEYS
            for snap in self._collection(name).stream()
        ]
        deleted = self._commit_in_batches(writes)
        self.client.collection(SETTINGS_COLLECTION).document(SETTINGS_DOCUMENT).delete()
        logger.info("Deleted %d documents from Firestore", deleted)

    def storage_info(self) -> dict:
        counts = {
            name: sum(1 for _ in self._collection(name).stream())
            for name in COLLECTION_KEYS
        }
        return {"available": True, "backend": "firestore", "documents": counts}


@dataclass
class SyncReport:
    synced: int = 0
    failed: int = 0

    def as_dict(self) -> dict:
        return {"synced": self.synced, "failed": self.failed}


class HybridDocumentStore:
    """
    Sends every operation to the remote store while online, falling back to
    the local store when the remote call fails. While offline, or with no
    remote store configured, the local store serves everything.
    """

    def __init__(
        self,
        local: LocalDocumentStore,
        remote: Optional[DocumentStore] = None,
        online: bool = True,
    ):
        self.local = local
        self.remote = remote
        self.online = online

    @property
    def uses_remote(self) -> bool:
        return self.online and self.remote is not None

    def _dispatch(self, operation: str, *args):
        if self.uses_remote:
            try:
                return getattr(self.remote, operation)(*args)
            except REMOTE_ERRORS as exc:
                logger.warning(
                    "Remote store failed during %s, falling back to local storage: %s",
                    operation,
                    exc,
                )
        return getattr(self.local, operation)(*args)

    def get_collection(self, collection: str) -> list[dict]:
        return self._dispatch("get_collection", collection)

    def get_property_documents(self, collection: str, property_id: str) -> list[dict]:
        return [
            doc
            for doc in self.get_collection(collection)
            if str(doc.get("property_id")) == str(property_id)
        ]

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        return self._dispatch("get_document", collection, doc_id)

    def add_document(self, collection: str, data: dict) -> dict:
        return self._dispatch("add_document", collection, data)

    def update_document(self, collection: str, doc_id: str, data: dict) -> Optional[dict]:
        return self._dispatch("update_document", collection, doc_id, data)

    def delete_document(self, collection: str, doc_id: str) -> bool:
        return self._dispatch("delete_document", collection, doc_id)

    def get_settings(self) -> dict:
        return self._dispatch("get_settings")

    def save_settings(self, settings: dict) -> dict:
        return self._dispatch("save_settings", settings)

    def export_all(self) -> dict:
        return self._dispatch("export_all")

    def import_data(self, data: dict) -> None:
        self._dispatch("import_data", data)

    def clear_all(self) -> None:
        self._dispatch("clear_all")

    def storage_info(self) -> dict:
        return self._dispatch("storage_info")

    def set_online(self, online: bool) -> Optional[SyncReport]:
        """Flip the connectivity flag; coming back online pushes local data."""
        was_online = self.online
        self.online = online
        if online and not was_online:
            logger.info("Back online - switching to Firestore")
            return self.sync_local_to_remote()
        if not online and was_online:
            logger.info("Offline - using local storage")
        return None

    def sync_local_to_remote(self) -> SyncReport:
        report = SyncReport()
        if self.remote is None:
            return report
        local_data = self.local.export_all()
        for name in COLLECTION_KEYS:
            for item in local_data.get(name) or []:
                data = {k: v for k, v in item.items() if k != "id"}
                try:
                    self.remote.add_document(name, data)
                    report.synced += 1
                except REMOTE_ERRORS as exc:
                    report.failed += 1
                    logger.warning("Failed to sync %s item %s: %s", name, item.get("id"), exc)
        logger.info(
            "Local data synced to Firestore: %d pushed, %d failed",
            report.synced,
            report.failed,
        )
        return report

    def connection_status(self) -> dict:
        return {
            "isOnline": self.online,
            "storage": "firebase" if self.uses_remote else "localStorage",
            "remoteConfigured": self.remote is not None,
        }

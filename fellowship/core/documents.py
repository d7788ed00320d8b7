"""Firestore read/write helpers shared by the service layer."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from fellowship.constants import FIRESTORE_BATCH_LIMIT

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def utcnow() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def snapshot_to_dict(snapshot: Any) -> dict[str, Any] | None:
    """Convert a snapshot to a dict carrying its id, or None if it does not exist."""
    if not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data


def get_document(
    db: Client, collection: str, doc_id: str | None
) -> dict[str, Any] | None:
    """Fetch a single document by id."""
    if not doc_id:
        return None
    doc = cast("DocumentSnapshot", db.collection(collection).document(doc_id).get())
    return snapshot_to_dict(doc)


def find_first(
    db: Client, collection: str, field: str, value: Any
) -> dict[str, Any] | None:
    """Return the first document whose indexed field equals value."""
    query = (
        db.collection(collection)
        .where(filter=firestore.FieldFilter(field, "==", value))
        .limit(1)
    )
    for doc in query.stream():
        return snapshot_to_dict(doc)
    return None


def find_all(
    db: Client, collection: str, field: str, value: Any
) -> list[dict[str, Any]]:
    """Return every document whose indexed field equals value."""
    query = db.collection(collection).where(
        filter=firestore.FieldFilter(field, "==", value)
    )
    return [data for doc in query.stream() if (data := snapshot_to_dict(doc))]


def find_containing(
    db: Client, collection: str, field: str, value: Any
) -> list[dict[str, Any]]:
    """Return every document whose array field contains value."""
    query = db.collection(collection).where(
        filter=firestore.FieldFilter(field, "array_contains", value)
    )
    return [data for doc in query.stream() if (data := snapshot_to_dict(doc))]


def stream_all(db: Client, collection: str) -> list[dict[str, Any]]:
    """Scan a whole collection in storage order."""
    return [
        data
        for doc in db.collection(collection).stream()
        if (data := snapshot_to_dict(doc))
    ]


def fetch_documents(
    db: Client, collection: str, ids: list[str]
) -> list[dict[str, Any]]:
    """Resolve a list of ids, preserving order and dropping dangling references."""
    unique_ids = list(dict.fromkeys(doc_id for doc_id in ids if doc_id))
    if not unique_ids:
        return []

    collection_ref = db.collection(collection)
    docs_by_id: dict[str, dict[str, Any]] = {}
    for i in range(0, len(unique_ids), FIRESTORE_BATCH_LIMIT):
        chunk = unique_ids[i : i + FIRESTORE_BATCH_LIMIT]
        refs = [collection_ref.document(doc_id) for doc_id in chunk]
        for snapshot in db.get_all(refs):
            if data := snapshot_to_dict(snapshot):
                docs_by_id[data["id"]] = data

    return [dict(docs_by_id[doc_id]) for doc_id in ids if doc_id in docs_by_id]

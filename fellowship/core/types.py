"""Core data types for the fellowship application."""

from typing import Any, TypedDict


class _FirestoreDocumentBase(TypedDict):
    id: str


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    createdAt: Any
    updatedAt: Any


class APIResponse(TypedDict, total=False):
    """Generic mutation response structure."""

    success: bool
    message: str

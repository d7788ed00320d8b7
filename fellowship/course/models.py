"""Data models for the course blueprint."""

from __future__ import annotations

from fellowship.core.types import FirestoreDocument


class Course(FirestoreDocument, total=False):
    """A course in the shared catalog."""

    name: str
    description: str | None

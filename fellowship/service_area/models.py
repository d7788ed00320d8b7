"""Data models for the service area blueprint."""

from __future__ import annotations

from fellowship.core.types import FirestoreDocument


class ServiceArea(FirestoreDocument, total=False):
    """A ministry a user can serve in."""

    name: str

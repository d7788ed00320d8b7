"""Data models for the attendance blueprint."""

from __future__ import annotations

import datetime
from typing import Literal, TypedDict

from fellowship.core.types import FirestoreDocument

AttendanceType = Literal["newcomers", "attendance", "reset", "conference"]
ChurchService = Literal["saturday-1", "saturday-2", "sunday-1", "sunday-2"]


class AttendanceRecord(FirestoreDocument, total=False):
    """A leader's tally for one day.

    ``date`` is midnight UTC of the calendar day. ``service`` is only set for
    newcomers and service attendance, ``attended`` only for service attendance
    and conferences.
    """

    userId: str
    date: datetime.datetime
    type: AttendanceType
    service: ChurchService | None
    attended: bool | None
    maleCount: int
    femaleCount: int


class ReportEntry(TypedDict):
    """Totals for one attendance type."""

    total: int
    male: int
    female: int
    records: list[AttendanceRecord]


class GroupReportEntry(TypedDict):
    """A leader's totals next to those of their disciples."""

    total: int
    myTotal: int
    disciplesTotal: int
    male: int
    female: int
    myMale: int
    myFemale: int
    disciplesMale: int
    disciplesFemale: int


class CoLeader(TypedDict):
    """A co-leader of the opposite gender."""

    id: str
    name: str | None
    email: str | None
    gender: str | None

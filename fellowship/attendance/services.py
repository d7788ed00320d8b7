"""Service layer for leaders' attendance tallies and their reports."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from flask import current_app

from fellowship.auth.utils import require_user
from fellowship.constants import (
    ATTENDANCE_COLLECTION,
    ATTENDANCE_TYPES,
    CHURCH_SERVICES,
    GENDER_MALE,
    GROUPS_COLLECTION,
    PRESENCE_ATTENDANCE_TYPES,
    SERVICE_ATTENDANCE_TYPES,
    USERS_COLLECTION,
)
from fellowship.core.documents import (
    fetch_documents,
    find_all,
    find_containing,
    get_document,
    utcnow,
)
from fellowship.errors import (
    AttendanceRecordNotFound,
    ForbiddenError,
    UserNotFound,
    ValidationError,
)

from .models import CoLeader, GroupReportEntry, ReportEntry

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

_EPOCH = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


def day_start(value: datetime.date) -> datetime.datetime:
    """Midnight UTC of the calendar day of a date or datetime."""
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc)
        value = value.date()
    return datetime.datetime.combine(
        value, datetime.time.min, tzinfo=datetime.timezone.utc
    )


def report_period(
    year: int, month: int | None = None
) -> tuple[datetime.datetime, datetime.datetime]:
    """Half-open [start, end) bounds of a calendar month, or of a whole year."""
    if month is None:
        return (
            day_start(datetime.date(year, 1, 1)),
            day_start(datetime.date(year + 1, 1, 1)),
        )
    following = datetime.date(year + month // 12, month % 12 + 1, 1)
    return day_start(datetime.date(year, month, 1)), day_start(following)


def in_period(
    record: dict[str, Any], start: datetime.datetime, end: datetime.datetime
) -> bool:
    date = record.get("date")
    return date is not None and start <= date < end


def newest_first(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(records, key=lambda r: r.get("date") or _EPOCH, reverse=True)


def clean_attendance_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a tally and drop the fields its type does not use.

    A tally must count at least one person, unless it records that the leader
    (or their co-leader) was present.
    """
    record_type = data.get("type")
    if record_type not in ATTENDANCE_TYPES:
        raise ValidationError("Please choose a valid record type.")
    if data.get("date") is None:
        raise ValidationError("Date: This field is required.")

    service = data.get("service")
    if record_type in SERVICE_ATTENDANCE_TYPES and service not in CHURCH_SERVICES:
        raise ValidationError("Please choose a service.")

    attended = data.get("attended")
    if record_type in PRESENCE_ATTENDANCE_TYPES and attended is None:
        raise ValidationError("Please say whether you attended.")

    male_count = data.get("maleCount")
    female_count = data.get("femaleCount")
    if male_count is None or female_count is None:
        raise ValidationError("Both the men and women counts are required.")
    if male_count < 0 or female_count < 0:
        raise ValidationError("Counts cannot be negative.")

    present = record_type in PRESENCE_ATTENDANCE_TYPES and (
        attended is True
        or (bool(data.get("coLeaderId")) and data.get("coLeaderAttended") is True)
    )
    if male_count == 0 and female_count == 0 and not present:
        raise ValidationError("Record at least one person.")

    return {
        "date": day_start(data["date"]),
        "type": record_type,
        "service": service if record_type in SERVICE_ATTENDANCE_TYPES else None,
        "attended": attended if record_type in PRESENCE_ATTENDANCE_TYPES else None,
        "maleCount": male_count,
        "femaleCount": female_count,
    }


def build_report(
    records: list[dict[str, Any]], genders: dict[str, str | None]
) -> dict[str, ReportEntry]:
    """Total each attendance type by gender.

    A record that notes its owner's presence counts the owner too, under the
    owner's gender from ``genders``.
    """
    report: dict[str, ReportEntry] = {
        record_type: {"total": 0, "male": 0, "female": 0, "records": []}
        for record_type in ATTENDANCE_TYPES
    }
    for record in newest_first(records):
        entry = report.get(record.get("type"))
        if entry is None:
            continue
        male = record.get("maleCount") or 0
        female = record.get("femaleCount") or 0
        if record.get("type") in PRESENCE_ATTENDANCE_TYPES and record.get("attended"):
            if genders.get(record.get("userId")) == GENDER_MALE:
                male += 1
            else:
                female += 1
        entry["total"] += male + female
        entry["male"] += male
        entry["female"] += female
        entry["records"].append(record)
    return report


class AttendanceService:
    """Service class for attendance operations."""

    @staticmethod
    def _led_groups(db: Client, user_id: str) -> list[dict[str, Any]]:
        return find_containing(db, GROUPS_COLLECTION, "leaders", user_id)

    @staticmethod
    def _require_co_leader(
        db: Client, user: dict[str, Any], co_leader_id: str
    ) -> dict[str, Any]:
        co_leader = get_document(db, USERS_COLLECTION, co_leader_id)
        if co_leader is None:
            raise UserNotFound("Co-leader not found.")
        shares_group = any(
            len(group.get("leaders") or []) == 2 and co_leader_id in group["leaders"]
            for group in AttendanceService._led_groups(db, user["id"])
        )
        if not shares_group:
            raise ForbiddenError("The co-leader does not lead any of your groups.")
        if co_leader.get("gender") == user.get("gender"):
            raise ValidationError("The co-leader must be of the opposite gender.")
        return co_leader

    @staticmethod
    def _require_own_record(
        db: Client, user_id: str, record_id: str, action: str
    ) -> dict[str, Any]:
        record = get_document(db, ATTENDANCE_COLLECTION, record_id)
        if record is None:
            raise AttendanceRecordNotFound()
        if record.get("userId") != user_id:
            raise ForbiddenError(f"You can only {action} your own records.")
        return record

    @staticmethod
    def _period_records(
        db: Client, user_id: str, start: datetime.datetime, end: datetime.datetime
    ) -> list[dict[str, Any]]:
        return [
            record
            for record in find_all(db, ATTENDANCE_COLLECTION, "userId", user_id)
            if in_period(record, start, end)
        ]

    @staticmethod
    def get_co_leaders(db: Client, user_id: str) -> list[CoLeader]:
        """Co-leaders of the opposite gender across the groups the caller leads."""
        user = require_user(db, user_id)
        co_leader_ids = [
            leader_id
            for group in AttendanceService._led_groups(db, user_id)
            if len(group.get("leaders") or []) == 2
            for leader_id in group["leaders"]
            if leader_id != user_id
        ]
        return [
            {
                "id": co_leader["id"],
                "name": co_leader.get("name"),
                "email": co_leader.get("email"),
                "gender": co_leader.get("gender"),
            }
            for co_leader in fetch_documents(db, USERS_COLLECTION, co_leader_ids)
            if co_leader.get("gender") != user.get("gender")
        ]

    @staticmethod
    def record_attendance(db: Client, user_id: str, data: dict[str, Any]) -> list[str]:
        """Store a day's tally, handing people of the other gender to the co-leader.

        Returns the ids of the records written.
        """
        user = require_user(db, user_id)
        fields = clean_attendance_fields(data)
        co_leader_id = data.get("coLeaderId")
        co_leader_attended = data.get("coLeaderAttended")
        notes_presence = fields["type"] in PRESENCE_ATTENDANCE_TYPES

        is_male = user.get("gender") == GENDER_MALE
        same_count = fields["maleCount"] if is_male else fields["femaleCount"]
        other_count = fields["femaleCount"] if is_male else fields["maleCount"]

        records: list[dict[str, Any]] = []
        if co_leader_id and other_count > 0:
            AttendanceService._require_co_leader(db, user, co_leader_id)
            if co_leader_attended is None:
                co_leader_attended = fields["attended"]
            records.append(
                {
                    **fields,
                    "userId": co_leader_id,
                    "attended": co_leader_attended if notes_presence else None,
                    "maleCount": 0 if is_male else other_count,
                    "femaleCount": other_count if is_male else 0,
                }
            )
            if same_count > 0 or fields["attended"]:
                records.append(
                    {
                        **fields,
                        "userId": user_id,
                        "maleCount": same_count if is_male else 0,
                        "femaleCount": 0 if is_male else same_count,
                    }
                )
        else:
            if co_leader_id and notes_presence and co_leader_attended is not None:
                AttendanceService._require_co_leader(db, user, co_leader_id)
                records.append(
                    {
                        **fields,
                        "userId": co_leader_id,
                        "attended": co_leader_attended,
                        "maleCount": 0,
                        "femaleCount": 0,
                    }
                )
            records.insert(0, {**fields, "userId": user_id})

        now = utcnow()
        collection = db.collection(ATTENDANCE_COLLECTION)
        record_ids = []
        for record in records:
            _, record_ref = collection.add(
                {**record, "createdAt": now, "updatedAt": now}
            )
            record_ids.append(record_ref.id)
        current_app.logger.info(
            f"Attendance ({fields['type']}) recorded by {user_id}: {record_ids}"
        )
        return record_ids

    @staticmethod
    def update_attendance(
        db: Client, user_id: str, record_id: str, data: dict[str, Any]
    ) -> None:
        """Rewrite one of the caller's records.

        When a co-leader's presence is given, their record for the same day and
        type is updated, or created if the tally has people of their gender.
        """
        AttendanceService._require_own_record(db, user_id, record_id, "edit")
        user = require_user(db, user_id)
        fields = clean_attendance_fields(data)

        co_leader_id = data.get("coLeaderId")
        co_leader_attended = data.get("coLeaderAttended")
        sync_co_leader = bool(
            co_leader_id
            and co_leader_attended is not None
            and fields["type"] in PRESENCE_ATTENDANCE_TYPES
        )
        if sync_co_leader:
            AttendanceService._require_co_leader(db, user, co_leader_id)

        collection = db.collection(ATTENDANCE_COLLECTION)
        now = utcnow()
        collection.document(record_id).update({**fields, "updatedAt": now})
        if not sync_co_leader:
            return

        co_leader_record = next(
            (
                record
                for record in find_all(
                    db, ATTENDANCE_COLLECTION, "userId", co_leader_id
                )
                if record.get("date") == fields["date"]
                and record.get("type") == fields["type"]
            ),
            None,
        )
        if co_leader_record is not None:
            collection.document(co_leader_record["id"]).update(
                {"attended": co_leader_attended, "updatedAt": now}
            )
            return

        is_male = user.get("gender") == GENDER_MALE
        other_count = fields["femaleCount"] if is_male else fields["maleCount"]
        if other_count > 0:
            collection.add(
                {
                    **fields,
                    "userId": co_leader_id,
                    "attended": co_leader_attended,
                    "maleCount": 0 if is_male else other_count,
                    "femaleCount": other_count if is_male else 0,
                    "createdAt": now,
                    "updatedAt": now,
                }
            )

    @staticmethod
    def delete_attendance(db: Client, user_id: str, record_id: str) -> None:
        """Delete one of the caller's records."""
        AttendanceService._require_own_record(db, user_id, record_id, "delete")
        db.collection(ATTENDANCE_COLLECTION).document(record_id).delete()
        current_app.logger.info(f"Attendance record {record_id} deleted by {user_id}")

    @staticmethod
    def get_my_attendance_records(
        db: Client,
        user_id: str,
        record_type: str | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> list[dict[str, Any]]:
        """The caller's records, newest first.

        The month filter applies only when both month and year are given.
        """
        records = find_all(db, ATTENDANCE_COLLECTION, "userId", user_id)
        if record_type:
            records = [r for r in records if r.get("type") == record_type]
        if month is not None and year is not None:
            start, end = report_period(year, month)
            records = [r for r in records if in_period(r, start, end)]
        return newest_first(records)

    @staticmethod
    def get_attendance_records_by_user(
        db: Client, user_id: str, disciple_id: str
    ) -> list[dict[str, Any]]:
        """A disciple's records, for a leader of one of the disciple's groups."""
        groups = AttendanceService._led_groups(db, user_id)
        if not groups:
            raise ForbiddenError("Only leaders can view their disciples' records.")
        if get_document(db, USERS_COLLECTION, disciple_id) is None:
            raise UserNotFound()
        if not any(disciple_id in (g.get("disciples") or []) for g in groups):
            raise ForbiddenError("You can only view the records of your disciples.")
        return newest_first(
            find_all(db, ATTENDANCE_COLLECTION, "userId", disciple_id)
        )

    @staticmethod
    def get_my_report(
        db: Client, user_id: str, year: int, month: int | None = None
    ) -> dict[str, ReportEntry]:
        """The caller's totals per type for a month, or for the whole year."""
        user = require_user(db, user_id)
        start, end = report_period(year, month)
        records = AttendanceService._period_records(db, user_id, start, end)
        return build_report(records, {user_id: user.get("gender")})

    @staticmethod
    def get_group_report(
        db: Client,
        user_id: str,
        year: int,
        month: int | None = None,
        disciple_id: str | None = None,
        group_id: str | None = None,
    ) -> dict[str, Any]:
        """The caller's totals next to those of their disciples.

        Users who lead no group get only their own report. The disciples are
        those of ``group_id`` when given, otherwise everyone whose leader is the
        caller, optionally narrowed to ``disciple_id``.
        """
        user = require_user(db, user_id)
        start, end = report_period(year, month)
        my_report = build_report(
            AttendanceService._period_records(db, user_id, start, end),
            {user_id: user.get("gender")},
        )

        groups = AttendanceService._led_groups(db, user_id)
        if not groups:
            return {"isLeader": False, "myReport": my_report, "groupReport": None}

        if group_id:
            group = next((g for g in groups if g["id"] == group_id), None)
            if group is None:
                raise ForbiddenError("That group is not one of yours.")
            disciples = fetch_documents(
                db, USERS_COLLECTION, group.get("disciples") or []
            )
        else:
            disciples = find_all(db, USERS_COLLECTION, "leader", user_id)

        if disciple_id:
            disciples = [d for d in disciples if d["id"] == disciple_id]
            if not disciples:
                raise ForbiddenError("That disciple is not one of yours.")

        genders = {d["id"]: d.get("gender") for d in disciples}
        disciple_records = [
            record
            for disciple in genders
            for record in AttendanceService._period_records(db, disciple, start, end)
        ]
        disciples_report = build_report(disciple_records, genders)

        group_report: dict[str, GroupReportEntry] = {}
        for record_type in ATTENDANCE_TYPES:
            mine = my_report[record_type]
            theirs = disciples_report[record_type]
            group_report[record_type] = {
                "total": theirs["total"],
                "myTotal": mine["total"],
                "disciplesTotal": theirs["total"],
                "male": theirs["male"],
                "female": theirs["female"],
                "myMale": mine["male"],
                "myFemale": mine["female"],
                "disciplesMale": theirs["male"],
                "disciplesFemale": theirs["female"],
            }
        return {"isLeader": True, "myReport": my_report, "groupReport": group_report}

"""Leader-facing statistics over the disciples of the groups a user leads."""

from __future__ import annotations

import datetime
from collections import Counter
from typing import TYPE_CHECKING, Any

from fellowship.constants import (
    AGE_RANGES,
    ATTENDANCE_COLLECTION,
    ATTENDANCE_SERVICE,
    CHURCH_SERVICES,
    COURSES_COLLECTION,
    DEFAULT_PERIOD_TYPE,
    GENDER_FEMALE,
    GENDER_MALE,
    GROUPS_COLLECTION,
    POPULAR_COURSES_LIMIT,
    SERVICE_ATTENDANCE_TYPES,
    TREND_MONTHS,
    UNKNOWN_COURSE_NAME,
    USERS_COLLECTION,
)
from fellowship.core.documents import (
    fetch_documents,
    find_all,
    find_containing,
    get_document,
)
from fellowship.errors import ForbiddenError, GroupNotFound

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def calculate_age(birthday: Any, today: datetime.date | None = None) -> int:
    """Whole years between a birthday and today."""
    if isinstance(birthday, datetime.datetime):
        birthday = birthday.date()
    today = today or datetime.date.today()
    age = today.year - birthday.year
    if (today.month, today.day) < (birthday.month, birthday.day):
        age -= 1
    return age


def age_range(age: int) -> str:
    """Bucket an age into one of the reporting ranges."""
    if age < 13:
        return "-13"
    if age <= 17:
        return "13-17"
    if age <= 25:
        return "18-25"
    if age <= 35:
        return "26-35"
    if age <= 45:
        return "36-45"
    if age <= 55:
        return "46-55"
    return "56+"


def add_months(day: datetime.date, months: int) -> datetime.date:
    """First day of the month ``months`` away from the month of ``day``."""
    index = day.year * 12 + day.month - 1 + months
    return datetime.date(index // 12, index % 12 + 1, 1)


def period_range(
    period_type: str, reference: datetime.date, today: datetime.date | None = None
) -> tuple[datetime.date, datetime.date]:
    """First and last day (inclusive) of the period around ``reference``.

    Weeks run from Monday to the reference day. Quarters are four-month terms:
    Jan-Apr, May-Aug and Sep-Dec. A month, term or year still under way ends
    today.
    """
    if period_type == "week":
        return reference - datetime.timedelta(days=reference.weekday()), reference

    if period_type == "month":
        start = reference.replace(day=1)
        months = 1
    elif period_type == "quarter":
        start = datetime.date(reference.year, (reference.month - 1) // 4 * 4 + 1, 1)
        months = 4
    else:
        start = datetime.date(reference.year, 1, 1)
        months = 12
    end = add_months(start, months) - datetime.timedelta(days=1)

    today = today or datetime.date.today()
    if start <= today <= end:
        end = today
    return start, end


def record_day(record: dict[str, Any]) -> datetime.date | None:
    """Calendar day of an attendance record."""
    value = record.get("date")
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc)
        return value.date()
    return value


class StatisticsService:
    """Service class for leader statistics."""

    @staticmethod
    def get_disciples(
        db: Client, user_id: str, group_id: str | None = None
    ) -> list[dict[str, Any]]:
        """Resolve the disciples a leader may report on.

        With a group id, that group's disciples (leaders only); otherwise the
        distinct disciples of every group the caller leads.
        """
        if group_id:
            group = get_document(db, GROUPS_COLLECTION, group_id)
            if group is None:
                raise GroupNotFound()
            if user_id not in (group.get("leaders") or []):
                raise ForbiddenError("Only leaders can view the group's statistics.")
            disciple_ids = group.get("disciples") or []
        else:
            disciple_ids = [
                disciple_id
                for group in find_containing(db, GROUPS_COLLECTION, "leaders", user_id)
                for disciple_id in group.get("disciples") or []
            ]
        return fetch_documents(db, USERS_COLLECTION, disciple_ids)

    @staticmethod
    def get_gender_distribution(
        db: Client, user_id: str, group_id: str | None = None
    ) -> dict[str, int]:
        """Count the disciples by gender."""
        disciples = StatisticsService.get_disciples(db, user_id, group_id)
        return {
            "male": sum(1 for d in disciples if d.get("gender") == GENDER_MALE),
            "female": sum(1 for d in disciples if d.get("gender") == GENDER_FEMALE),
        }

    @staticmethod
    def get_age_distribution(
        db: Client, user_id: str, group_id: str | None = None
    ) -> list[dict[str, Any]]:
        """Count the disciples per age range, skipping unknown birthdays."""
        disciples = StatisticsService.get_disciples(db, user_id, group_id)
        counts = dict.fromkeys(AGE_RANGES, 0)
        for disciple in disciples:
            birthday = disciple.get("birthday")
            if birthday:
                counts[age_range(calculate_age(birthday))] += 1
        return [{"range": bucket, "count": count} for bucket, count in counts.items()]

    @staticmethod
    def get_school_participation(
        db: Client, user_id: str, group_id: str | None = None
    ) -> dict[str, int]:
        """Count the disciples active and inactive in school."""
        disciples = StatisticsService.get_disciples(db, user_id, group_id)
        active = sum(1 for d in disciples if d.get("isActiveInSchool"))
        return {"active": active, "inactive": len(disciples) - active}

    @staticmethod
    def get_popular_courses(
        db: Client,
        user_id: str,
        group_id: str | None = None,
        limit: int = POPULAR_COURSES_LIMIT,
    ) -> list[dict[str, Any]]:
        """Courses ranked by how many of the disciples are enrolled."""
        disciples = StatisticsService.get_disciples(db, user_id, group_id)
        counts: Counter[str] = Counter()
        for disciple in disciples:
            counts.update(disciple.get("currentCourses") or [])

        names = {
            course["id"]: course.get("name")
            for course in fetch_documents(db, COURSES_COLLECTION, list(counts))
        }
        return [
            {"courseName": names.get(course_id) or UNKNOWN_COURSE_NAME, "count": count}
            for course_id, count in counts.most_common(limit or POPULAR_COURSES_LIMIT)
        ]

    @staticmethod
    def _attendance_records(
        db: Client,
        user_id: str,
        group_id: str | None,
        start: datetime.date,
        end: datetime.date,
    ) -> list[dict[str, Any]]:
        # The leader's own tallies count alongside their disciples'.
        disciples = StatisticsService.get_disciples(db, user_id, group_id)
        user_ids = dict.fromkeys([user_id, *(d["id"] for d in disciples)])
        records = []
        for uid in user_ids:
            for record in find_all(db, ATTENDANCE_COLLECTION, "userId", uid):
                day = record_day(record)
                if day is not None and start <= day <= end:
                    records.append(record)
        return records

    @staticmethod
    def get_attendance_trends(
        db: Client,
        user_id: str,
        group_id: str | None = None,
        period_type: str = DEFAULT_PERIOD_TYPE,
        reference: datetime.date | None = None,
        today: datetime.date | None = None,
    ) -> list[dict[str, Any]]:
        """Monthly service attendance per weekend service.

        Weeks chart the reference month, months the six months up to it, and
        quarters and years each of their months. A record counts its people
        plus its owner when they attended.
        """
        today = today or datetime.date.today()
        start, end = period_range(period_type, reference or today, today)
        months = TREND_MONTHS[period_type]
        if period_type in ("week", "month"):
            first_month = add_months(end, 1 - months)
        else:
            first_month = start

        buckets: dict[tuple[int, int], dict[str, Any]] = {}
        for offset in range(months):
            month = add_months(first_month, offset)
            buckets[(month.year, month.month)] = {
                "month": month.strftime("%b %Y"),
                **dict.fromkeys(CHURCH_SERVICES, 0),
            }

        for record in StatisticsService._attendance_records(
            db, user_id, group_id, first_month, end
        ):
            service = record.get("service")
            if record.get("type") != ATTENDANCE_SERVICE:
                continue
            if service not in CHURCH_SERVICES:
                continue
            day = record_day(record)
            bucket = buckets.get((day.year, day.month))
            if bucket is None:
                continue
            bucket[service] += (
                (record.get("maleCount") or 0)
                + (record.get("femaleCount") or 0)
                + (1 if record.get("attended") else 0)
            )
        return list(buckets.values())

    @staticmethod
    def get_service_distribution(
        db: Client,
        user_id: str,
        group_id: str | None = None,
        period_type: str = DEFAULT_PERIOD_TYPE,
        reference: datetime.date | None = None,
        today: datetime.date | None = None,
    ) -> list[dict[str, Any]]:
        """People counted at each weekend service over the period, in schedule order."""
        today = today or datetime.date.today()
        start, end = period_range(period_type, reference or today, today)
        counts = dict.fromkeys(CHURCH_SERVICES, 0)
        for record in StatisticsService._attendance_records(
            db, user_id, group_id, start, end
        ):
            service = record.get("service")
            if record.get("type") in SERVICE_ATTENDANCE_TYPES and service in counts:
                counts[service] += (record.get("maleCount") or 0) + (
                    record.get("femaleCount") or 0
                )
        return [
            {"service": CHURCH_SERVICES[service], "count": count}
            for service, count in counts.items()
        ]

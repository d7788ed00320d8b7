"""Routes for the stats blueprint."""

from __future__ import annotations

from typing import Any

from flask import g, jsonify, request

from fellowship.auth.decorators import login_required
from fellowship.constants import DEFAULT_PERIOD_TYPE, POPULAR_COURSES_LIMIT
from fellowship.errors import ValidationError
from fellowship.extensions import get_db

from . import bp
from .forms import PeriodForm
from .services import StatisticsService


def _group_id() -> str | None:
    return request.args.get("groupId") or None


def _period_args() -> dict[str, Any]:
    args = PeriodForm(formdata=request.args).validated_data()
    return {
        "group_id": args.get("groupId") or None,
        "period_type": args.get("periodType") or DEFAULT_PERIOD_TYPE,
        "reference": args.get("referenceDate"),
    }


@bp.route("/gender", methods=["GET"])
@login_required
def get_gender_distribution() -> Any:
    """Disciples by gender."""
    return jsonify(
        StatisticsService.get_gender_distribution(get_db(), g.user_id, _group_id())
    )


@bp.route("/age", methods=["GET"])
@login_required
def get_age_distribution() -> Any:
    """Disciples by age range."""
    return jsonify(
        StatisticsService.get_age_distribution(get_db(), g.user_id, _group_id())
    )


@bp.route("/school", methods=["GET"])
@login_required
def get_school_participation() -> Any:
    """Disciples active and inactive in school."""
    return jsonify(
        StatisticsService.get_school_participation(get_db(), g.user_id, _group_id())
    )


@bp.route("/courses", methods=["GET"])
@login_required
def get_popular_courses() -> Any:
    """The most popular courses among the disciples."""
    limit = request.args.get("limit", POPULAR_COURSES_LIMIT, type=int)
    if limit is None or limit < 1:
        raise ValidationError("limit must be a positive integer.")
    return jsonify(
        StatisticsService.get_popular_courses(
            get_db(), g.user_id, _group_id(), limit=limit
        )
    )


@bp.route("/attendance-trends", methods=["GET"])
@login_required
def get_attendance_trends() -> Any:
    """Monthly service attendance for the caller and their disciples."""
    return jsonify(
        StatisticsService.get_attendance_trends(get_db(), g.user_id, **_period_args())
    )


@bp.route("/services", methods=["GET"])
@login_required
def get_service_distribution() -> Any:
    """People counted per weekend service over a period."""
    return jsonify(
        StatisticsService.get_service_distribution(
            get_db(), g.user_id, **_period_args()
        )
    )

"""Routes for the attendance blueprint."""

from flask import g, jsonify, request

from fellowship.auth.decorators import login_required
from fellowship.errors import ValidationError
from fellowship.extensions import get_db

from . import bp
from .forms import AttendanceForm, RecordFilterForm, ReportForm
from .services import AttendanceService


def _attendance_data():
    """The validated form plus the presence flags from the raw JSON body."""
    data = AttendanceForm().validated_data()
    payload = request.get_json(silent=True) or {}
    for flag in ("attended", "coLeaderAttended"):
        value = payload.get(flag)
        if value is None:
            continue
        # BooleanField reads JSON false as missing, so check the raw value.
        if not isinstance(value, bool):
            raise ValidationError(f"{flag} must be true or false.")
        data[flag] = value
    return data


@bp.route("/co-leaders", methods=["GET"])
@login_required
def get_co_leaders():
    """List the caller's co-leaders of the opposite gender."""
    return jsonify(AttendanceService.get_co_leaders(get_db(), g.user_id))


@bp.route("/", methods=["POST"])
@login_required
def record_attendance():
    """Record a day's tally."""
    record_ids = AttendanceService.record_attendance(
        get_db(), g.user_id, _attendance_data()
    )
    return jsonify({"recordIds": record_ids}), 201


@bp.route("/<string:record_id>", methods=["PUT"])
@login_required
def update_attendance(record_id):
    """Rewrite one of the caller's records."""
    AttendanceService.update_attendance(
        get_db(), g.user_id, record_id, _attendance_data()
    )
    return jsonify({"success": True})


@bp.route("/<string:record_id>", methods=["DELETE"])
@login_required
def delete_attendance(record_id):
    """Delete one of the caller's records."""
    AttendanceService.delete_attendance(get_db(), g.user_id, record_id)
    return jsonify({"success": True})


@bp.route("/mine", methods=["GET"])
@login_required
def get_my_attendance_records():
    """List the caller's records, optionally by type and month."""
    filters = RecordFilterForm(formdata=request.args).validated_data()
    return jsonify(
        AttendanceService.get_my_attendance_records(
            get_db(),
            g.user_id,
            record_type=filters.get("type"),
            month=filters.get("month"),
            year=filters.get("year"),
        )
    )


@bp.route("/users/<string:user_id>", methods=["GET"])
@login_required
def get_attendance_records_by_user(user_id):
    """List a disciple's records."""
    return jsonify(
        AttendanceService.get_attendance_records_by_user(get_db(), g.user_id, user_id)
    )


@bp.route("/report/mine", methods=["GET"])
@login_required
def get_my_report():
    """The caller's monthly or yearly totals."""
    args = ReportForm(formdata=request.args).validated_data()
    return jsonify(
        AttendanceService.get_my_report(
            get_db(), g.user_id, args["year"], args.get("month")
        )
    )


@bp.route("/report/group", methods=["GET"])
@login_required
def get_group_report():
    """The caller's totals next to their disciples'."""
    args = ReportForm(formdata=request.args).validated_data()
    return jsonify(
        AttendanceService.get_group_report(
            get_db(),
            g.user_id,
            args["year"],
            month=args.get("month"),
            disciple_id=args.get("discipleId"),
            group_id=args.get("groupId"),
        )
    )

"""Routes for the course blueprint."""

from flask import g, jsonify, request

from fellowship.auth.decorators import login_required
from fellowship.errors import ValidationError
from fellowship.extensions import get_db

from . import bp
from .forms import CourseForm, CourseSelectionForm, UpdateCourseForm
from .services import CourseService


@bp.route("/", methods=["GET"])
def get_all_courses():
    """List the course catalog."""
    return jsonify(CourseService.get_all_courses(get_db()))


@bp.route("/mine", methods=["GET"])
@login_required
def get_my_courses():
    """List the caller's courses."""
    return jsonify(CourseService.get_my_courses(get_db(), g.user_id))


@bp.route("/<string:course_id>", methods=["GET"])
def get_course_by_id(course_id):
    """Return one course."""
    return jsonify(CourseService.get_course_by_id(get_db(), course_id))


@bp.route("/", methods=["POST"])
@login_required
def create_course():
    """Add a course to the catalog."""
    data = CourseForm().validated_data()
    course_id = CourseService.create_course(
        get_db(), g.user_id, data["name"], data.get("description")
    )
    return jsonify({"id": course_id}), 201


@bp.route("/<string:course_id>", methods=["PATCH"])
@login_required
def update_course(course_id):
    """Edit a course."""
    updates = UpdateCourseForm().validated_data()
    CourseService.update_course(get_db(), g.user_id, course_id, updates)
    return jsonify({"success": True})


@bp.route("/enroll", methods=["POST"])
@login_required
def enroll_in_courses():
    """Enroll the caller in one or more courses."""
    data = CourseSelectionForm().validated_data()
    CourseService.enroll_in_courses(get_db(), g.user_id, data.get("courseIds", []))
    return jsonify({"success": True})


@bp.route("/unenroll", methods=["POST"])
@login_required
def unenroll_from_courses():
    """Drop one or more of the caller's courses."""
    data = CourseSelectionForm().validated_data()
    CourseService.unenroll_from_courses(
        get_db(), g.user_id, data.get("courseIds", [])
    )
    return jsonify({"success": True})


@bp.route("/school-status", methods=["PUT"])
@login_required
def update_school_status():
    """Set whether the caller is active in school."""
    payload = request.get_json(silent=True) or {}
    is_active = payload.get("isActiveInSchool")
    # BooleanField reads JSON false as missing, so check the raw value.
    if not isinstance(is_active, bool):
        raise ValidationError("isActiveInSchool must be true or false.")
    CourseService.update_school_status(get_db(), g.user_id, is_active)
    return jsonify({"success": True})

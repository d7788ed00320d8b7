"""Routes for the activity blueprint."""

from flask import g, jsonify

from fellowship.auth.decorators import login_required
from fellowship.extensions import get_db

from . import bp
from .forms import ActivityForm, RespondForm, UpdateActivityForm
from .services import ActivityService


@bp.route("/group/<string:group_id>", methods=["GET"])
@login_required
def get_activities_by_group(group_id):
    """List a group's activities."""
    return jsonify(
        ActivityService.get_activities_by_group(get_db(), g.user_id, group_id)
    )


@bp.route("/<string:activity_id>", methods=["GET"])
@login_required
def get_activity_with_responses(activity_id):
    """Return an activity with everyone's attendance."""
    return jsonify(
        ActivityService.get_activity_with_responses(get_db(), g.user_id, activity_id)
    )


@bp.route("/<string:activity_id>/my-response", methods=["GET"])
@login_required
def get_my_activity_response(activity_id):
    """Return the caller's response to an activity."""
    return jsonify(
        ActivityService.get_my_activity_response(get_db(), g.user_id, activity_id)
    )


@bp.route("/", methods=["POST"])
@login_required
def create_activity():
    """Schedule an activity."""
    data = ActivityForm().validated_data()
    activity_id = ActivityService.create_activity(get_db(), g.user_id, data)
    return jsonify({"id": activity_id}), 201


@bp.route("/<string:activity_id>/respond", methods=["POST"])
@login_required
def respond_to_activity(activity_id):
    """Confirm, decline or defer attendance."""
    data = RespondForm().validated_data()
    doc_id = ActivityService.respond_to_activity(
        get_db(), g.user_id, activity_id, data["status"]
    )
    return jsonify({"id": doc_id})


@bp.route("/<string:activity_id>", methods=["PATCH"])
@login_required
def update_activity(activity_id):
    """Edit an activity."""
    updates = UpdateActivityForm().validated_data()
    ActivityService.update_activity(get_db(), g.user_id, activity_id, updates)
    return jsonify({"success": True})


@bp.route("/<string:activity_id>", methods=["DELETE"])
@login_required
def delete_activity(activity_id):
    """Delete an activity and its responses."""
    ActivityService.delete_activity(get_db(), g.user_id, activity_id)
    return jsonify({"success": True})

"""Routes for the user blueprint."""

from flask import g, jsonify, request

from fellowship.auth.decorators import login_required
from fellowship.extensions import get_db

from . import bp
from .forms import CompleteProfileForm, UpdateProfileForm
from .services import DirectoryService


@bp.route("/me", methods=["GET"])
@login_required
def get_my_profile():
    """Return the caller's enriched profile."""
    return jsonify(DirectoryService.get_my_profile(get_db(), g.user_id))


@bp.route("/me", methods=["PATCH"])
@login_required
def update_my_profile():
    """Patch the caller's name, gender, phone or birthday."""
    updates = UpdateProfileForm().validated_data()
    DirectoryService.update_my_profile(get_db(), g.user_id, updates)
    return jsonify({"success": True})


@bp.route("/me/complete", methods=["POST"])
@login_required
def complete_profile():
    """Complete the caller's profile with role and gender."""
    data = CompleteProfileForm().validated_data()
    DirectoryService.complete_profile(
        get_db(),
        g.user_id,
        name=data["name"],
        role=data["role"],
        gender=data["gender"],
        phone=data.get("phone"),
    )
    return jsonify({"success": True})


@bp.route("/by-email", methods=["GET"])
def get_user_by_email():
    """Public exact-match lookup by email."""
    email = request.args.get("email", "")
    return jsonify(DirectoryService.get_user_by_email(get_db(), email))


@bp.route("/search", methods=["GET"])
@login_required
def search_users_by_email():
    """Autocomplete users by a fragment of their email."""
    search_term = request.args.get("term", "")
    return jsonify(
        DirectoryService.search_users_by_email(get_db(), g.user_id, search_term)
    )


@bp.route("/<string:leader_id>/disciples", methods=["GET"])
@login_required
def get_disciples_by_leader(leader_id):
    """List the disciples assigned to the caller."""
    return jsonify(
        DirectoryService.get_disciples_by_leader(get_db(), g.user_id, leader_id)
    )

"""Routes for the group blueprint."""

from flask import g, jsonify

from fellowship.auth.decorators import login_required
from fellowship.extensions import get_db

from . import bp
from .forms import GroupForm, JoinGroupForm, UpdateGroupForm
from .services import GroupService


@bp.route("/leading", methods=["GET"])
@login_required
def get_groups_as_leader():
    """List the groups the caller leads."""
    return jsonify(GroupService.get_groups_as_leader(get_db(), g.user_id))


@bp.route("/discipled", methods=["GET"])
@login_required
def get_group_as_disciple():
    """Return the group the caller attends as a disciple."""
    return jsonify(GroupService.get_group_as_disciple(get_db(), g.user_id))


@bp.route("/invitation/<string:code>", methods=["GET"])
def get_group_by_invitation_code(code):
    """Public preview of a group before joining it."""
    return jsonify(GroupService.get_group_by_invitation_code(get_db(), code))


@bp.route("/<string:group_id>", methods=["GET"])
@login_required
def get_group_by_id(group_id):
    """Return a group's full roster for one of its members."""
    return jsonify(GroupService.get_group_by_id(get_db(), g.user_id, group_id))


@bp.route("/", methods=["POST"])
@login_required
def create_group():
    """Create a group led by the caller."""
    data = GroupForm().validated_data()
    group_id = GroupService.create_group(get_db(), g.user_id, data)
    return jsonify({"id": group_id}), 201


@bp.route("/join", methods=["POST"])
@login_required
def join_group():
    """Join a group with an invitation code."""
    data = JoinGroupForm().validated_data()
    return jsonify(
        GroupService.join_group(get_db(), g.user_id, data["invitationCode"])
    )


@bp.route("/<string:group_id>", methods=["PATCH"])
@login_required
def update_group(group_id):
    """Rename or move a group."""
    updates = UpdateGroupForm().validated_data()
    GroupService.update_group(get_db(), g.user_id, group_id, updates)
    return jsonify({"success": True})

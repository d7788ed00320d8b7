"""Routes for the grid blueprint."""

from flask import g, jsonify, request

from fellowship.auth.decorators import login_required
from fellowship.extensions import get_db

from . import bp
from .forms import AddMemberForm, GridForm
from .services import GridService


@bp.route("/search", methods=["GET"])
def search_grids_by_name():
    """Autocomplete grids by a fragment of their name."""
    search_term = request.args.get("term", "")
    return jsonify(GridService.search_grids_by_name(get_db(), search_term))


@bp.route("/mine", methods=["GET"])
@login_required
def get_my_grid():
    """Return the caller's grid, if they own one."""
    return jsonify(GridService.get_my_grid(get_db(), g.user_id))


@bp.route("/", methods=["POST"])
@login_required
def create_grid():
    """Create the caller's grid."""
    form = GridForm()
    data = form.validated_data()
    grid_id = GridService.create_grid(get_db(), g.user_id, data["name"])
    return jsonify({"id": grid_id}), 201


@bp.route("/mine/members", methods=["GET"])
@login_required
def get_grid_members():
    """List the members of the caller's grid."""
    return jsonify(GridService.get_grid_members(get_db(), g.user_id))


@bp.route("/mine/members", methods=["POST"])
@login_required
def add_member_to_grid():
    """Add a user to the caller's grid by email."""
    data = AddMemberForm().validated_data()
    return jsonify(
        GridService.add_member_to_grid(get_db(), g.user_id, data["userEmail"])
    )


@bp.route("/mine/members/<string:member_id>", methods=["DELETE"])
@login_required
def remove_member_from_grid(member_id):
    """Remove a member from the caller's grid."""
    GridService.remove_member_from_grid(get_db(), g.user_id, member_id)
    return jsonify({"success": True})


@bp.route("/mine/stats", methods=["GET"])
@login_required
def get_grid_stats():
    """Return member counters for the caller's grid."""
    return jsonify(GridService.get_grid_stats(get_db(), g.user_id))


@bp.route("/<string:grid_id>", methods=["PATCH"])
@login_required
def update_grid(grid_id):
    """Rename a grid owned by the caller."""
    data = GridForm().validated_data()
    GridService.update_grid(get_db(), g.user_id, grid_id, data["name"])
    return jsonify({"success": True})

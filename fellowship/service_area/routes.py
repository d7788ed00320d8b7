"""Routes for the service area blueprint."""

from flask import g, jsonify

from fellowship.auth.decorators import login_required
from fellowship.extensions import get_db

from . import bp
from .forms import AssignServiceAreaForm, ServiceAreaForm, UpdateServiceAreaForm
from .services import ServiceAreaService


@bp.route("/", methods=["GET"])
def get_all_service_areas():
    """List every service area."""
    return jsonify(ServiceAreaService.get_all_service_areas(get_db()))


@bp.route("/mine", methods=["GET"])
@login_required
def get_my_service_area():
    """Return the caller's service area."""
    return jsonify(ServiceAreaService.get_my_service_area(get_db(), g.user_id))


@bp.route("/mine", methods=["PUT"])
@login_required
def assign_service_area():
    """Serve in a service area."""
    data = AssignServiceAreaForm().validated_data()
    ServiceAreaService.assign_service_area(get_db(), g.user_id, data["serviceId"])
    return jsonify({"success": True})


@bp.route("/mine", methods=["DELETE"])
@login_required
def remove_service_area():
    """Stop serving in any service area."""
    ServiceAreaService.remove_service_area(get_db(), g.user_id)
    return jsonify({"success": True})


@bp.route("/<string:service_id>", methods=["GET"])
def get_service_area_by_id(service_id):
    """Return one service area."""
    return jsonify(ServiceAreaService.get_service_area_by_id(get_db(), service_id))


@bp.route("/", methods=["POST"])
@login_required
def create_service_area():
    """Create a service area."""
    data = ServiceAreaForm().validated_data()
    service_id = ServiceAreaService.create_service_area(
        get_db(), g.user_id, data["name"]
    )
    return jsonify({"id": service_id}), 201


@bp.route("/<string:service_id>", methods=["PATCH"])
@login_required
def update_service_area(service_id):
    """Rename a service area."""
    data = UpdateServiceAreaForm().validated_data()
    ServiceAreaService.update_service_area(
        get_db(), g.user_id, service_id, data.get("name")
    )
    return jsonify({"success": True})


@bp.route("/<string:service_id>", methods=["DELETE"])
@login_required
def delete_service_area(service_id):
    """Delete a service area."""
    ServiceAreaService.delete_service_area(get_db(), g.user_id, service_id)
    return jsonify({"success": True})


@bp.route("/users/<string:user_id>", methods=["PUT"])
@login_required
def assign_service_area_to_user(user_id):
    """Assign a service area to another user."""
    data = AssignServiceAreaForm().validated_data()
    ServiceAreaService.assign_service_area_to_user(
        get_db(), g.user_id, user_id, data["serviceId"]
    )
    return jsonify({"success": True})


@bp.route("/users/<string:user_id>", methods=["DELETE"])
@login_required
def remove_service_area_from_user(user_id):
    """Clear another user's service area."""
    ServiceAreaService.remove_service_area_from_user(get_db(), g.user_id, user_id)
    return jsonify({"success": True})

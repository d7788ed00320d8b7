"""Routes for the dashboard blueprint."""

from flask import g, jsonify

from fellowship.auth.decorators import login_required
from fellowship.extensions import get_db

from . import bp
from .services import DashboardService


@bp.route("/", methods=["GET"])
@login_required
def get_dashboard():
    """Return the caller's dashboard."""
    return jsonify(DashboardService.get_dashboard(get_db(), g.user_id))

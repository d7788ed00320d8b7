"""The service area blueprint."""

from flask import Blueprint

bp = Blueprint("service_area", __name__, url_prefix="/service-areas")

from . import routes  # noqa: E402

__all__ = ["routes"]

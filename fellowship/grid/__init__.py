"""The grid blueprint."""

from flask import Blueprint

bp = Blueprint("grid", __name__, url_prefix="/grids")

from . import routes  # noqa: E402

__all__ = ["routes"]

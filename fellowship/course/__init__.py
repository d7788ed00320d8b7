"""The course blueprint."""

from flask import Blueprint

bp = Blueprint("course", __name__, url_prefix="/courses")

from . import routes  # noqa: E402

__all__ = ["routes"]

"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g

from fellowship.errors import UnauthenticatedError


def login_required(f=None):
    """Reject the request unless an authenticated principal was resolved.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            if not g.get("user_id"):
                raise UnauthenticatedError()
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator

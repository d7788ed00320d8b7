from firebase_admin import auth
from flask import current_app, jsonify, request, session

from fellowship.constants import USERS_COLLECTION
from fellowship.core.documents import get_document
from fellowship.errors import UnauthenticatedError, UserNotFound, ValidationError
from fellowship.extensions import get_db

from . import bp


@bp.route("/session_login", methods=["POST"])
def session_login():
    """
    Called from the client after a successful Firebase sign-in.
    It receives the ID token, verifies it, and creates a server-side session.
    """
    payload = request.get_json(silent=True) or {}
    id_token = payload.get("idToken")
    if not id_token:
        raise ValidationError("idToken is required.")

    try:
        decoded_token = auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, ValueError) as e:
        current_app.logger.warning(f"Error during session login: {e}")
        raise UnauthenticatedError("Invalid token.") from e

    uid = decoded_token["uid"]
    if get_document(get_db(), USERS_COLLECTION, uid) is None:
        raise UserNotFound("User not found in Firestore.")

    session["user_id"] = uid
    return jsonify({"success": True})


@bp.route("/logout", methods=["POST"])
def logout():
    """Clear the server-side session."""
    session.clear()
    return jsonify({"success": True})

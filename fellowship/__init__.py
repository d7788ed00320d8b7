"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, g, request

from .extensions import csrf

# Endpoints authenticated by something other than the session cookie.
CSRF_EXEMPT_ENDPOINTS = {"auth.session_login"}


def _load_firebase_credentials(app):
    """Find Firebase credentials in the environment, a local file, or ADC."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except ValueError as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    return cred, project_id


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
        # A pre-built Firestore client; tests inject a MockFirestore here.
        FIRESTORE_CLIENT=None,
        WTF_CSRF_ENABLED=(os.environ.get("WTF_CSRF_ENABLED") or "true").lower()
        in ["true", "1", "t"],
        # CSRF is checked by protect_cookie_sessions below, not on every request.
        WTF_CSRF_CHECK_DEFAULT=False,
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING") and not firebase_admin._apps:
        cred, project_id = _load_firebase_credentials(app)
        if cred:
            firebase_options = {}
            if project_id:
                firebase_options["projectId"] = project_id
            try:
                firebase_admin.initialize_app(cred, firebase_options)
            except ValueError:
                # This can happen if the app is already initialized, which is fine.
                app.logger.info("Firebase app already initialized.")

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import grid as grid_bp

    app.register_blueprint(grid_bp.bp)

    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import course as course_bp

    app.register_blueprint(course_bp.bp)

    from . import service_area as service_area_bp

    app.register_blueprint(service_area_bp.bp)

    from . import activity as activity_bp

    app.register_blueprint(activity_bp.bp)

    from . import attendance as attendance_bp

    app.register_blueprint(attendance_bp.bp)

    from . import dashboard as dashboard_bp

    app.register_blueprint(dashboard_bp.bp)

    from . import stats as stats_bp

    app.register_blueprint(stats_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    from .auth.utils import resolve_principal

    @app.before_request
    def load_principal():
        """Resolve the authenticated principal for this request into g.user_id."""
        g.user_id = resolve_principal()

    @app.before_request
    def protect_cookie_sessions():
        """CSRF-check state-changing requests that rely on the session cookie."""
        if not app.config["WTF_CSRF_ENABLED"]:
            return
        if request.headers.get("Authorization"):
            return
        if request.endpoint in CSRF_EXEMPT_ENDPOINTS:
            return
        csrf.protect()

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    return app

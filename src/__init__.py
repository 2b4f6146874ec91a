import quart_flask_patch  # noqa - this has to be imported before Quart.
from quart import Quart
from quart import g
from quart import request
from quart import session

# Endpoints that never touch a submission tracker
SESSIONLESS_ENDPOINTS = {"main.healthcheck", "static"}


def create_app(config=None):
    """Create and configure the Quart application."""
    app = Quart(__name__)

    app.jinja_env.lstrip_blocks = True
    app.jinja_env.trim_blocks = True

    # Load default configuration
    app.config.from_object("src.config.Config")

    # Apply config overrides
    if config:
        if isinstance(config, dict):
            app.config.update(config)
        else:
            app.config.from_object(config)

    # Initialize extensions (each extension has init_app)
    from src.extensions import init_extensions

    init_extensions(app)

    # Register blueprints
    from src.routes import register_blueprints

    register_blueprints(app)

    # Register error handlers
    from src.error_handlers import register_error_handlers

    register_error_handlers(app)

    @app.before_request
    def load_ui_session():
        """Attach the browser's UI session, creating one on first visit.

        The UI session id lives in the signed session cookie, so every tab of
        one browser shares a submission tracker.
        """
        if request.endpoint is None or request.endpoint in SESSIONLESS_ENDPOINTS:
            return
        session.permanent = True
        session_manager = app.extensions["session_manager"]
        ui_session = session_manager.get_or_create(session.get("ui_session_id"))
        session["ui_session_id"] = ui_session.id
        g.ui_session = ui_session

    return app

"""
Flask web app for the Passport-protected dashboard.

Includes:
  - OAuth2 Authorization Code Flow with PKCE against a Laravel Passport server (see `auth/`)
  - An access guard that validates and silently refreshes tokens on every
    request under the protected path prefixes (default: /dashboard)

Run locally with `python app.py`, or under a WSGI server with
`gunicorn "app:create_app()"`.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from flask import Flask, g, render_template
from werkzeug.middleware.proxy_fix import ProxyFix

from auth.config import AuthSettings, init_auth
from auth.guard import init_guard
from auth.routes import auth_bp

__version__ = "0.1.0"


def _configure_logging() -> None:
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: AuthSettings | None = None) -> Flask:
    """
    Build the Flask app.

    `settings` overrides the environment-derived auth settings (used by tests).
    """

    load_dotenv()
    _configure_logging()

    app = Flask(__name__)

    # Respect proxy headers so redirects and cookies work behind a reverse proxy.
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)  # type: ignore[assignment]

    # ---- Authentication ----
    # Loads Passport settings from environment, registers auth routes and the guard.
    init_auth(app, settings)
    app.register_blueprint(auth_bp)
    init_guard(app)

    @app.context_processor
    def inject_user():
        """Make the user fetched by the guard available to templates as `current_user`."""
        return {"current_user": g.get("current_user")}

    @app.route("/")
    def index():
        return render_template("index.html", title=f"Passport Portal v{__version__}")

    @app.route("/dashboard")
    @app.route("/dashboard/<path:subpath>")
    def dashboard(subpath: str = ""):
        return render_template("dashboard.html", title="Dashboard", subpath=subpath)

    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=5050)

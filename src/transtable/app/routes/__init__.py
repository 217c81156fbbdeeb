"""Blueprint registrations for application routes."""

from flask import Flask

from .catalogue import blueprint as catalogue_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(catalogue_blueprint)

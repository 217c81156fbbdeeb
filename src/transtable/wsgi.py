"""WSGI entrypoint for serving the transtable HTTP API."""

from transtable.app import create_app

application = create_app()

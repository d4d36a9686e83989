"""ASGI entrypoint for the logbook API."""

from fahrtenbuch.api.app import create_app
from fahrtenbuch.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the calcam API."""

from calcam.api.app import create_app
from calcam.containers import build_container

app = create_app(build_container())

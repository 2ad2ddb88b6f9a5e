"""ASGI entrypoint for the Sazio API."""

from sazio.api.app import create_app
from sazio.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the food log API."""

from better_food_logs.api.app import create_app
from better_food_logs.containers import build_container

app = create_app(build_container())

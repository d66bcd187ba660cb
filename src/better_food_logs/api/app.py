"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Header, HTTPException, Query, Request, status

from better_food_logs.api.models import (
    AuthEventRequest,
    FoodCreateRequest,
    FoodLogCreateRequest,
    FoodLogUpdateRequest,
)
from better_food_logs.app_logging import configure_logging
from better_food_logs.containers import AppContainer
from better_food_logs.domain.sync import AuthEvent


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.catalog_service.ensure_local_seed()
        except Exception:
            logger.exception("Failed to install the local starter catalog")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods")
    async def list_foods(
        request: Request,
        q: str | None = None,
        limit: int = Query(default=20, ge=1, le=200),
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Search the active food catalog by name or brand."""
        service = _container(request).food_log_service
        foods = service.search_foods(q, x_user_id, limit)
        return {"foods": [asdict(food) for food in foods]}

    @app.post("/foods")
    async def create_food(
        payload: FoodCreateRequest,
        request: Request,
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Validate and store a new food."""
        service = _container(request).food_log_service
        result = service.create_food(payload.to_input(), x_user_id)
        if not result.ok:
            code = (
                status.HTTP_409_CONFLICT
                if result.duplicate
                else status.HTTP_400_BAD_REQUEST
            )
            raise HTTPException(status_code=code, detail=result.errors)
        return {"food": asdict(result.food)}

    @app.get("/logs")
    async def list_logs(
        request: Request, x_user_id: str | None = Header(default=None)
    ) -> dict[str, object]:
        """Return the caller's food logs, newest first."""
        logs = _container(request).food_log_service.load_food_logs(x_user_id)
        return {"logs": [asdict(log) for log in logs]}

    @app.post("/logs")
    async def create_log(
        payload: FoodLogCreateRequest,
        request: Request,
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Log servings of a catalog food."""
        service = _container(request).food_log_service
        food = service.find_food(payload.food_id, x_user_id)
        if food is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        try:
            log = service.log_food(
                food, payload.servings_consumed, x_user_id, payload.consumed_at_ms
            )
        except ValueError as exc:
            raise _bad_request(exc) from exc
        return {"log": asdict(log)}

    @app.patch("/logs/{log_id}")
    async def update_log(
        log_id: str,
        payload: FoodLogUpdateRequest,
        request: Request,
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, str]:
        """Change the servings of a food log."""
        service = _container(request).food_log_service
        try:
            updated = service.edit_log(log_id, payload.servings_consumed, x_user_id)
        except ValueError as exc:
            raise _bad_request(exc) from exc
        if not updated:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    @app.delete("/logs/{log_id}")
    async def delete_log(
        log_id: str, request: Request, x_user_id: str | None = Header(default=None)
    ) -> dict[str, str]:
        """Delete a food log."""
        if not _container(request).food_log_service.delete_log(log_id, x_user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    @app.get("/summary/today")
    async def today_summary(
        request: Request, x_user_id: str | None = Header(default=None)
    ) -> dict[str, object]:
        """Return today's nutrition totals."""
        summary = _container(request).food_log_service.get_today_summary(x_user_id)
        return asdict(summary)

    @app.get("/summary/period")
    async def period_summary(
        request: Request,
        days: int = Query(default=7, ge=1, le=366),
        x_user_id: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Return totals, a per-day breakdown and averages for N days."""
        service = _container(request).food_log_service
        return asdict(service.get_period_summary(days, x_user_id))

    @app.post("/auth/events")
    async def auth_event(
        payload: AuthEventRequest, request: Request
    ) -> dict[str, object]:
        """Apply a sign-in or sign-out transition."""
        handler = _container(request).auth_handler
        try:
            outcome = handler.handle(AuthEvent(payload.kind, payload.user_id))
        except ValueError as exc:
            raise _bad_request(exc) from exc
        return {"status": "ok", "outcome": asdict(outcome) if outcome else None}

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

"""Starlette app with route assembly and error mapping."""

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from ..plans.models import PlanValidationError
from ..plans.store import PlanNotFoundError, PlanStorageError, PlanStore
from .api import (
	api_create_plan,
	api_delete_plan,
	api_get_plan,
	api_health,
	api_list_plans,
	api_stats,
	api_toggle_plan,
	api_update_plan,
)

logger = logging.getLogger(__name__)


async def _validation_error(request: Request, exc: PlanValidationError) -> JSONResponse:
	return JSONResponse({"error": str(exc)}, status_code=400)


async def _not_found(request: Request, exc: PlanNotFoundError) -> JSONResponse:
	return JSONResponse({"error": str(exc)}, status_code=404)


async def _storage_error(request: Request, exc: PlanStorageError) -> JSONResponse:
	logger.error(f"{request.method} {request.url.path} failed: {exc}")
	return JSONResponse({"error": str(exc)}, status_code=500)


def build_app(db_path: str = "") -> Starlette:
	"""Build and return the Starlette ASGI app."""
	if not db_path:
		from ..config import get_config
		db_path = str(get_config().db_path)

	store = PlanStore(db_path)

	@contextlib.asynccontextmanager
	async def lifespan(app: Starlette) -> AsyncIterator[None]:
		await app.state.store.init()
		try:
			yield
		finally:
			await app.state.store.close()

	routes = [
		Mount("/api", routes=[
			Route("/health", api_health, methods=["GET"]),
			Route("/plans", api_list_plans, methods=["GET"]),
			Route("/plans", api_create_plan, methods=["POST"]),
			Route("/plans/{id:int}", api_get_plan, methods=["GET"]),
			Route("/plans/{id:int}", api_update_plan, methods=["PUT"]),
			Route("/plans/{id:int}", api_delete_plan, methods=["DELETE"]),
			Route("/plans/{id:int}/toggle", api_toggle_plan, methods=["PATCH"]),
			Route("/stats", api_stats, methods=["GET"]),
		]),
	]

	app = Starlette(
		routes=routes,
		lifespan=lifespan,
		exception_handlers={
			PlanValidationError: _validation_error,
			PlanNotFoundError: _not_found,
			PlanStorageError: _storage_error,
		},
	)
	app.state.store = store
	return app

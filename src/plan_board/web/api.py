"""JSON API endpoints for the plan board."""

from __future__ import annotations

import json
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from ..plans.models import PlanCreate, PlanUpdate, PlanValidationError
from ..plans.store import PlanStore


def get_store(request: Request) -> PlanStore:
	"""Get the PlanStore from app state."""
	return request.app.state.store


async def read_json(request: Request) -> Any:
	"""Decode the request body, treating malformed JSON as a validation error."""
	body = await request.body()
	if not body:
		return {}
	try:
		return json.loads(body)
	except (json.JSONDecodeError, UnicodeDecodeError) as e:
		raise PlanValidationError(f"Invalid JSON body: {e}") from e


async def api_health(request: Request) -> JSONResponse:
	return JSONResponse({"status": "ok"})


async def api_list_plans(request: Request) -> JSONResponse:
	"""All plans, newest first."""
	plans = await get_store(request).list_plans()
	return JSONResponse([p.model_dump() for p in plans])


async def api_get_plan(request: Request) -> JSONResponse:
	"""A single plan by id."""
	plan = await get_store(request).get_plan(request.path_params["id"])
	return JSONResponse(plan.model_dump())


async def api_create_plan(request: Request) -> JSONResponse:
	"""Create a plan and return the full stored record."""
	payload = PlanCreate.from_payload(await read_json(request))
	plan = await get_store(request).create_plan(payload)
	return JSONResponse(plan.model_dump())


async def api_update_plan(request: Request) -> JSONResponse:
	"""Replace all mutable fields of a plan."""
	store = get_store(request)
	plan_id = request.path_params["id"]
	try:
		payload = PlanUpdate.from_payload(await read_json(request))
	except PlanValidationError:
		# An unknown id is reported as not found before any body problem
		await store.get_plan(plan_id)
		raise
	changes = await store.update_plan(plan_id, payload)
	return JSONResponse({"message": "Plan updated", "changes": changes})


async def api_delete_plan(request: Request) -> JSONResponse:
	changes = await get_store(request).delete_plan(request.path_params["id"])
	return JSONResponse({"message": "Plan deleted", "changes": changes})


async def api_toggle_plan(request: Request) -> JSONResponse:
	"""Flip the completion flag."""
	completed, changes = await get_store(request).toggle_plan(request.path_params["id"])
	return JSONResponse({"completed": completed, "changes": changes})


async def api_stats(request: Request) -> JSONResponse:
	"""Total, completed and high-priority counts."""
	stats = await get_store(request).get_stats()
	return JSONResponse(stats.model_dump())

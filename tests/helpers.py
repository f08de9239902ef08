"""Shared test fixtures and helpers for plan-board tests."""

from datetime import date

from plan_board.plans.models import PlanCreate, PlanUpdate


def make_create(**overrides) -> PlanCreate:
	"""Create a PlanCreate payload with realistic content for testing."""
	fields = {
		"title": "Ship release",
		"deadline": date(2024, 6, 1),
		"author": "alice",
	}
	fields.update(overrides)
	return PlanCreate(**fields)


def make_update(**overrides) -> PlanUpdate:
	"""Create a full PlanUpdate payload."""
	fields = {
		"title": "Ship release 2.0",
		"description": "Cut the branch and tag",
		"priority": "high",
		"deadline": date(2024, 7, 1),
		"author": "bob",
		"completed": True,
	}
	fields.update(overrides)
	return PlanUpdate(**fields)


def plan_body(**overrides) -> dict:
	"""JSON body for POST /api/plans."""
	body = {"title": "Ship release", "deadline": "2024-06-01", "author": "alice"}
	body.update(overrides)
	return body

"""
Plan Models - Pydantic schemas for plan records and request payloads.

Defines the stored plan shape, the create/update payloads accepted by the
API, and the aggregate statistics record.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class PlanValidationError(ValueError):
	"""Raised when a request payload is missing or has invalid fields."""
	pass


class Priority(str, Enum):
	"""Urgency of a plan."""
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"


class PlanFields(BaseModel):
	"""Fields shared by the create and update payloads."""
	model_config = ConfigDict(use_enum_values=True)

	title: str = Field(min_length=1, description="Short plan title")
	description: str = Field(default="", description="Free-form details")
	priority: Priority = Field(default=Priority.MEDIUM.value)
	deadline: date = Field(description="Due date (YYYY-MM-DD)")
	author: str = Field(min_length=1, description="Who owns the plan")

	@field_validator("description", mode="before")
	@classmethod
	def default_description(cls, value: Any) -> Any:
		return "" if value is None else value

	@field_validator("priority", mode="before")
	@classmethod
	def default_priority(cls, value: Any) -> Any:
		return Priority.MEDIUM if value is None else value

	@classmethod
	def from_payload(cls, payload: Any):
		"""
		Parse a decoded JSON body.

		Raises:
			PlanValidationError: If the body is not an object or a field is invalid
		"""
		if not isinstance(payload, dict):
			raise PlanValidationError("Request body must be a JSON object")
		try:
			return cls.model_validate(payload)
		except ValidationError as e:
			raise PlanValidationError(_describe(e)) from e


class PlanCreate(PlanFields):
	"""Payload for creating a plan."""
	pass


class PlanUpdate(PlanFields):
	"""Payload for replacing every mutable field of a plan."""
	completed: bool = Field(default=False)

	@field_validator("completed", mode="before")
	@classmethod
	def default_completed(cls, value: Any) -> Any:
		return False if value is None else value


class Plan(BaseModel):
	"""A stored plan record."""
	model_config = ConfigDict(use_enum_values=True)

	id: int
	title: str
	description: str = ""
	priority: Priority = Priority.MEDIUM.value
	deadline: str
	author: str
	completed: bool = False
	created_at: Optional[str] = None

	@classmethod
	def from_row(cls, row) -> "Plan":
		return cls(
			id=row["id"],
			title=row["title"],
			description=row["description"] or "",
			priority=row["priority"],
			deadline=str(row["deadline"]),
			author=row["author"],
			completed=bool(row["completed"]),
			created_at=row["created_at"],
		)


class PlanStats(BaseModel):
	"""Aggregate counts over all plans."""
	total: int = 0
	completed: int = 0
	high_priority: int = 0


def _describe(error: ValidationError) -> str:
	"""Flatten a pydantic error into one readable message."""
	missing = []
	problems = []
	for item in error.errors():
		field_name = ".".join(str(part) for part in item["loc"]) or "body"
		if item["type"] in ("missing", "string_too_short"):
			missing.append(field_name)
		else:
			problems.append(f"{field_name}: {item['msg']}")

	parts = []
	if missing:
		parts.append(f"Missing required fields: {', '.join(missing)}")
	parts.extend(problems)
	return "; ".join(parts)

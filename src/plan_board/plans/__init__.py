"""Plans module - Plan records and their SQLite storage."""

from .models import Plan, PlanCreate, PlanStats, PlanUpdate, PlanValidationError, Priority
from .store import PlanNotFoundError, PlanStorageError, PlanStore

__all__ = [
	"Plan",
	"PlanCreate",
	"PlanUpdate",
	"PlanStats",
	"Priority",
	"PlanStore",
	"PlanNotFoundError",
	"PlanStorageError",
	"PlanValidationError",
]

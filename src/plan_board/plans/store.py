"""
Plan Store - SQLite-backed plan storage.

Features:
- CRUD operations for plans
- Atomic completion toggle
- Aggregate statistics
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

from .models import Plan, PlanCreate, PlanStats, PlanUpdate

logger = logging.getLogger(__name__)


class PlanNotFoundError(Exception):
	"""Raised when a plan is not found."""

	def __init__(self, plan_id: int):
		super().__init__(f"Plan not found: {plan_id}")
		self.plan_id = plan_id


class PlanStorageError(Exception):
	"""Raised when the underlying datastore fails."""
	pass


class PlanStore:
	"""
	SQLite-backed plan storage.

	Usage:
		store = PlanStore("data/plans.db")
		await store.init()

		plan = await store.create_plan(PlanCreate(title="Ship", deadline="2024-06-01", author="alice"))
		completed, changes = await store.toggle_plan(plan.id)

		await store.close()
	"""

	def __init__(self, db_path: str):
		"""Initialize the plan store."""
		self.db_path = Path(db_path)
		self.db_path.parent.mkdir(parents=True, exist_ok=True)
		self._db: Optional[aiosqlite.Connection] = None

	async def init(self):
		"""Open the shared connection and create the schema."""
		if self._db:
			return

		async with self._storage_errors():
			db = await aiosqlite.connect(str(self.db_path))
			db.row_factory = aiosqlite.Row
			try:
				await db.execute("""
					CREATE TABLE IF NOT EXISTS plans (
						id INTEGER PRIMARY KEY AUTOINCREMENT,
						title TEXT NOT NULL,
						description TEXT,
						priority TEXT CHECK(priority IN ('low', 'medium', 'high')) DEFAULT 'medium',
						deadline DATE NOT NULL,
						author TEXT NOT NULL,
						completed BOOLEAN DEFAULT 0,
						created_at DATETIME DEFAULT CURRENT_TIMESTAMP
					)
				""")

				await db.execute("""
					CREATE INDEX IF NOT EXISTS idx_plans_created_at ON plans(created_at)
				""")

				await db.commit()
			except sqlite3.Error:
				await db.close()
				raise
			self._db = db
		logger.info(f"Plan store initialized: {self.db_path}")

	async def close(self):
		"""Close the database connection."""
		if self._db:
			await self._db.close()
			self._db = None
			logger.info(f"Plan store closed: {self.db_path}")

	@asynccontextmanager
	async def _storage_errors(self) -> AsyncIterator[None]:
		"""Translate sqlite errors into PlanStorageError."""
		try:
			yield
		except sqlite3.Error as e:
			logger.error(f"Storage error on {self.db_path}: {e}")
			raise PlanStorageError(str(e)) from e

	async def _connection(self) -> aiosqlite.Connection:
		if not self._db:
			await self.init()
		return self._db

	async def list_plans(self) -> list[Plan]:
		"""
		Get all plans, newest first.

		Returns:
			List of Plan objects ordered by created_at descending
		"""
		db = await self._connection()
		async with self._storage_errors():
			async with db.execute(
				"SELECT * FROM plans ORDER BY created_at DESC, id DESC"
			) as cursor:
				rows = await cursor.fetchall()

		return [Plan.from_row(row) for row in rows]

	async def get_plan(self, plan_id: int) -> Plan:
		"""
		Get a plan by ID.

		Raises:
			PlanNotFoundError: If no plan has this ID
		"""
		db = await self._connection()
		async with self._storage_errors():
			async with db.execute(
				"SELECT * FROM plans WHERE id = ?", (plan_id,)
			) as cursor:
				row = await cursor.fetchone()

		if not row:
			raise PlanNotFoundError(plan_id)
		return Plan.from_row(row)

	async def create_plan(self, plan: PlanCreate) -> Plan:
		"""
		Create a new plan.

		Args:
			plan: Validated create payload

		Returns:
			The stored plan with its assigned id and creation timestamp

		Raises:
			PlanStorageError: If the insert violates a table constraint
		"""
		db = await self._connection()
		created_at = datetime.now(timezone.utc).isoformat()
		deadline = plan.deadline.isoformat()

		async with self._storage_errors():
			cursor = await db.execute(
				"""
				INSERT INTO plans (title, description, priority, deadline, author, completed, created_at)
				VALUES (?, ?, ?, ?, ?, 0, ?)
				""",
				(
					plan.title,
					plan.description,
					plan.priority,
					deadline,
					plan.author,
					created_at,
				),
			)
			plan_id = cursor.lastrowid
			await db.commit()

		logger.info(f"Created plan {plan_id} by {plan.author}")
		return Plan(
			id=plan_id,
			title=plan.title,
			description=plan.description,
			priority=plan.priority,
			deadline=deadline,
			author=plan.author,
			completed=False,
			created_at=created_at,
		)

	async def update_plan(self, plan_id: int, plan: PlanUpdate) -> int:
		"""
		Replace every mutable field of a plan.

		Args:
			plan_id: Plan ID to update
			plan: Validated update payload

		Returns:
			Number of rows changed

		Raises:
			PlanNotFoundError: If no plan has this ID
		"""
		db = await self._connection()
		async with self._storage_errors():
			cursor = await db.execute(
				"""
				UPDATE plans
				SET title = ?, description = ?, priority = ?, deadline = ?, author = ?, completed = ?
				WHERE id = ?
				""",
				(
					plan.title,
					plan.description,
					plan.priority,
					plan.deadline.isoformat(),
					plan.author,
					1 if plan.completed else 0,
					plan_id,
				),
			)
			changes = cursor.rowcount
			await db.commit()

		if changes == 0:
			raise PlanNotFoundError(plan_id)
		logger.info(f"Updated plan {plan_id}")
		return changes

	async def delete_plan(self, plan_id: int) -> int:
		"""
		Delete a plan.

		Returns:
			Number of rows removed

		Raises:
			PlanNotFoundError: If no plan has this ID
		"""
		db = await self._connection()
		async with self._storage_errors():
			cursor = await db.execute("DELETE FROM plans WHERE id = ?", (plan_id,))
			changes = cursor.rowcount
			await db.commit()

		if changes == 0:
			raise PlanNotFoundError(plan_id)
		logger.info(f"Deleted plan {plan_id}")
		return changes

	async def toggle_plan(self, plan_id: int) -> tuple[bool, int]:
		"""
		Flip the completion flag of a plan in a single statement.

		Returns:
			Tuple of (new completed value, rows changed)

		Raises:
			PlanNotFoundError: If no plan has this ID
		"""
		db = await self._connection()
		async with self._storage_errors():
			async with db.execute(
				"UPDATE plans SET completed = NOT completed WHERE id = ? RETURNING completed",
				(plan_id,),
			) as cursor:
				row = await cursor.fetchone()
			await db.commit()

		if not row:
			raise PlanNotFoundError(plan_id)
		completed = bool(row["completed"])
		logger.info(f"Toggled plan {plan_id} to completed={completed}")
		return completed, 1

	async def get_stats(self) -> PlanStats:
		"""Get total, completed and high-priority counts."""
		db = await self._connection()
		async with self._storage_errors():
			async with db.execute("""
				SELECT
					COUNT(*) as total,
					COALESCE(SUM(CASE WHEN completed = 1 THEN 1 ELSE 0 END), 0) as completed,
					COALESCE(SUM(CASE WHEN priority = 'high' THEN 1 ELSE 0 END), 0) as high_priority
				FROM plans
			""") as cursor:
				row = await cursor.fetchone()

		return PlanStats(
			total=row["total"],
			completed=row["completed"],
			high_priority=row["high_priority"],
		)


# Global store instance
_store: Optional[PlanStore] = None


async def get_plan_store(db_path: str = "") -> PlanStore:
	"""Get or create the global plan store."""
	global _store
	if _store is None:
		if not db_path:
			from ..config import get_config
			db_path = str(get_config().db_path)
		store = PlanStore(db_path)
		await store.init()
		_store = store
	return _store


async def close_plan_store() -> None:
	"""Close and forget the global plan store."""
	global _store
	if _store is not None:
		await _store.close()
		_store = None

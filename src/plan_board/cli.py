"""CLI for plan-board: serve, list, stats, and doctor commands."""

import argparse
import asyncio
import platform
import sys
from pathlib import Path

from importlib.metadata import version as pkg_version

from .config import load_config
from .logging_config import setup_logging
from .plans.store import PlanStorageError

CORE_DEPS = ["starlette", "uvicorn", "aiosqlite", "pydantic", "platformdirs", "rich"]


def _resolve_db_path(args: argparse.Namespace) -> str:
	"""Use --db when given, otherwise the configured database."""
	db = getattr(args, "db", None)
	if db:
		return str(Path(db).expanduser())
	return str(load_config().db_path)


def cmd_serve(args: argparse.Namespace) -> None:
	"""Run the HTTP API."""
	from .web import run_server

	config = load_config()
	setup_logging(config)

	host = args.host or config.host
	port = args.port or config.port
	run_server(host=host, port=port, db_path=_resolve_db_path(args), log_level=config.log_level)


async def _load_plans(db_path: str):
	from .plans.store import close_plan_store, get_plan_store

	store = await get_plan_store(db_path)
	try:
		return await store.list_plans()
	finally:
		await close_plan_store()


async def _load_stats(db_path: str):
	from .plans.store import close_plan_store, get_plan_store

	store = await get_plan_store(db_path)
	try:
		return await store.get_stats()
	finally:
		await close_plan_store()


def _fail_storage(db_path: str, error: PlanStorageError) -> None:
	"""Report an unreadable database and exit non-zero."""
	print(f"Error: could not read plans from {db_path}: {error}")
	sys.exit(1)


def cmd_list(args: argparse.Namespace) -> None:
	"""Print all plans, newest first."""
	from .visualizer import render_plan_list

	db_path = _resolve_db_path(args)
	try:
		plans = asyncio.run(_load_plans(db_path))
	except PlanStorageError as e:
		_fail_storage(db_path, e)
	render_plan_list(plans)


def cmd_stats(args: argparse.Namespace) -> None:
	"""Print aggregate plan counts."""
	from .visualizer import render_plan_stats

	db_path = _resolve_db_path(args)
	try:
		stats = asyncio.run(_load_stats(db_path))
	except PlanStorageError as e:
		_fail_storage(db_path, e)
	render_plan_stats(stats)


def _check_config_toml(config_dir: Path) -> tuple[str, str | None]:
	"""Validate config.toml. Returns (status, issue_or_none)."""
	import tomllib

	toml_path = config_dir / "config.toml"
	if not toml_path.exists():
		return "not found (optional)", None
	try:
		with open(toml_path, "rb") as f:
			tomllib.load(f)
		return "valid", None
	except tomllib.TOMLDecodeError as e:
		msg = f"config.toml parse error: {e}"
		return f"INVALID ({e})", msg


def cmd_doctor(args: argparse.Namespace) -> None:
	"""Health check - verify installation and configuration."""
	print("plan-board doctor")
	print(f"{'=' * 40}")

	issues: list[str] = []

	py_ver = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
	print(f"  Python:       {py_ver}")
	print(f"  Platform:     {platform.system()} {platform.machine()}")
	print()

	print("  Core deps:")
	for dep in CORE_DEPS:
		try:
			dep_ver = pkg_version(dep)
			print(f"    {dep:22s} {dep_ver}")
		except Exception:
			print(f"    {dep:22s} NOT INSTALLED")
			issues.append(f"{dep} package not installed")
	print()

	try:
		config = load_config()
	except (ValueError, OSError) as e:
		print(f"  Config:       FAILED ({e})")
		issues.append(f"Config could not be loaded: {e}")
		config = None

	if config is not None:
		print("  Config:")
		toml_status, toml_issue = _check_config_toml(config.config_dir)
		print(f"    config.toml:         {toml_status}")
		if toml_issue:
			issues.append(toml_issue)
		print(f"    data dir:            {config.data_dir}")
		db_status = "exists" if config.db_path.exists() else "not created yet"
		print(f"    database:            {config.db_path} ({db_status})")
		print(f"    listen:              {config.host}:{config.port}")
	print()

	if issues:
		print(f"  {len(issues)} issue(s) found:")
		for issue in issues:
			print(f"    - {issue}")
		sys.exit(1)
	else:
		print("  All checks passed.")


def main(argv: list[str] | None = None) -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="plan-board",
		description="CRUD backend for plans: title, priority, deadline, author, completion",
	)
	subparsers = parser.add_subparsers(dest="command")

	# serve
	serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
	serve_parser.add_argument("--host", type=str, default=None, help="Bind address (default from config)")
	serve_parser.add_argument("--port", type=int, default=None, help="Server port (default from config)")
	serve_parser.add_argument("--db", type=str, default=None, help="SQLite database path")
	serve_parser.set_defaults(func=cmd_serve)

	# list
	list_parser = subparsers.add_parser("list", help="Show all plans")
	list_parser.add_argument("--db", type=str, default=None, help="SQLite database path")
	list_parser.set_defaults(func=cmd_list)

	# stats
	stats_parser = subparsers.add_parser("stats", help="Show plan statistics")
	stats_parser.add_argument("--db", type=str, default=None, help="SQLite database path")
	stats_parser.set_defaults(func=cmd_stats)

	# doctor
	doctor_parser = subparsers.add_parser("doctor", help="Health check")
	doctor_parser.set_defaults(func=cmd_doctor)

	args = parser.parse_args(argv)

	if not args.command:
		parser.print_help()
		sys.exit(1)

	args.func(args)

"""HTTP API for the plan board."""

from __future__ import annotations


def create_app(db_path: str = "") -> object:
	"""Create the Starlette ASGI application."""
	from .app import build_app

	return build_app(db_path=db_path)


def run_server(host: str = "127.0.0.1", port: int = 3000, db_path: str = "", log_level: str = "info") -> None:
	"""Run the API server under uvicorn."""
	import uvicorn

	app = create_app(db_path=db_path)

	print(f"Plan board running at http://{host}:{port}/api")
	print("Press Ctrl+C to stop.")
	uvicorn.run(app, host=host, port=port, log_level=log_level.lower())

"""Shared utilities for visualizer views."""

from datetime import datetime, timezone


def format_timestamp(iso_str: str | None) -> str:
	"""Format an ISO timestamp as relative time (e.g. '2m ago') or absolute."""
	if not iso_str:
		return ""
	try:
		dt = datetime.fromisoformat(iso_str)
		if dt.tzinfo is None:
			# CURRENT_TIMESTAMP defaults are naive UTC
			dt = dt.replace(tzinfo=timezone.utc)
		delta = datetime.now(timezone.utc) - dt
		total_secs = int(delta.total_seconds())

		if total_secs < 0:
			return iso_str[:19]
		if total_secs < 60:
			return f"{total_secs}s ago"
		if total_secs < 3600:
			return f"{total_secs // 60}m ago"
		if total_secs < 86400:
			return f"{total_secs // 3600}h ago"
		days = total_secs // 86400
		return f"{days}d ago"
	except (ValueError, TypeError):
		return str(iso_str)[:19]


def truncate(text: str, max_len: int = 40) -> str:
	"""Shorten free text for table display."""
	if not text:
		return ""
	text = text.strip()
	if len(text) <= max_len:
		return text
	return text[:max_len - 3] + "..."


def priority_style(priority: str) -> str:
	"""Return a Rich style string for a priority."""
	return {"high": "red", "medium": "yellow", "low": "green"}.get(priority, "white")


def completed_text(completed: bool) -> str:
	return "[green]done[/green]" if completed else "[dim]open[/dim]"

"""Rich views for plan listings and statistics."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from ..plans.models import Plan, PlanStats
from .utils import completed_text, format_timestamp, priority_style, truncate


def render_plan_list(plans: list[Plan], console: Optional[Console] = None) -> None:
	"""Render a table of plans in the order given."""
	console = console or Console()

	if not plans:
		console.print("[dim]No plans yet.[/dim]")
		return

	table = Table(title=f"Plans ({len(plans)})")
	table.add_column("ID", justify="right")
	table.add_column("Title", style="cyan")
	table.add_column("Description")
	table.add_column("Priority", justify="center")
	table.add_column("Deadline")
	table.add_column("Author")
	table.add_column("Status", justify="center")
	table.add_column("Created")

	for p in plans:
		style = priority_style(p.priority)
		table.add_row(
			str(p.id),
			p.title,
			truncate(p.description),
			f"[{style}]{p.priority}[/{style}]",
			p.deadline,
			p.author,
			completed_text(p.completed),
			format_timestamp(p.created_at),
		)

	console.print(table)


def render_plan_stats(stats: PlanStats, console: Optional[Console] = None) -> None:
	"""Render aggregate plan counts."""
	console = console or Console()

	open_count = stats.total - stats.completed
	rate = (stats.completed * 100.0 / stats.total) if stats.total else 0.0

	table = Table(title="Plan Statistics")
	table.add_column("Metric")
	table.add_column("Count", justify="right")
	table.add_row("Total", str(stats.total))
	table.add_row("Completed", f"[green]{stats.completed}[/green]")
	table.add_row("Open", str(open_count))
	table.add_row("High priority", f"[red]{stats.high_priority}[/red]")
	table.add_row("Completion rate", f"{rate:.1f}%")

	console.print(table)

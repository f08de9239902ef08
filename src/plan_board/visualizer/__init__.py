"""Terminal views for plans."""

from .plan_table import render_plan_list, render_plan_stats

__all__ = ["render_plan_list", "render_plan_stats"]

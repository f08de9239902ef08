"""Tests for plan-board."""

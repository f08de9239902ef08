"""plan-board: a small CRUD backend for plan records."""

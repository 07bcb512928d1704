"""Infrastructure layer — SQLite persistence for user preferences."""

"""SQLite schema and loaders."""

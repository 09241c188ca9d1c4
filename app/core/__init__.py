"""Core application primitives (settings, database)."""

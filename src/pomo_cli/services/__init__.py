"""Service layer for Pomo CLI."""

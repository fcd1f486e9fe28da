"""Pipeline flags and runtime settings."""

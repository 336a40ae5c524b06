"""HTTP API for the requirement drift engine."""

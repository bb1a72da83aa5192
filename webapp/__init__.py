"""HTTP API and shared runtime wiring."""

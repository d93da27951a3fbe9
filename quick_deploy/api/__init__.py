"""HTTP API for Quick Deploy."""

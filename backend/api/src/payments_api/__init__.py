"""HTTP API for the payments service."""

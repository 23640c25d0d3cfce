"""HTTP API for ListArr."""

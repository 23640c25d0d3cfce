"""Sync engine and persistence for ListArr."""

"""Utility helpers for ListArr."""

"""ListArr - import list sync for a movie library."""

__version__ = "0.1.0"

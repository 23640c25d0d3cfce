"""Metadata lookup for list movies.

List movies are resolved against TMDB by TMDB id, IMDb id or title and year,
and enriched with the canonical record when a match is found.
"""

from listarr.metadata.mapper import MovieMapper

__all__ = ["MovieMapper"]

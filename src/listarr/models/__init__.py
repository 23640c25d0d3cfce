"""Data models for ListArr."""

from listarr.models.import_list import (
    FetchResult,
    ImportExclusion,
    ImportListDefinition,
    ImportListStatus,
    ListSyncLevel,
    StaticListItem,
)
from listarr.models.movie import AddMovieOptions, ListMovie, MinimumAvailability, Movie

__all__ = [
    "AddMovieOptions",
    "FetchResult",
    "ImportExclusion",
    "ImportListDefinition",
    "ImportListStatus",
    "ListMovie",
    "ListSyncLevel",
    "MinimumAvailability",
    "Movie",
    "StaticListItem",
]

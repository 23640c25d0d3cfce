"""Import list providers and their supporting services.

Lists report movies by TMDB id, IMDb id or title. Their health, the movies
they last reported and the exclusions applied to them are kept here too.
"""

from listarr.importlists.base import HttpImportList, ImportList, ImportListError
from listarr.importlists.factory import ImportListFactory, ImportListNotFoundError

__all__ = [
    "HttpImportList",
    "ImportList",
    "ImportListError",
    "ImportListFactory",
    "ImportListNotFoundError",
]

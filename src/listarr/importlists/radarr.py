"""Lists served in the Radarr list format (array of TMDB movie objects)."""

from typing import List

import httpx

from listarr.importlists.base import HttpImportList, ImportListError
from listarr.models.movie import ListMovie


class RadarrList(HttpImportList):
    """A list returning ``[{"id": <tmdbId>, ...}, ...]``.

    Error payloads have the form ``{"errors": [...]}``.
    """

    def parse_response(self, response: httpx.Response) -> List[ListMovie]:
        payload = response.json()

        if isinstance(payload, dict):
            errors = payload.get("errors") or []
            if errors:
                raise ImportListError(f"{self.name} returned errors: {errors}")
            return []

        if payload is None:
            return []

        movies = []
        for item in payload:
            tmdb_id = item.get("id") or 0
            if not tmdb_id:
                continue
            movies.append(
                ListMovie(
                    tmdb_id=int(tmdb_id),
                    title=item.get("title"),
                    imdb_id=item.get("imdb_id"),
                )
            )
        return movies

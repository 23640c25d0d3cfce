"""StevenLu popular movies list."""

from typing import List

import httpx

from listarr.importlists.base import HttpImportList, ImportListError
from listarr.models.movie import ListMovie


class StevenLuList(HttpImportList):
    """A list returning ``[{"title": ..., "imdb_id": ...}, ...]``."""

    def parse_response(self, response: httpx.Response) -> List[ListMovie]:
        content_type = response.headers.get("content-type", "")
        if "html" in content_type:
            raise ImportListError(
                f"{self.name} responded with html content. Site is likely blocked or unavailable."
            )

        payload = response.json()
        if not payload:
            return []

        return [
            ListMovie(title=item.get("title"), imdb_id=item.get("imdb_id"))
            for item in payload
            if item.get("title") or item.get("imdb_id")
        ]

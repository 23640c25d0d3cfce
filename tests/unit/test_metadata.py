"""Unit tests for TMDB lookups and list movie mapping."""

from datetime import date
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from listarr.metadata.cache import MetadataCache
from listarr.metadata.mapper import MovieMapper, movie_from_tmdb
from listarr.metadata.tmdb import TMDBClient, TMDBError
from listarr.models.movie import ListMovie

MATRIX = {
    "id": 603,
    "imdb_id": "tt0133093",
    "title": "The Matrix",
    "original_title": "The Matrix",
    "release_date": "1999-03-30",
    "overview": "Set in the 22nd century...",
    "vote_average": 8.2,
    "status": "Released",
    "homepage": "http://www.warnerbros.com/matrix",
    "poster_path": "/poster.jpg",
    "backdrop_path": None,
    "production_companies": [{"name": "Village Roadshow Pictures"}, {"name": "Groucho II"}],
    "belongs_to_collection": {"name": "The Matrix Collection"},
    "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Science Fiction"}],
    "release_dates": {
        "results": [
            {
                "iso_3166_1": "US",
                "release_dates": [
                    {"type": 3, "release_date": "1999-03-31T00:00:00.000Z", "certification": "R"},
                    {"type": 5, "release_date": "1999-09-21T00:00:00.000Z", "certification": ""},
                    {"type": 4, "release_date": "2001-01-01T00:00:00.000Z", "certification": ""},
                ],
            }
        ]
    },
    "videos": {
        "results": [
            {"site": "Vimeo", "type": "Trailer", "key": "v1"},
            {"site": "YouTube", "type": "Teaser", "key": "yt-teaser"},
            {"site": "YouTube", "type": "Trailer", "key": "m8e-FF8MsqU"},
        ]
    },
    "translations": {
        "translations": [
            {"iso_639_1": "de", "data": {"title": "Matrix"}},
            {"iso_639_1": "fr", "data": {"title": ""}},
        ]
    },
}


@pytest.fixture
def cache(tmp_path):
    return MetadataCache(tmp_path / "cache.db", ttl_days=7)


def tmdb_client(handler, cache=None) -> TMDBClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TMDBClient("test-key", cache, client=client, base_url="https://tmdb.test/3")


class TestMovieFromTmdb:
    """Test conversion of TMDB details."""

    def test_maps_details(self):
        movie = movie_from_tmdb(MATRIX)

        assert movie.tmdb_id == 603
        assert movie.imdb_id == "tt0133093"
        assert movie.title == "The Matrix"
        assert movie.sort_title == "matrix"
        assert movie.year == 1999
        assert movie.ratings == {"tmdb": 8.2}
        assert movie.studio == "Village Roadshow Pictures"
        assert movie.certification == "R"
        assert movie.collection == "The Matrix Collection"
        assert movie.images == ["https://image.tmdb.org/t/p/original/poster.jpg"]
        assert movie.in_cinemas == date(1999, 3, 30)
        assert movie.physical_release == date(1999, 9, 21)
        assert movie.digital_release == date(2001, 1, 1)
        assert movie.genres == ["Action", "Science Fiction"]
        assert movie.youtube_trailer_id == "m8e-FF8MsqU"
        assert movie.translations == {"de": "Matrix"}

    def test_minimal_details(self):
        movie = movie_from_tmdb({"id": 1, "title": "Untitled", "release_date": ""})

        assert movie.year == 0
        assert movie.in_cinemas is None
        assert movie.ratings == {}
        assert movie.genres == []
        assert movie.youtube_trailer_id is None
        assert movie.translations == {}


class TestTMDBClient:
    """Test the TMDB client against a mock transport."""

    @pytest.mark.asyncio
    async def test_get_movie(self):
        def handler(request):
            assert request.url.path == "/3/movie/603"
            assert request.url.params["api_key"] == "test-key"
            assert request.url.params["append_to_response"] == "release_dates,videos,translations"
            return httpx.Response(200, json=MATRIX)

        client = tmdb_client(handler)
        try:
            data = await client.get_movie(603)
        finally:
            await client.close()

        assert data["title"] == "The Matrix"

    @pytest.mark.asyncio
    async def test_get_movie_not_found(self):
        client = tmdb_client(lambda request: httpx.Response(404, json={"status_code": 34}))
        try:
            assert await client.get_movie(1) is None
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = tmdb_client(lambda request: httpx.Response(401, json={"status_code": 7}))
        try:
            with pytest.raises(TMDBError):
                await client.get_movie(603)
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_tmdb_error(self):
        client = tmdb_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
        try:
            with pytest.raises(TMDBError):
                await client.get_movie(603)
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_find_result_without_id(self):
        client = tmdb_client(lambda request: httpx.Response(200, json={"movie_results": [{}]}))
        try:
            assert await client.find_by_imdb_id("tt0133093") is None
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_get_movie_uses_cache(self, cache):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=MATRIX)

        client = tmdb_client(handler, cache)
        try:
            await client.get_movie(603)
            data = await client.get_movie(603)
        finally:
            await client.close()

        assert len(calls) == 1
        assert data["id"] == 603

    @pytest.mark.asyncio
    async def test_find_by_imdb_id(self, cache):
        def handler(request):
            assert request.url.path == "/3/find/tt0133093"
            assert request.url.params["external_source"] == "imdb_id"
            return httpx.Response(200, json={"movie_results": [{"id": 603}]})

        client = tmdb_client(handler, cache)
        try:
            assert await client.find_by_imdb_id("tt0133093") == 603
        finally:
            await client.close()

        assert cache.get("imdb", "tt0133093") == {"tmdb_id": 603}

    @pytest.mark.asyncio
    async def test_search_movie(self):
        def handler(request):
            assert request.url.params["query"] == "The Matrix"
            assert request.url.params["year"] == "1999"
            return httpx.Response(200, json={"results": [{"id": 603}, {"id": 604}]})

        client = tmdb_client(handler)
        try:
            results = await client.search_movie("The Matrix", year=1999)
        finally:
            await client.close()

        assert [r["id"] for r in results] == [603, 604]


class TestMetadataCache:
    """Test the SQLite metadata cache."""

    def test_set_and_get(self, cache):
        cache.set("movie", 603, {"title": "The Matrix"})

        assert cache.get("movie", 603) == {"title": "The Matrix"}
        assert cache.get("movie", "603") == {"title": "The Matrix"}
        assert cache.get("imdb", 603) is None

    def test_expired_entries(self, tmp_path):
        cache = MetadataCache(tmp_path / "cache.db", ttl_days=0)
        cache.set("movie", 603, {"title": "The Matrix"})

        assert cache.get("movie", 603) is None
        assert cache.purge_expired() == 1


class TestMovieMapper:
    """Test resolving list movies."""

    @pytest.fixture
    def tmdb(self):
        client = Mock(spec=TMDBClient)
        client.get_movie = AsyncMock(return_value=MATRIX)
        client.find_by_imdb_id = AsyncMock(return_value=603)
        client.search_movie = AsyncMock(return_value=[{"id": 603}])
        return client

    @pytest.mark.asyncio
    async def test_without_client_returns_movie_unchanged(self):
        movie = ListMovie(imdb_id="tt0133093", list_id=2)

        assert await MovieMapper(None).map_list_movie(movie) is movie

    @pytest.mark.asyncio
    async def test_by_tmdb_id(self, tmdb):
        mapped = await MovieMapper(tmdb).map_list_movie(ListMovie(tmdb_id=603, list_id=2))

        tmdb.get_movie.assert_awaited_once_with(603)
        tmdb.find_by_imdb_id.assert_not_awaited()
        assert mapped.title == "The Matrix"
        assert mapped.list_id == 2

    @pytest.mark.asyncio
    async def test_by_imdb_id(self, tmdb):
        mapped = await MovieMapper(tmdb).map_list_movie(ListMovie(imdb_id="tt0133093", list_id=2))

        tmdb.find_by_imdb_id.assert_awaited_once_with("tt0133093")
        assert mapped.tmdb_id == 603
        assert mapped.list_id == 2

    @pytest.mark.asyncio
    async def test_by_title_and_year(self, tmdb):
        mapped = await MovieMapper(tmdb).map_list_movie(ListMovie(title="The Matrix", year=1999))

        tmdb.search_movie.assert_awaited_once_with("The Matrix", year=1999)
        assert mapped.tmdb_id == 603

    @pytest.mark.asyncio
    async def test_no_match_keeps_raw_movie(self, tmdb):
        tmdb.find_by_imdb_id.return_value = None
        movie = ListMovie(imdb_id="tt9999999", title="Obscure", list_id=4)

        mapped = await MovieMapper(tmdb).map_list_movie(movie)

        assert mapped is movie
        tmdb.get_movie.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_error_keeps_raw_movie(self, tmdb):
        """Enrichment failures are not list failures."""
        tmdb.get_movie.side_effect = TMDBError("TMDB API error: 500")
        movie = ListMovie(tmdb_id=603, title="The Matrix", list_id=1)

        assert await MovieMapper(tmdb).map_list_movie(movie) is movie
        assert await MovieMapper(tmdb).map_movie(movie) is None

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_raw_movie(self, tmdb):
        tmdb.search_movie.side_effect = KeyError("id")
        movie = ListMovie(title="The Matrix", year=1999, list_id=1)

        assert await MovieMapper(tmdb).map_list_movie(movie) is movie

    @pytest.mark.asyncio
    async def test_malformed_details_keep_raw_movie(self, tmdb):
        tmdb.get_movie.return_value = {"id": 603, "title": "The Matrix", "genres": ["Action"]}
        movie = ListMovie(tmdb_id=603, list_id=1)

        assert await MovieMapper(tmdb).map_list_movie(movie) is movie

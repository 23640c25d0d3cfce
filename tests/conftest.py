"""Shared pytest fixtures for ListArr tests."""

import asyncio
from typing import List, Optional

import pytest

from listarr.core.database import LibraryDatabase
from listarr.importlists.base import ImportList
from listarr.importlists.exclusions import ImportExclusionsService
from listarr.importlists.list_movies import ListMovieService
from listarr.importlists.status import ImportListStatusService
from listarr.models.import_list import FetchResult, ImportListDefinition
from listarr.models.movie import ListMovie, Movie
from listarr.movies.add import AddMovieService
from listarr.movies.service import MovieService


class FakeImportList(ImportList):
    """In-memory list returning canned movies."""

    def __init__(
        self,
        definition: ImportListDefinition,
        movies: Optional[List[ListMovie]] = None,
        fail: bool = False,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        super().__init__(definition)
        self.movies = movies or []
        self.fail = fail
        self.error = error
        self.delay = delay
        self.fetch_count = 0

    async def fetch(self) -> FetchResult:
        self.fetch_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.fail:
            return FetchResult(any_failure=True)
        return FetchResult(movies=list(self.movies), any_failure=False)


@pytest.fixture
def make_definition():
    """Build import list definitions with sensible defaults."""

    def _make(list_id: int, **kwargs) -> ImportListDefinition:
        values = {
            "id": list_id,
            "name": f"List {list_id}",
            "implementation": "static",
            "enable_auto": True,
            "root_folder_path": "/movies",
            "quality_profile_id": 1,
        }
        values.update(kwargs)
        return ImportListDefinition(**values)

    return _make


@pytest.fixture
def make_list(make_definition):
    """Build fake import lists."""

    def _make(list_id: int, movies=None, fail=False, error=None, delay=0.0, **kwargs) -> FakeImportList:
        return FakeImportList(
            make_definition(list_id, **kwargs), movies, fail=fail, error=error, delay=delay
        )

    return _make


@pytest.fixture
def db(tmp_path):
    """Create a test library database."""
    return LibraryDatabase(tmp_path / "listarr.db")


@pytest.fixture
def movie_service(db):
    return MovieService(db)


@pytest.fixture
def add_movie_service(db):
    return AddMovieService(db)


@pytest.fixture
def exclusion_service(db):
    return ImportExclusionsService(db)


@pytest.fixture
def list_movie_service(db):
    return ListMovieService(db)


@pytest.fixture
def status_service(db):
    return ImportListStatusService(db, minimum_time_since_initial_failure=300)


@pytest.fixture
def sample_movies():
    """Library movies as they would be stored after an add."""
    return [
        Movie(tmdb_id=603, imdb_id="tt0133093", title="The Matrix", year=1999, root_folder_path="/movies"),
        Movie(tmdb_id=550, imdb_id="tt0137523", title="Fight Club", year=1999, root_folder_path="/movies"),
        Movie(tmdb_id=27205, imdb_id="tt1375666", title="Inception", year=2010, root_folder_path="/movies"),
    ]

"""Unit tests for the auto-add selector."""

from unittest.mock import Mock

import pytest

from listarr.core.selector import AutoAddSelector
from listarr.models.import_list import ImportExclusion
from listarr.models.movie import ListMovie, MinimumAvailability, Movie
from listarr.movies.service import MovieService


@pytest.fixture
def empty_library():
    service = Mock(spec=MovieService)
    service.find_by_tmdb_id.return_value = None
    return service


@pytest.fixture
def definition(make_definition):
    return make_definition(
        1,
        root_folder_path="/data/movies",
        quality_profile_id=4,
        minimum_availability=MinimumAvailability.IN_CINEMAS,
        tags=[2, 5],
        should_monitor=True,
    )


class TestAutoAddSelector:
    """Test selection of movies to add."""

    def test_stages_new_movie_with_list_settings(self, empty_library, definition):
        """Should build the library movie from the list definition."""
        selector = AutoAddSelector(empty_library, [])
        report = ListMovie(tmdb_id=603, imdb_id="tt0133093", title="The Matrix", year=1999, list_id=1)

        movie = selector.process_movie_report(definition, report)

        assert movie is not None
        assert movie.tmdb_id == 603
        assert movie.imdb_id == "tt0133093"
        assert movie.title == "The Matrix"
        assert movie.year == 1999
        assert movie.root_folder_path == "/data/movies"
        assert movie.quality_profile_id == 4
        assert movie.minimum_availability == MinimumAvailability.IN_CINEMAS
        assert movie.tags == [2, 5]
        assert movie.monitored is True
        assert movie.add_options.search_for_movie is True
        assert selector.movies_to_add == [movie]

    def test_unmonitored_list_does_not_search(self, empty_library, make_definition):
        definition = make_definition(1, should_monitor=False)
        selector = AutoAddSelector(empty_library, [])

        movie = selector.process_movie_report(definition, ListMovie(tmdb_id=603))

        assert movie.monitored is False
        assert movie.add_options.search_for_movie is False

    def test_tags_are_copied(self, empty_library, definition):
        selector = AutoAddSelector(empty_library, [])

        movie = selector.process_movie_report(definition, ListMovie(tmdb_id=603))
        movie.tags.append(9)

        assert definition.tags == [2, 5]

    def test_skips_zero_tmdb_id(self, empty_library, definition):
        selector = AutoAddSelector(empty_library, [])

        assert selector.process_movie_report(definition, ListMovie(imdb_id="tt0133093")) is None
        empty_library.find_by_tmdb_id.assert_not_called()

    def test_skips_list_without_auto_add(self, empty_library, make_definition):
        """Should never stage movies from a list with auto-add disabled."""
        selector = AutoAddSelector(empty_library, [])

        movie = selector.process_movie_report(
            make_definition(1, enable_auto=False), ListMovie(tmdb_id=603)
        )

        assert movie is None
        assert selector.movies_to_add == []

    def test_skips_existing_movie(self, definition):
        library = Mock(spec=MovieService)
        library.find_by_tmdb_id.return_value = Movie(id=1, tmdb_id=603, title="The Matrix")
        selector = AutoAddSelector(library, [])

        assert selector.process_movie_report(definition, ListMovie(tmdb_id=603)) is None
        library.find_by_tmdb_id.assert_called_once_with(603)

    def test_skips_excluded_movie(self, empty_library, definition):
        """Should honour exclusions even when the movie is not in the library."""
        selector = AutoAddSelector(empty_library, [ImportExclusion(tmdb_id=603, title="The Matrix")])

        assert selector.process_movie_report(definition, ListMovie(tmdb_id=603)) is None
        assert selector.movies_to_add == []

    def test_skips_already_staged(self, empty_library, definition, make_definition):
        """Should stage a TMDB id once even if two lists report it."""
        selector = AutoAddSelector(empty_library, [])

        first = selector.process_movie_report(definition, ListMovie(tmdb_id=603, list_id=1))
        second = selector.process_movie_report(
            make_definition(2), ListMovie(tmdb_id=603, imdb_id="tt0133093", list_id=2)
        )

        assert first is not None
        assert second is None
        assert len(selector.movies_to_add) == 1

    def test_title_fallback(self, empty_library, definition):
        selector = AutoAddSelector(empty_library, [])

        movie = selector.process_movie_report(definition, ListMovie(tmdb_id=603))

        assert movie.title == "603"

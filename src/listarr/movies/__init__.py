"""Library movie services."""

from listarr.movies.add import AddMovieService
from listarr.movies.service import MovieService

__all__ = ["AddMovieService", "MovieService"]

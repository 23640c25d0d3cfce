"""Movie data models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class MinimumAvailability(str, Enum):
    """When a movie is considered available for download."""

    TBA = "tba"
    ANNOUNCED = "announced"
    IN_CINEMAS = "inCinemas"
    RELEASED = "released"


@dataclass
class AddMovieOptions:
    """Options applied when a movie is added to the library."""

    search_for_movie: bool = False


@dataclass
class ListMovie:
    """A movie reported by an import list.

    Providers usually only know one identifier (TMDB id, IMDb id or a bare
    title). The mapper fills in the remaining fields from the metadata source.
    """

    tmdb_id: int = 0  # 0 when the list did not report one
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    sort_title: Optional[str] = None
    year: int = 0
    list_id: int = 0  # Import list the movie came from

    # Enrichment from the metadata source
    overview: Optional[str] = None
    ratings: dict[str, float] = field(default_factory=dict)
    studio: Optional[str] = None
    certification: Optional[str] = None
    collection: Optional[str] = None
    status: Optional[str] = None
    images: list[str] = field(default_factory=list)
    website: Optional[str] = None
    youtube_trailer_id: Optional[str] = None
    translations: dict[str, str] = field(default_factory=dict)
    in_cinemas: Optional[date] = None
    physical_release: Optional[date] = None
    digital_release: Optional[date] = None
    genres: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Human-readable representation."""
        year_part = f" ({self.year})" if self.year else ""
        return f"[{self.tmdb_id}] {self.title or self.imdb_id or 'Unknown'}{year_part}"


@dataclass
class Movie:
    """A movie in the local library."""

    tmdb_id: int
    title: str
    year: int = 0
    imdb_id: Optional[str] = None
    id: int = 0  # Library row id, 0 until persisted
    monitored: bool = True
    root_folder_path: Optional[str] = None
    path: Optional[str] = None
    quality_profile_id: int = 0
    minimum_availability: MinimumAvailability = MinimumAvailability.RELEASED
    tags: list[int] = field(default_factory=list)
    added: Optional[datetime] = None
    add_options: Optional[AddMovieOptions] = None

    def __str__(self) -> str:
        """Human-readable representation."""
        year_part = f" ({self.year})" if self.year else ""
        return f"[{self.tmdb_id}][{self.title}{year_part}]"

"""Import list data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from listarr.models.movie import ListMovie, MinimumAvailability


class ListSyncLevel(str, Enum):
    """What to do with library movies that are no longer on any list."""

    DISABLED = "disabled"
    LOG_ONLY = "logOnly"
    KEEP_AND_UNMONITOR = "keepAndUnmonitor"
    REMOVE_AND_KEEP = "removeAndKeep"
    REMOVE_AND_DELETE = "removeAndDelete"


class StaticListItem(BaseModel):
    """Movie entry of a statically configured list."""

    tmdb_id: int = Field(default=0, description="TMDB id (0 if unknown)")
    imdb_id: Optional[str] = Field(default=None, description="IMDb id")
    title: Optional[str] = Field(default=None, description="Movie title")
    year: int = Field(default=0, description="Release year")


class ImportListDefinition(BaseModel):
    """Configuration of a single import list."""

    id: int = Field(..., gt=0, description="Unique list id")
    name: str = Field(..., description="Display name")
    implementation: str = Field(..., description="Provider kind (radarr, stevenlu, static)")
    enabled: bool = Field(default=True, description="Fetch this list during syncs")
    enable_auto: bool = Field(default=False, description="Add list movies automatically")
    should_monitor: bool = Field(default=True, description="Monitor (and search) added movies")
    root_folder_path: str = Field(default="/movies", description="Root folder for added movies")
    quality_profile_id: int = Field(default=1, description="Quality profile for added movies")
    minimum_availability: MinimumAvailability = Field(
        default=MinimumAvailability.RELEASED, description="Minimum availability for added movies"
    )
    tags: List[int] = Field(default_factory=list, description="Tags for added movies")
    url: Optional[str] = Field(default=None, description="List URL for HTTP providers")
    movies: List[StaticListItem] = Field(
        default_factory=list, description="Entries of a static list"
    )


@dataclass
class FetchResult:
    """Movies reported by one or more lists and whether any of them failed."""

    movies: list[ListMovie] = field(default_factory=list)
    any_failure: bool = False


@dataclass
class ImportListStatus:
    """Health record of an import list."""

    provider_id: int
    initial_failure: Optional[datetime] = None
    most_recent_failure: Optional[datetime] = None
    escalation_level: int = 0
    disabled_till: Optional[datetime] = None

    def is_blocked(self, now: Optional[datetime] = None) -> bool:
        """Whether the list is temporarily disabled."""
        now = now or datetime.utcnow()
        return self.disabled_till is not None and self.disabled_till > now

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_id": self.provider_id,
            "initial_failure": self.initial_failure.isoformat() if self.initial_failure else None,
            "most_recent_failure": (
                self.most_recent_failure.isoformat() if self.most_recent_failure else None
            ),
            "escalation_level": self.escalation_level,
            "disabled_till": self.disabled_till.isoformat() if self.disabled_till else None,
        }


@dataclass
class ImportExclusion:
    """A movie that must never be added from lists."""

    tmdb_id: int
    title: Optional[str] = None
    year: int = 0

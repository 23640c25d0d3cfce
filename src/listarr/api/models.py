"""API request and response models."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommandRequest(BaseModel):
    """Request to run a command."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Command name (ImportListSync)")
    list_id: int = Field(default=0, alias="listId", ge=0, description="List to sync, 0 for all")


class CommandResponse(BaseModel):
    """Command state."""

    id: int
    name: str
    list_id: int
    status: str
    message: Optional[str] = None
    queued_at: datetime
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class ImportListResponse(BaseModel):
    """Configured import list with its health."""

    id: int
    name: str
    implementation: str
    enabled: bool
    enable_auto: bool
    blocked: bool
    escalation_level: int = 0
    disabled_till: Optional[datetime] = None


class ListMovieResponse(BaseModel):
    """Movie as last reported by a list."""

    list_id: int
    tmdb_id: int
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    year: int = 0
    in_library: bool = False
    excluded: bool = False


class ExclusionModel(BaseModel):
    """Import exclusion."""

    tmdb_id: int = Field(..., gt=0)
    title: Optional[str] = None
    year: int = 0


class HealthResponse(BaseModel):
    """Health check response model."""

    status: Literal["healthy", "degraded"]
    version: str
    uptime_seconds: float
    import_lists: int
    blocked_lists: List[int] = Field(default_factory=list)

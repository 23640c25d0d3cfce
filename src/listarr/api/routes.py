"""API routes for commands, import lists and exclusions."""

import time
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from listarr import __version__
from listarr.api.models import (
    CommandRequest,
    CommandResponse,
    ExclusionModel,
    HealthResponse,
    ImportListResponse,
    ListMovieResponse,
)
from listarr.core.sync import ImportListSyncCommand
from listarr.models.import_list import ImportExclusion
from listarr.services import Services
from listarr.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

SUPPORTED_COMMANDS = {"importlistsync"}


def get_services(request: Request) -> Services:
    return request.app.state.listarr.services


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint.

    Reports degraded while any import list is blocked.
    """
    app_state = request.app.state.listarr
    services = app_state.services

    blocked = [s.provider_id for s in services.status_service.get_blocked_providers()]

    return HealthResponse(
        status="degraded" if blocked else "healthy",
        version=__version__,
        uptime_seconds=time.time() - app_state.start_time,
        import_lists=len(services.factory.all()),
        blocked_lists=blocked,
    )


@router.post("/api/v1/command", response_model=CommandResponse, status_code=status.HTTP_201_CREATED)
async def create_command(
    body: CommandRequest,
    request: Request,
    wait: bool = Query(default=False, description="Wait for the command to finish"),
):
    """Queue a command.

    Only ``ImportListSync`` is supported; ``listId`` 0 syncs every list.
    """
    if body.name.lower() not in SUPPORTED_COMMANDS:
        raise HTTPException(status_code=400, detail=f"Unknown command: {body.name}")

    queue = get_services(request).command_queue
    command = ImportListSyncCommand(list_id=body.list_id)

    logger.info("Command requested", name=body.name, list_id=body.list_id, wait=wait)

    record = await queue.run(command) if wait else queue.push(command)
    return CommandResponse(**record.model_dump())


@router.get("/api/v1/command", response_model=List[CommandResponse])
async def list_commands(request: Request):
    """List commands, newest first."""
    queue = get_services(request).command_queue
    return [CommandResponse(**record.model_dump()) for record in queue.all()]


@router.get("/api/v1/command/{command_id}", response_model=CommandResponse)
async def get_command(command_id: int, request: Request):
    """Get a command by id."""
    record = get_services(request).command_queue.get(command_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Command not found: {command_id}")
    return CommandResponse(**record.model_dump())


@router.get("/api/v1/importlist", response_model=List[ImportListResponse])
async def list_import_lists(request: Request):
    """List configured import lists with their health."""
    services = get_services(request)
    statuses = {s.provider_id: s for s in services.status_service.get_all()}

    response = []
    for provider in services.factory.all():
        definition = provider.definition
        list_status = statuses.get(definition.id)
        response.append(
            ImportListResponse(
                id=definition.id,
                name=definition.name,
                implementation=definition.implementation,
                enabled=definition.enabled,
                enable_auto=definition.enable_auto,
                blocked=list_status.is_blocked() if list_status else False,
                escalation_level=list_status.escalation_level if list_status else 0,
                disabled_till=list_status.disabled_till if list_status else None,
            )
        )
    return response


@router.get("/api/v1/importlist/movies", response_model=List[ListMovieResponse])
async def list_movies(request: Request, list_id: Optional[int] = Query(default=None, alias="listId")):
    """Movies from the last successful fetch of each list."""
    services = get_services(request)
    library_ids = {movie.tmdb_id for movie in services.movie_service.get_all_movies()}
    excluded_ids = {e.tmdb_id for e in services.exclusion_service.get_all_exclusions()}

    return [
        ListMovieResponse(
            list_id=movie.list_id,
            tmdb_id=movie.tmdb_id,
            imdb_id=movie.imdb_id,
            title=movie.title,
            year=movie.year,
            in_library=movie.tmdb_id in library_ids,
            excluded=movie.tmdb_id in excluded_ids,
        )
        for movie in services.list_movie_service.get_list_movies(list_id)
    ]


@router.get("/api/v1/exclusions", response_model=List[ExclusionModel])
async def list_exclusions(request: Request):
    """List import exclusions."""
    exclusions = get_services(request).exclusion_service.get_all_exclusions()
    return [ExclusionModel(tmdb_id=e.tmdb_id, title=e.title, year=e.year) for e in exclusions]


@router.post("/api/v1/exclusions", response_model=ExclusionModel, status_code=status.HTTP_201_CREATED)
async def add_exclusion(body: ExclusionModel, request: Request):
    """Add an import exclusion."""
    get_services(request).exclusion_service.add(
        ImportExclusion(tmdb_id=body.tmdb_id, title=body.title, year=body.year)
    )
    return body


@router.delete("/api/v1/exclusions/{tmdb_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exclusion(tmdb_id: int, request: Request):
    """Remove an import exclusion."""
    if not get_services(request).exclusion_service.delete(tmdb_id):
        raise HTTPException(status_code=404, detail=f"Exclusion not found: {tmdb_id}")

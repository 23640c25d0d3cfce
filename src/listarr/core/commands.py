"""Command queue that serializes sync runs."""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from listarr.core.sync import ImportListSyncCommand, ImportListSyncService
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class CommandStatus(str, Enum):
    """Command status enum."""

    QUEUED = "queued"
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


class CommandRecord(BaseModel):
    """State of a submitted command."""

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    id: int
    name: str
    list_id: int = 0
    status: CommandStatus = Field(default=CommandStatus.QUEUED)
    message: Optional[str] = None
    queued_at: datetime = Field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class CommandQueue:
    """Runs sync commands one at a time.

    A full sync overlaps every list, so all sync commands share one lock.
    """

    def __init__(self, sync_service: ImportListSyncService):
        self.sync_service = sync_service
        self._lock = asyncio.Lock()
        self._commands: Dict[int, CommandRecord] = {}
        self._tasks: set[asyncio.Task] = set()
        self._next_id = 1

    def _create_record(self, command: ImportListSyncCommand) -> CommandRecord:
        record = CommandRecord(id=self._next_id, name=command.name, list_id=command.list_id)
        self._next_id += 1
        self._commands[record.id] = record
        return record

    def push(self, command: ImportListSyncCommand) -> CommandRecord:
        """Queue a command to run in the background.

        Must be called from a running event loop.

        Returns:
            The queued command record
        """
        record = self._create_record(command)
        task = asyncio.get_running_loop().create_task(self._run(record, command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("Command queued", command_id=record.id, name=record.name, list_id=record.list_id)
        return record

    async def run(self, command: ImportListSyncCommand) -> CommandRecord:
        """Run a command and wait for it to finish."""
        record = self._create_record(command)
        await self._run(record, command)
        return record

    async def _run(self, record: CommandRecord, command: ImportListSyncCommand) -> None:
        async with self._lock:
            record.status = CommandStatus.STARTED
            record.started_at = datetime.utcnow()
            logger.info("Command started", command_id=record.id, name=record.name)

            try:
                result = await self.sync_service.execute(command)
            except Exception as e:
                record.status = CommandStatus.FAILED
                record.message = str(e)
                logger.error(
                    "Command failed",
                    command_id=record.id,
                    name=record.name,
                    error=str(e),
                    exc_info=True,
                )
            else:
                record.status = CommandStatus.COMPLETED
                record.message = result.message
                logger.info("Command completed", command_id=record.id, message=result.message)
            finally:
                record.ended_at = datetime.utcnow()

    def get(self, command_id: int) -> Optional[CommandRecord]:
        return self._commands.get(command_id)

    def all(self) -> List[CommandRecord]:
        return sorted(self._commands.values(), key=lambda record: record.id, reverse=True)

    async def wait_idle(self) -> None:
        """Wait for background commands to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))


async def run_scheduler(queue: CommandQueue, interval_minutes: int) -> None:
    """Queue a full sync every ``interval_minutes`` until cancelled."""
    logger.info("Import list sync scheduler started", interval_minutes=interval_minutes)
    while True:
        await queue.run(ImportListSyncCommand())
        await asyncio.sleep(interval_minutes * 60)

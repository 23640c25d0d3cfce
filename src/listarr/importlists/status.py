"""Import list health tracking with escalating back-off."""

from datetime import datetime, timedelta
from typing import List, Optional

from listarr.core.database import LibraryDatabase
from listarr.models.import_list import ImportListStatus
from listarr.utils.logger import get_logger

logger = get_logger(__name__)

# Seconds a list stays disabled at each escalation level
BACKOFF_PERIODS = [0, 60, 300, 600, 900, 1800, 3600, 7200, 14400, 28800, 86400]
MAX_ESCALATION_LEVEL = len(BACKOFF_PERIODS) - 1


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _format(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class ImportListStatusService:
    """Records list fetch failures and decides when a list is blocked."""

    def __init__(self, db: LibraryDatabase, minimum_time_since_initial_failure: int = 300):
        """Initialize status service.

        Args:
            db: Library database
            minimum_time_since_initial_failure: Seconds a list must keep
                failing before it is blocked
        """
        self.db = db
        self.grace_period = timedelta(seconds=minimum_time_since_initial_failure)

    def get_status(self, provider_id: int) -> Optional[ImportListStatus]:
        """Get the health record of a list, if it has one."""
        with self.db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM import_list_status WHERE provider_id = ?", (provider_id,)
            ).fetchone()
        return self._from_row(row) if row else None

    def get_all(self) -> List[ImportListStatus]:
        """Get every health record."""
        with self.db.transaction() as conn:
            rows = conn.execute("SELECT * FROM import_list_status ORDER BY provider_id").fetchall()
        return [self._from_row(row) for row in rows]

    def get_blocked_providers(self, now: Optional[datetime] = None) -> List[ImportListStatus]:
        """Get lists that are currently disabled due to recent failures."""
        now = now or datetime.utcnow()
        return [status for status in self.get_all() if status.is_blocked(now)]

    def record_success(self, provider_id: int) -> None:
        """Record a successful fetch.

        Unblocks the list and steps the escalation level down. The record is
        removed once the level reaches zero.
        """
        status = self.get_status(provider_id)
        if status is None:
            return

        status.escalation_level = max(0, status.escalation_level - 1)
        status.disabled_till = None

        if status.escalation_level == 0:
            with self.db.transaction() as conn:
                conn.execute(
                    "DELETE FROM import_list_status WHERE provider_id = ?", (provider_id,)
                )
            logger.debug("Import list healthy again", provider_id=provider_id)
            return

        self._save(status)

    def record_failure(self, provider_id: int, now: Optional[datetime] = None) -> ImportListStatus:
        """Record a failed fetch and escalate the back-off.

        Returns:
            The updated health record
        """
        now = now or datetime.utcnow()
        status = self.get_status(provider_id) or ImportListStatus(provider_id=provider_id)

        if status.initial_failure is None:
            status.initial_failure = now
        status.most_recent_failure = now
        status.escalation_level = min(MAX_ESCALATION_LEVEL, status.escalation_level + 1)

        in_grace_period = now - status.initial_failure < self.grace_period
        if not in_grace_period:
            status.disabled_till = now + timedelta(
                seconds=BACKOFF_PERIODS[status.escalation_level]
            )

        self._save(status)

        logger.warning(
            "Import list failure recorded",
            provider_id=provider_id,
            escalation_level=status.escalation_level,
            disabled_till=_format(status.disabled_till),
        )
        return status

    def _save(self, status: ImportListStatus) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO import_list_status
                    (provider_id, initial_failure, most_recent_failure, escalation_level, disabled_till)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    status.provider_id,
                    _format(status.initial_failure),
                    _format(status.most_recent_failure),
                    status.escalation_level,
                    _format(status.disabled_till),
                ),
            )

    @staticmethod
    def _from_row(row) -> ImportListStatus:
        return ImportListStatus(
            provider_id=row["provider_id"],
            initial_failure=_parse(row["initial_failure"]),
            most_recent_failure=_parse(row["most_recent_failure"]),
            escalation_level=row["escalation_level"],
            disabled_till=_parse(row["disabled_till"]),
        )

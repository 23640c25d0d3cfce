"""Unit tests for import list health tracking."""

from datetime import datetime, timedelta

from listarr.importlists.status import BACKOFF_PERIODS, MAX_ESCALATION_LEVEL, ImportListStatusService

NOW = datetime(2024, 1, 1, 12, 0, 0)


class TestImportListStatusService:
    """Test escalating back-off of failing lists."""

    def test_first_failure_is_within_grace_period(self, status_service):
        """A list that just started failing is not blocked yet."""
        status = status_service.record_failure(1, now=NOW)

        assert status.escalation_level == 1
        assert status.initial_failure == NOW
        assert status.disabled_till is None
        assert status_service.get_blocked_providers(now=NOW) == []

    def test_blocked_after_grace_period(self, status_service):
        status_service.record_failure(1, now=NOW)
        later = NOW + timedelta(minutes=6)

        status = status_service.record_failure(1, now=later)

        assert status.escalation_level == 2
        assert status.disabled_till == later + timedelta(seconds=BACKOFF_PERIODS[2])
        assert [s.provider_id for s in status_service.get_blocked_providers(now=later)] == [1]

    def test_block_expires(self, status_service):
        status_service.record_failure(1, now=NOW)
        later = NOW + timedelta(minutes=6)
        status_service.record_failure(1, now=later)

        assert status_service.get_blocked_providers(now=later + timedelta(seconds=301)) == []

    def test_escalation_is_capped(self, status_service):
        moment = NOW
        for _ in range(MAX_ESCALATION_LEVEL + 5):
            moment += timedelta(minutes=10)
            status = status_service.record_failure(1, now=moment)

        assert status.escalation_level == MAX_ESCALATION_LEVEL
        assert status.disabled_till == moment + timedelta(seconds=BACKOFF_PERIODS[-1])

    def test_zero_grace_period_blocks_immediately(self, db):
        service = ImportListStatusService(db, minimum_time_since_initial_failure=0)

        status = service.record_failure(1, now=NOW)

        assert status.disabled_till == NOW + timedelta(seconds=BACKOFF_PERIODS[1])

    def test_success_unblocks_and_deescalates(self, status_service):
        status_service.record_failure(1, now=NOW)
        status_service.record_failure(1, now=NOW + timedelta(minutes=6))
        status_service.record_failure(1, now=NOW + timedelta(minutes=12))

        status_service.record_success(1)

        status = status_service.get_status(1)
        assert status.escalation_level == 2
        assert status.disabled_till is None
        assert status_service.get_blocked_providers(now=NOW + timedelta(minutes=12)) == []

    def test_success_clears_record_at_level_zero(self, status_service):
        status_service.record_failure(1, now=NOW)

        status_service.record_success(1)

        assert status_service.get_status(1) is None

    def test_success_without_record(self, status_service):
        status_service.record_success(1)

        assert status_service.get_all() == []

    def test_lists_are_tracked_independently(self, status_service):
        status_service.record_failure(1, now=NOW)
        status_service.record_failure(2, now=NOW)
        status_service.record_failure(2, now=NOW + timedelta(minutes=6))

        blocked = status_service.get_blocked_providers(now=NOW + timedelta(minutes=6))

        assert [s.provider_id for s in blocked] == [2]
        assert status_service.get_status(1).escalation_level == 1

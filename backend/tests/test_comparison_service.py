"""
Tests for the snapshot store and the comparison service.
"""

import pytest

from sow_diff.comparison import ChangeType
from sow_diff.core.config import Settings
from sow_diff.core.error_handlers import RetrievalError, SnapshotNotFound, UnrelatedRevisions
from sow_diff.services.comparison_service import ComparisonService
from sow_diff.services.snapshot_store import InMemorySnapshotStore, SnapshotStore


class FailingSnapshotStore(SnapshotStore):
    """Store whose backend is unreachable"""

    async def _load(self, snapshot_id):
        raise ConnectionError("version store unavailable")


class TestSnapshotStore:
    """Test suite for snapshot lookup."""

    @pytest.mark.asyncio
    async def test_get_snapshot(self, snapshot_store):
        snapshot = await snapshot_store.get_snapshot("sow-2")

        assert snapshot.id == "sow-2"
        assert snapshot.version == 2
        assert len(snapshot_store) == 3

    @pytest.mark.asyncio
    async def test_missing_snapshot(self, snapshot_store):
        with pytest.raises(SnapshotNotFound) as exc_info:
            await snapshot_store.get_snapshot("missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.snapshot_id == "missing"

    @pytest.mark.asyncio
    async def test_backend_failure_is_retrieval_error(self):
        with pytest.raises(RetrievalError) as exc_info:
            await FailingSnapshotStore().get_snapshot("sow-1")

        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_add_snapshot(self, make_snapshot):
        store = InMemorySnapshotStore()
        store.add(make_snapshot({"client_name": "Acme"}, snapshot_id="s1"))

        snapshot = await store.get_snapshot("s1")

        assert snapshot.fields == {"client_name": "Acme"}


class TestComparisonService:
    """Test suite for ComparisonService."""

    @pytest.fixture
    def service(self, snapshot_store):
        return ComparisonService(snapshot_store, Settings())

    @pytest.mark.asyncio
    async def test_compare_revisions(self, service):
        # Act
        result = await service.compare("sow-1", "sow-2")

        # Assert
        assert result.snapshot1_ref.id == "sow-1"
        assert result.snapshot2_ref.id == "sow-2"
        assert result.total_changes == 5
        assert "approved_by" not in result.field_names()
        assert result.get_change("status").change_type == ChangeType.STATUS_CHANGE

    @pytest.mark.asyncio
    async def test_compare_is_caller_ordered(self, service):
        result = await service.compare("sow-2", "sow-1")

        assert result.snapshot1_ref.id == "sow-2"
        assert result.get_change("timeline_weeks").new_value == "6"

    @pytest.mark.asyncio
    async def test_same_revision_twice(self, service):
        result = await service.compare("sow-1", "sow-1")

        assert result.total_changes == 0

    @pytest.mark.asyncio
    async def test_exclude_status_changes(self, service):
        result = await service.compare("sow-1", "sow-2", include_status=False)

        assert "status" not in result.field_names()
        assert result.total_changes == 4

    @pytest.mark.asyncio
    async def test_status_setting_default(self, snapshot_store):
        service = ComparisonService(snapshot_store, Settings(include_status_changes=False))

        result = await service.compare("sow-1", "sow-2")

        assert "status" not in result.field_names()

    @pytest.mark.asyncio
    async def test_unrelated_revisions(self, service):
        with pytest.raises(UnrelatedRevisions) as exc_info:
            await service.compare("sow-1", "other-sow")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"previous_root_id": "sow-1", "new_root_id": "other-sow"}

    @pytest.mark.asyncio
    async def test_missing_revision(self, service):
        with pytest.raises(SnapshotNotFound):
            await service.compare("sow-1", "missing")

    @pytest.mark.asyncio
    async def test_engine_uses_settings(self, snapshot_store):
        settings = Settings(diff_lookahead_window=5, html_atomic_threshold=10, status_field="state")

        service = ComparisonService(snapshot_store, settings)

        assert service.engine.text_differ.lookahead == 5
        assert service.engine.html_differ.atomic_threshold == 10
        assert service.engine.comparator.status_field == "state"

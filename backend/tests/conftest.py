"""
Pytest configuration and shared fixtures for SOW revision comparison tests.
"""

import pytest
from datetime import datetime
from typing import Any, Dict

from fastapi.testclient import TestClient

from sow_diff.comparison import RevisionDiffEngine, Snapshot
from sow_diff.services.snapshot_store import InMemorySnapshotStore


@pytest.fixture
def client_roles() -> list:
    """Client role records as stored in the client_roles column."""
    return [
        {
            "role": "Project Sponsor",
            "name": "Dana Whitfield",
            "email": "dana@acme.test",
            "responsibilities": "Final sign-off on deliverables",
        },
        {
            "role": "Salesforce Admin",
            "name": "Lee Park",
            "email": "lee@acme.test",
        },
    ]


@pytest.fixture
def sow_record(client_roles) -> Dict[str, Any]:
    """A raw SOW row for the first revision."""
    return {
        "id": "sow-1",
        "version": 1,
        "status": "draft",
        "created_at": "2024-03-01T10:00:00Z",
        "updated_at": "2024-03-01T10:05:00Z",
        "parent_id": None,
        "client_name": "Acme Corp",
        "sow_title": "Lead Routing Implementation",
        "timeline_weeks": 6,
        "custom_scope_content": "<p>Configure lead routing for <strong>North America</strong>.</p>",
        "objectives_description": "Reduce lead response time",
        "client_roles": client_roles,
        "approved_by": None,
    }


@pytest.fixture
def sow_revision_record(sow_record, client_roles) -> Dict[str, Any]:
    """A second revision of the same SOW with a handful of edits."""
    roles = [dict(role) for role in client_roles]
    roles[1]["name"] = "Lee Parker"
    record = dict(sow_record)
    record.update({
        "id": "sow-2",
        "version": 2,
        "status": "in_review",
        "created_at": "2024-03-04T09:30:00Z",
        "updated_at": "2024-03-04T09:31:00Z",
        "parent_id": "sow-1",
        "timeline_weeks": 8,
        "custom_scope_content": "<p>Configure lead routing for <strong>North America and EMEA</strong>.</p>",
        "objectives_description": "Reduce lead response time by half",
        "client_roles": roles,
        "approved_by": "manager@example.test",
    })
    return record


@pytest.fixture
def unrelated_record(sow_record) -> Dict[str, Any]:
    record = dict(sow_record)
    record.update({"id": "other-sow", "client_name": "Globex"})
    return record


@pytest.fixture
def make_snapshot():
    """Factory for snapshots with the given field map."""
    def _make(fields: Dict[str, str], snapshot_id: str = "snap", version: int = 1,
              status: str = "draft", parent_id: str = None) -> Snapshot:
        return Snapshot(
            id=snapshot_id,
            version=version,
            status=status,
            created_at=datetime(2024, 3, 1, 10, 0, 0),
            fields=dict(fields),
            parent_id=parent_id,
        )
    return _make


@pytest.fixture
def engine() -> RevisionDiffEngine:
    return RevisionDiffEngine()


@pytest.fixture
def snapshot_store(sow_record, sow_revision_record, unrelated_record) -> InMemorySnapshotStore:
    return InMemorySnapshotStore([sow_record, sow_revision_record, unrelated_record])


@pytest.fixture
def api_client(snapshot_store):
    """Test client wired to the in-memory snapshot store."""
    from sow_diff.main import app
    from sow_diff.api.comparison import get_snapshot_store

    app.dependency_overrides[get_snapshot_store] = lambda: snapshot_store
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
"""
Unit tests for field-level change detection and classification.
"""

import json
from datetime import datetime, timezone

import pytest

from sow_diff.comparison import (
    ChangeType,
    FieldComparator,
    display_name,
    snapshot_from_record,
    value_to_string,
)


class TestValueToString:
    """Serialization of raw column values."""

    def test_none_is_empty(self):
        assert value_to_string(None) == ""

    def test_collections_are_compact_json(self):
        assert value_to_string({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_booleans(self):
        assert value_to_string(True) == "true"
        assert value_to_string(False) == "false"

    def test_scalars(self):
        assert value_to_string(8) == "8"
        assert value_to_string("text") == "text"


class TestSnapshotFromRecord:
    """Building snapshots from raw SOW rows."""

    def test_fields_and_metadata(self, sow_revision_record):
        snapshot = snapshot_from_record(sow_revision_record)

        assert snapshot.id == "sow-2"
        assert snapshot.version == 2
        assert snapshot.status == "in_review"
        assert snapshot.parent_id == "sow-1"
        assert snapshot.root_id == "sow-1"
        assert snapshot.created_at == datetime(2024, 3, 4, 9, 30, tzinfo=timezone.utc)
        assert snapshot.fields["timeline_weeks"] == "8"
        assert snapshot.fields["approved_by"] == "manager@example.test"
        assert json.loads(snapshot.fields["client_roles"])[1]["name"] == "Lee Parker"

    def test_root_revision(self, sow_record):
        snapshot = snapshot_from_record(sow_record)

        assert snapshot.parent_id is None
        assert snapshot.root_id == "sow-1"
        assert snapshot.fields["approved_by"] == ""

    def test_field_order_follows_record(self, sow_record):
        snapshot = snapshot_from_record(sow_record)

        assert list(snapshot.fields) == list(sow_record)

    def test_invalid_created_at(self, sow_record):
        sow_record["created_at"] = None

        with pytest.raises(ValueError):
            snapshot_from_record(sow_record)


class TestDisplayName:

    def test_known_field(self):
        assert display_name("custom_scope_content") == "Scope Content"
        assert display_name("sow_title") == "SOW Title"

    def test_unknown_field_is_title_cased(self):
        assert display_name("kickoff_meeting_notes") == "Kickoff Meeting Notes"


class TestFieldComparator:
    """Test suite for FieldComparator."""

    @pytest.fixture
    def comparator(self):
        return FieldComparator()

    def test_identical_snapshots(self, comparator, make_snapshot):
        fields = {"client_name": "Acme", "status": "draft"}

        assert comparator.compare(make_snapshot(fields), make_snapshot(fields)) == []

    def test_status_change(self, comparator, make_snapshot):
        """Status changes name both values in the summary."""
        # Arrange
        prev = make_snapshot({"status": "draft"})
        new = make_snapshot({"status": "in_review"})

        # Act
        changes = comparator.compare(prev, new)

        # Assert
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.STATUS_CHANGE
        assert changes[0].diff_summary == 'Status changed from "draft" to "in_review"'

    def test_status_set_from_empty(self, comparator, make_snapshot):
        changes = comparator.compare(make_snapshot({}), make_snapshot({"status": "approved"}))

        assert changes[0].diff_summary == 'Status changed from "None" to "approved"'

    def test_custom_status_field(self, make_snapshot):
        comparator = FieldComparator(status_field="state")

        changes = comparator.compare(make_snapshot({"state": "a"}), make_snapshot({"state": "b"}))

        assert changes[0].change_type == ChangeType.STATUS_CHANGE

    @pytest.mark.parametrize("field_name", [
        "custom_scope_content",
        "custom_intro",
        "content",
        "deliverables_content_notes",
    ])
    def test_content_fields(self, comparator, field_name):
        assert comparator.classify(field_name) == ChangeType.CONTENT_EDIT

    def test_other_fields_are_field_updates(self, comparator):
        assert comparator.classify("timeline_weeks") == ChangeType.FIELD_UPDATE

    def test_content_summaries(self, comparator):
        label = "Scope Content"
        name = "custom_scope_content"
        content = ChangeType.CONTENT_EDIT

        assert comparator.summarize(name, "abc", "abcdef", content) == f"{label} content expanded (3 -> 6 characters)"
        assert comparator.summarize(name, "abcdef", "abc", content) == f"{label} content shortened (6 -> 3 characters)"
        assert comparator.summarize(name, "abc", "xyz", content) == f"{label} content revised (3 -> 3 characters)"
        assert comparator.summarize(name, "", "abcd", content) == f"{label} content added (4 characters)"
        assert comparator.summarize(name, "abc", "", content) == f"{label} content removed"

    def test_field_update_summaries(self, comparator):
        update = ChangeType.FIELD_UPDATE

        assert comparator.summarize("timeline_weeks", "6", "8", update) == 'Timeline Weeks changed from "6" to "8"'
        assert comparator.summarize("client_name", "", "Acme", update) == 'Client Name set to "Acme"'
        assert comparator.summarize("client_name", "Acme", "", update) == 'Client Name cleared (was "Acme")'

    def test_structured_list_summary(self, comparator, client_roles, make_snapshot):
        renamed = [dict(role) for role in client_roles]
        renamed[0]["name"] = "Dana W."

        changes = comparator.compare(
            make_snapshot({"client_roles": json.dumps(client_roles)}),
            make_snapshot({"client_roles": json.dumps(renamed)}),
        )

        assert changes[0].change_type == ChangeType.FIELD_UPDATE
        assert changes[0].diff_summary == "Client Roles list updated"

    def test_field_order_is_previous_then_new_only(self, comparator, make_snapshot):
        prev = make_snapshot({"b": "1", "a": "1", "c": "1"})
        new = make_snapshot({"d": "2", "a": "2", "b": "2", "c": "2"})

        changes = comparator.compare(prev, new)

        assert [change.field_name for change in changes] == ["b", "a", "c", "d"]

    def test_missing_fields_compare_as_empty(self, comparator, make_snapshot):
        changes = comparator.compare(
            make_snapshot({"client_name": "Acme", "notes": ""}),
            make_snapshot({"sow_title": "Rollout"}),
        )

        by_name = {change.field_name: change for change in changes}
        assert set(by_name) == {"client_name", "sow_title"}
        assert by_name["client_name"].new_value == ""
        assert by_name["sow_title"].previous_value == ""

    def test_bookkeeping_fields_are_excluded(self, comparator, sow_record, sow_revision_record):
        changes = comparator.compare(
            snapshot_from_record(sow_record),
            snapshot_from_record(sow_revision_record),
        )

        names = {change.field_name for change in changes}
        assert names == {
            "status",
            "timeline_weeks",
            "custom_scope_content",
            "objectives_description",
            "client_roles",
        }

    def test_custom_exclusions(self, make_snapshot):
        comparator = FieldComparator(excluded_fields=["notes"])

        changes = comparator.compare(
            make_snapshot({"notes": "a", "id": "1"}),
            make_snapshot({"notes": "b", "id": "2"}),
        )

        assert [change.field_name for change in changes] == ["id"]

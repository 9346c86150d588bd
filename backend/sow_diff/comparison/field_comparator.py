"""
Field-level comparison of two SOW snapshots.
Decides which fields changed and classifies each change.
"""

import re
import json
from typing import Any, Iterable, List, Mapping, Optional
from datetime import datetime

from .models import ChangeDiff, ChangeType, Snapshot
from .structured_list import StructuredListFormatter


# Bookkeeping columns that never show up as document changes
SYSTEM_FIELDS = frozenset({
    'id', 'created_at', 'updated_at', 'is_latest', 'parent_id', 'version',
    'author_id', 'salesforce_account_id', 'salesforce_contact_id',
})

# Approval workflow columns, shown elsewhere in the revision header
APPROVAL_FIELDS = frozenset({
    'approved_by', 'rejected_by', 'submitted_by',
    'approved_at', 'rejected_at', 'submitted_at', 'approval_comments',
})

DEFAULT_EXCLUDED_FIELDS = SYSTEM_FIELDS | APPROVAL_FIELDS

STRUCTURED_LIST_FIELDS = frozenset({'client_roles', 'clientRoles'})

FIELD_DISPLAY_NAMES = {
    'client_name': 'Client Name',
    'sow_title': 'SOW Title',
    'deliverables': 'Deliverables',
    'custom_intro_content': 'Introduction Content',
    'custom_scope_content': 'Scope Content',
    'custom_objectives_disclosure_content': 'Objectives Disclosure Content',
    'custom_assumptions_content': 'Assumptions Content',
    'custom_project_phases_content': 'Project Phases Content',
    'custom_roles_content': 'Roles Content',
    'custom_deliverables_content': 'Deliverables Content',
    'custom_objective_overview_content': 'Objective Overview Content',
    'custom_key_objectives_content': 'Key Objectives Content',
    'status': 'Status',
    'opportunity_amount': 'Opportunity Amount',
    'timeline_weeks': 'Timeline Weeks',
    'start_date': 'Project Start Date',
    'duration': 'Project Duration',
    'products': 'Products',
    'number_of_units': 'Number of Units',
    'regions': 'Regions',
    'salesforce_tenants': 'Salesforce Tenants',
    'units_consumption': 'Units Consumption',
    'orchestration_units': 'Orchestration Units',
    'bookit_forms_units': 'BookIt Forms Units',
    'bookit_links_units': 'BookIt Links Units',
    'bookit_handoff_units': 'BookIt Handoff Units',
    'client_title': 'Client Title',
    'client_email': 'Client Email',
    'client_signer_name': 'Client Signer Name',
    'signature_date': 'Signature Date',
    'objectives_description': 'Objectives Description',
    'objectives_key_objectives': 'Key Objectives',
    'avoma_transcription': 'Avoma Transcription',
    'avoma_url': 'Avoma URL',
    'client_roles': 'Client Roles',
    'pricing_roles': 'Pricing Roles',
    'billing_info': 'Billing Information',
    'access_requirements': 'Access Requirements',
    'travel_requirements': 'Travel Requirements',
    'working_hours': 'Working Hours',
    'testing_responsibilities': 'Testing Responsibilities',
    'leandata_name': 'LeanData Name',
    'leandata_title': 'LeanData Title',
    'leandata_email': 'LeanData Email',
    'opportunity_id': 'Opportunity ID',
    'opportunity_name': 'Opportunity Name',
    'opportunity_stage': 'Opportunity Stage',
    'opportunity_close_date': 'Opportunity Close Date',
    'project_start_date': 'Project Start Date',
    'project_end_date': 'Project End Date',
    'company_logo': 'Company Logo',
    'title': 'Title',
    'content': 'Content',
    'addendums': 'Addendums',
    'customer_signature_name_2': 'Second Customer Signer Name',
    'customer_signature_2': 'Second Customer Signature',
    'customer_email_2': 'Second Customer Email',
    'customer_signature_date_2': 'Second Customer Signature Date',
}

_WORD_START = re.compile(r'\b\w')


def value_to_string(value: Any) -> str:
    """Serialize a raw column value the way snapshots store it."""
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    raise ValueError(f"Invalid created_at value: {value!r}")


def snapshot_from_record(record: Mapping[str, Any]) -> Snapshot:
    """
    Build a Snapshot from a raw SOW row.

    Every column, bookkeeping ones included, is flattened into the field map
    in row order; the comparator decides what to skip.
    """
    return Snapshot(
        id=str(record['id']),
        version=int(record.get('version') or 1),
        status=value_to_string(record.get('status')),
        created_at=_parse_timestamp(record.get('created_at')),
        fields={name: value_to_string(value) for name, value in record.items()},
        parent_id=str(record['parent_id']) if record.get('parent_id') else None,
    )


def display_name(field_name: str) -> str:
    """Human readable label for a field."""
    if field_name in FIELD_DISPLAY_NAMES:
        return FIELD_DISPLAY_NAMES[field_name]
    return _WORD_START.sub(lambda m: m.group(0).upper(), field_name.replace('_', ' '))


class FieldComparator:
    """
    Emits one ChangeDiff per field whose serialized value differs.

    Fields are visited in the previous snapshot's order, followed by fields
    only present in the new snapshot. Missing fields compare as empty strings.
    """

    def __init__(self,
                 excluded_fields: Optional[Iterable[str]] = None,
                 status_field: str = 'status',
                 list_formatter: Optional[StructuredListFormatter] = None):
        self.excluded_fields = frozenset(
            DEFAULT_EXCLUDED_FIELDS if excluded_fields is None else excluded_fields
        )
        self.status_field = status_field
        self.list_formatter = list_formatter or StructuredListFormatter()

    def field_names(self, previous: Snapshot, new: Snapshot) -> List[str]:
        names = list(previous.fields)
        seen = set(names)
        names.extend(name for name in new.fields if name not in seen)
        return [name for name in names if name not in self.excluded_fields]

    def compare(self, previous: Snapshot, new: Snapshot) -> List[ChangeDiff]:
        changes = []
        for name in self.field_names(previous, new):
            prev_value = previous.fields.get(name) or ''
            new_value = new.fields.get(name) or ''
            if prev_value == new_value:
                continue

            change_type = self.classify(name)
            changes.append(ChangeDiff(
                field_name=name,
                previous_value=prev_value,
                new_value=new_value,
                change_type=change_type,
                diff_summary=self.summarize(name, prev_value, new_value, change_type),
            ))
        return changes

    def classify(self, field_name: str) -> ChangeType:
        if field_name == self.status_field:
            return ChangeType.STATUS_CHANGE
        if field_name.startswith('custom_') or 'content' in field_name:
            return ChangeType.CONTENT_EDIT
        return ChangeType.FIELD_UPDATE

    def summarize(self, field_name: str, previous_value: str, new_value: str,
                  change_type: ChangeType) -> str:
        label = display_name(field_name)

        if change_type == ChangeType.STATUS_CHANGE:
            return f'Status changed from "{previous_value or "None"}" to "{new_value or "None"}"'

        if field_name in STRUCTURED_LIST_FIELDS or self.list_formatter.applies_to(previous_value, new_value):
            return f"{label} list updated"

        if change_type == ChangeType.CONTENT_EDIT:
            if previous_value and new_value:
                prev_len, new_len = len(previous_value), len(new_value)
                if new_len > prev_len:
                    verb = 'expanded'
                elif new_len < prev_len:
                    verb = 'shortened'
                else:
                    verb = 'revised'
                return f"{label} content {verb} ({prev_len} -> {new_len} characters)"
            if new_value:
                return f"{label} content added ({len(new_value)} characters)"
            return f"{label} content removed"

        if previous_value and new_value:
            return f'{label} changed from "{previous_value}" to "{new_value}"'
        if new_value:
            return f'{label} set to "{new_value}"'
        return f'{label} cleared (was "{previous_value}")'

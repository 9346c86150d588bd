"""
Formatting for structured list fields (client roles and similar).

These values are JSON arrays of contact/role records. They are not diffed:
each side is rendered as a numbered, readable list.
"""

import json
from typing import Any, Dict, List, Optional

NAME_KEYS = ('name', 'email')
ROLE_KEYS = ('role', 'contact_title')


def parse_role_records(value: str) -> Optional[List[Dict[str, Any]]]:
    """Parse `value` as a list of role records, or return None if it is not one."""
    if not value or not value.strip().startswith('['):
        return None
    try:
        parsed = json.loads(value)
    except (ValueError, RecursionError):
        return None
    if not isinstance(parsed, list) or not parsed:
        return None

    first = parsed[0]
    if not isinstance(first, dict):
        return None
    if not any(key in first for key in NAME_KEYS):
        return None
    if not any(key in first for key in ROLE_KEYS):
        return None
    return parsed


class StructuredListFormatter:
    """Detects and formats JSON arrays of role/contact records."""

    placeholder = 'N/A'

    def is_structured_list(self, value: str) -> bool:
        return parse_role_records(value) is not None

    def applies_to(self, previous_value: str, new_value: str) -> bool:
        """True when at least one side is a role list and every non-empty side is."""
        values = [v for v in (previous_value, new_value) if v]
        return bool(values) and all(self.is_structured_list(v) for v in values)

    def format(self, value: str) -> Optional[str]:
        """
        Render a role list as numbered entries.

        Returns None when `value` is not a role list, so callers can fall
        back to treating it as plain text.
        """
        records = parse_role_records(value)
        if records is None:
            return None
        return '\n\n'.join(
            self._format_entry(index, record) for index, record in enumerate(records, start=1)
        )

    def _format_entry(self, index: int, record: Any) -> str:
        if not isinstance(record, dict):
            return f"{index}. {self.placeholder}\n   User: {self._text(record) or self.placeholder}"

        role = self._text(record.get('role')) or self._text(record.get('contact_title')) or self.placeholder
        name = self._text(record.get('name')) or self.placeholder
        email = self._text(record.get('email'))
        responsibilities = self._text(record.get('responsibilities'))

        lines = [f"{index}. {role}", f"   User: {name}" + (f" ({email})" if email else "")]
        if responsibilities:
            lines.append(f"   Responsibilities: {responsibilities}")
        return '\n'.join(lines)

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ''
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)

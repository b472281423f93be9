"""
Data models for GitHub Copilot API records.

Immutable snapshots of the usage and seat payloads.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional


class PayloadError(ValueError):
    """Raised when an API record does not have the expected shape."""


@dataclass(frozen=True)
class UsageDay:
    """One calendar day of aggregate Copilot usage."""
    day: date
    suggestions: int
    acceptances: int
    lines_suggested: int = 0
    lines_accepted: int = 0
    active_users: int = 0

    def __post_init__(self):
        """Validate counts are non-negative."""
        for name in ('suggestions', 'acceptances', 'lines_suggested',
                     'lines_accepted', 'active_users'):
            if getattr(self, name) < 0:
                raise PayloadError(f"{name} cannot be negative")

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "UsageDay":
        """Build a UsageDay from a ``copilot/usage`` record."""
        if not isinstance(record, dict):
            raise PayloadError("Usage record must be an object")

        raw_day = record.get('day', record.get('date'))
        if not isinstance(raw_day, str):
            raise PayloadError("Usage record missing 'day'")
        try:
            day = date.fromisoformat(raw_day[:10])
        except ValueError:
            raise PayloadError(f"Invalid usage day: {raw_day!r}")

        return cls(
            day=day,
            suggestions=_count(record, 'total_suggestions_count'),
            acceptances=_count(record, 'total_acceptances_count'),
            lines_suggested=_count(record, 'total_lines_suggested'),
            lines_accepted=_count(record, 'total_lines_accepted'),
            active_users=_count(record, 'total_active_users'),
        )


@dataclass(frozen=True)
class SeatAssignment:
    """One Copilot license assigned to a user."""
    login: str
    created_at: datetime
    user_id: Optional[int] = None
    updated_at: Optional[datetime] = None
    pending_cancellation_date: Optional[date] = None
    last_activity_at: Optional[datetime] = None
    last_activity_editor: Optional[str] = None
    team: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """Whether the seat has any recorded activity."""
        return self.last_activity_at is not None

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "SeatAssignment":
        """Build a SeatAssignment from a ``billing/seats`` entry."""
        if not isinstance(record, dict):
            raise PayloadError("Seat record must be an object")

        assignee = record.get('assignee')
        if not isinstance(assignee, dict) or not assignee.get('login'):
            raise PayloadError("Seat record missing assignee login")

        created_at = _timestamp(record.get('created_at'), 'created_at')
        if created_at is None:
            raise PayloadError("Seat record missing 'created_at'")

        pending = record.get('pending_cancellation_date')
        team = record.get('assigning_team')

        return cls(
            login=assignee['login'],
            user_id=assignee.get('id'),
            created_at=created_at,
            updated_at=_timestamp(record.get('updated_at'), 'updated_at'),
            pending_cancellation_date=_date(pending, 'pending_cancellation_date'),
            last_activity_at=_timestamp(record.get('last_activity_at'), 'last_activity_at'),
            last_activity_editor=record.get('last_activity_editor'),
            team=team.get('slug') if isinstance(team, dict) else None,
        )


def _count(record: Dict[str, Any], key: str) -> int:
    value = record.get(key) or 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadError(f"'{key}' must be an integer")
    return value


def _timestamp(value: Any, key: str) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise PayloadError(f"'{key}' must be a timestamp string")
    try:
        # GitHub uses a trailing "Z" which older fromisoformat rejects
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise PayloadError(f"Invalid timestamp in '{key}': {value!r}")


def _date(value: Any, key: str) -> Optional[date]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise PayloadError(f"'{key}' must be a date string")
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise PayloadError(f"Invalid date in '{key}': {value!r}")

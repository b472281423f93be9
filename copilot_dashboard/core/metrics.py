"""
Metrics derivation from usage and seat data.

Turns raw daily usage and seat assignments into the dashboard summary.
"""

import math
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from copilot_dashboard.client.models import SeatAssignment, UsageDay

WINDOW_DAYS = 7
TREND_HALF_DAYS = 3


@dataclass(frozen=True)
class DailyRate:
    """Acceptance rate for a single day."""
    label: str
    rate: int


@dataclass(frozen=True)
class MetricsSummary:
    """Summary view model consumed by the dashboard."""
    total_seats: int
    active_users: int
    acceptance_rate: int
    usage_trend: int
    daily_acceptance_rates: Tuple[DailyRate, ...] = ()

    def __post_init__(self):
        """Validate summary values."""
        if self.total_seats < 0:
            raise ValueError("total_seats cannot be negative")
        if self.active_users < 0:
            raise ValueError("active_users cannot be negative")
        if not 0 <= self.acceptance_rate <= 100:
            raise ValueError("acceptance_rate must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        data = asdict(self)
        data['daily_acceptance_rates'] = [dict(item) for item in data['daily_acceptance_rates']]
        return data


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding, which would report 12.5% as 12.
    """
    return int(math.floor(value + 0.5))


def percentage(numerator: float, denominator: float) -> int:
    """Whole-number percentage clamped to [0, 100]; 0 when denominator is 0."""
    if denominator <= 0:
        return 0
    return min(100, max(0, round_half_up(100 * numerator / denominator)))


def derive_summary(
    usage_days: Sequence[UsageDay],
    seats: Iterable[SeatAssignment],
    total_seats: Optional[int] = None,
) -> MetricsSummary:
    """Derive the dashboard summary.

    Uses the most recent 7 usage days. Active users are the distinct seat
    holders with any recorded activity.

    Args:
        usage_days: Daily usage records in chronological order
        seats: Seat assignments
        total_seats: Seat count reported by the API; defaults to len(seats)

    Returns:
        MetricsSummary for the window
    """
    seats = list(seats)
    window = list(usage_days)[-WINDOW_DAYS:]

    acceptance_rate = percentage(
        sum(day.acceptances for day in window),
        sum(day.suggestions for day in window),
    )

    active_users = len({seat.login for seat in seats if seat.is_active})

    daily_rates = tuple(
        DailyRate(
            label=format_day_label(day),
            rate=percentage(day.acceptances, day.suggestions),
        )
        for day in window
    )

    return MetricsSummary(
        total_seats=len(seats) if total_seats is None else total_seats,
        active_users=active_users,
        acceptance_rate=acceptance_rate,
        usage_trend=compute_usage_trend(window),
        daily_acceptance_rates=daily_rates,
    )


def compute_usage_trend(window: Sequence[UsageDay]) -> int:
    """Percent change in mean active users, first 3 days vs last 3 days.

    Not clamped. Returns 0 for an empty window or a zero first-half mean.
    """
    if not window:
        return 0

    first_half = window[:TREND_HALF_DAYS]
    second_half = window[-TREND_HALF_DAYS:]
    first_mean = sum(day.active_users for day in first_half) / len(first_half)
    second_mean = sum(day.active_users for day in second_half) / len(second_half)

    if first_mean == 0:
        return 0
    return round_half_up(100 * (second_mean - first_mean) / first_mean)


def format_day_label(usage_day: UsageDay) -> str:
    """Label such as "Mon Oct 12"."""
    return usage_day.day.strftime("%a %b %d")


def editor_breakdown(seats: Iterable[SeatAssignment]) -> List[Tuple[str, int]]:
    """Count active seats by the editor they were last used from.

    GitHub reports editors as ``vscode/1.85.1/copilot/1.143.0``; only the
    editor name is kept.

    Returns:
        (editor, count) pairs, most used first
    """
    counts: Counter = Counter()
    for seat in seats:
        if not seat.is_active:
            continue
        editor = (seat.last_activity_editor or "").split("/", 1)[0].strip()
        counts[editor or "unknown"] += 1
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

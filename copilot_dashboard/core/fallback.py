"""
Synthetic dashboard data.

Used when the real API cannot be reached so the dashboard still renders.
"""

import random
from datetime import date, timedelta
from typing import Optional

from .metrics import WINDOW_DAYS, DailyRate, MetricsSummary

FALLBACK_TOTAL_SEATS = 200
FALLBACK_ACTIVE_USERS = 127
FALLBACK_ACCEPTANCE_RATE = 32
FALLBACK_USAGE_TREND = 8

# Daily rates are drawn from [low, high)
FALLBACK_RATE_LOW = 25
FALLBACK_RATE_HIGH = 45


def generate_fallback(
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> MetricsSummary:
    """Generate a synthetic summary for the trailing 7 days ending today.

    Args:
        rng: Random source; pass a seeded ``random.Random`` for repeatable output
        today: Last day of the series (defaults to the current date)

    Returns:
        MetricsSummary with fixed seat figures and a random daily series
    """
    rng = rng or random.Random()
    today = today or date.today()

    daily_rates = []
    for offset in range(WINDOW_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        daily_rates.append(DailyRate(
            label=day.strftime("%a"),
            rate=rng.randrange(FALLBACK_RATE_LOW, FALLBACK_RATE_HIGH),
        ))

    return MetricsSummary(
        total_seats=FALLBACK_TOTAL_SEATS,
        active_users=FALLBACK_ACTIVE_USERS,
        acceptance_rate=FALLBACK_ACCEPTANCE_RATE,
        usage_trend=FALLBACK_USAGE_TREND,
        daily_acceptance_rates=tuple(daily_rates),
    )

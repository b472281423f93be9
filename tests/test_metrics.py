"""
Unit tests for metrics derivation.

Tests deterministic summary computation from usage days and seats.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from copilot_dashboard.client.models import SeatAssignment, UsageDay
from copilot_dashboard.core.metrics import (
    DailyRate,
    MetricsSummary,
    compute_usage_trend,
    derive_summary,
    editor_breakdown,
    percentage,
    round_half_up,
)

START = date(2024, 10, 7)  # a Monday
ACTIVITY = datetime(2024, 10, 13, 9, 30, tzinfo=timezone.utc)


def make_days(suggestions, acceptances, active_users=None):
    """Build consecutive usage days starting at START."""
    if active_users is None:
        active_users = [10] * len(suggestions)
    return [
        UsageDay(
            day=START + timedelta(days=i),
            suggestions=s,
            acceptances=a,
            active_users=u,
        )
        for i, (s, a, u) in enumerate(zip(suggestions, acceptances, active_users))
    ]


def make_seat(login, active=True, editor=None):
    """Build a seat assignment."""
    return SeatAssignment(
        login=login,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        last_activity_at=ACTIVITY if active else None,
        last_activity_editor=editor,
    )


class TestRounding:
    """Test rounding helpers."""

    def test_halves_round_up(self):
        """Test halves round up unlike Python's round()."""
        assert round_half_up(12.5) == 13
        assert round_half_up(13.5) == 14
        assert round_half_up(12.4) == 12
        assert round_half_up(-12.5) == -12

    def test_percentage_zero_denominator(self):
        """Test zero denominator gives 0."""
        assert percentage(5, 0) == 0

    def test_percentage_clamped(self):
        """Test percentages are clamped to [0, 100]."""
        assert percentage(150, 100) == 100
        assert percentage(30, 100) == 30


class TestDeriveSummary:
    """Test summary derivation."""

    def test_empty_usage(self):
        """Test empty usage yields zero rates and empty series."""
        summary = derive_summary([], [])

        assert summary.acceptance_rate == 0
        assert summary.usage_trend == 0
        assert summary.daily_acceptance_rates == ()
        assert summary.total_seats == 0
        assert summary.active_users == 0

    def test_constant_acceptance_rate(self):
        """Test 30 of 100 accepted every day gives 30% overall and per day."""
        days = make_days([100] * 7, [30] * 7)

        summary = derive_summary(days, [])

        assert summary.acceptance_rate == 30
        assert [point.rate for point in summary.daily_acceptance_rates] == [30] * 7

    def test_window_uses_last_seven_days(self):
        """Test only the most recent 7 days are included."""
        # First three days have a 100% rate and must be ignored
        days = make_days([10] * 3 + [100] * 7, [10] * 3 + [20] * 7)

        summary = derive_summary(days, [])

        assert summary.acceptance_rate == 20
        assert len(summary.daily_acceptance_rates) == 7
        assert summary.daily_acceptance_rates[0].label == "Thu Oct 10"
        assert summary.daily_acceptance_rates[-1].label == "Wed Oct 16"

    def test_fewer_than_seven_days_uses_all(self):
        """Test short histories use every day."""
        days = make_days([100, 200], [10, 50])

        summary = derive_summary(days, [])

        assert summary.acceptance_rate == 20  # 60 / 300
        assert summary.daily_acceptance_rates == (
            DailyRate(label="Mon Oct 07", rate=10),
            DailyRate(label="Tue Oct 08", rate=25),
        )

    def test_day_without_suggestions_has_zero_rate(self):
        """Test a zero-suggestion day reports 0 rather than failing."""
        days = make_days([100, 0, 100], [40, 0, 20])

        summary = derive_summary(days, [])

        assert [point.rate for point in summary.daily_acceptance_rates] == [40, 0, 20]
        assert summary.acceptance_rate == 30

    def test_no_suggestions_at_all(self):
        """Test zero suggestions across the window gives 0%."""
        summary = derive_summary(make_days([0] * 7, [0] * 7), [])

        assert summary.acceptance_rate == 0

    def test_acceptance_rate_clamped(self):
        """Test inconsistent data cannot push the rate past 100."""
        summary = derive_summary(make_days([10], [15]), [])

        assert summary.acceptance_rate == 100
        assert summary.daily_acceptance_rates[0].rate == 100

    def test_active_users_from_seat_activity(self):
        """Test active users counts distinct seats with activity."""
        seats = [
            make_seat("octocat"),
            make_seat("hubot"),
            make_seat("monalisa", active=False),
            make_seat("octocat"),
        ]

        summary = derive_summary(make_days([100], [30]), seats)

        assert summary.active_users == 2
        assert summary.total_seats == 4

    def test_reported_total_seats_wins(self):
        """Test API-reported total seats is used when given."""
        seats = [make_seat("octocat")]

        summary = derive_summary([], seats, total_seats=200)

        assert summary.total_seats == 200
        assert summary.active_users == 1

    def test_idempotent(self):
        """Test identical inputs give identical outputs."""
        days = make_days([120, 80, 95, 110, 100, 60, 130], [30, 25, 40, 33, 31, 12, 50],
                         [40, 42, 45, 50, 52, 55, 58])
        seats = [make_seat("octocat"), make_seat("hubot", active=False)]

        assert derive_summary(days, seats) == derive_summary(days, seats)

    def test_to_dict(self):
        """Test JSON-ready representation."""
        summary = derive_summary(make_days([100], [30]), [make_seat("octocat")], total_seats=5)

        assert summary.to_dict() == {
            "total_seats": 5,
            "active_users": 1,
            "acceptance_rate": 30,
            "usage_trend": 0,
            "daily_acceptance_rates": [{"label": "Mon Oct 07", "rate": 30}],
        }


class TestUsageTrend:
    """Test usage trend computation."""

    def test_fifty_percent_growth(self):
        """Test mean 50 -> mean 75 gives +50%."""
        days = make_days([1] * 7, [0] * 7, [50, 50, 50, 60, 75, 75, 75])

        assert compute_usage_trend(days) == 50
        assert derive_summary(days, []).usage_trend == 50

    def test_decline_is_negative(self):
        """Test falling usage gives a negative trend."""
        days = make_days([1] * 7, [0] * 7, [100, 100, 100, 0, 80, 80, 80])

        assert compute_usage_trend(days) == -20

    def test_trend_not_clamped(self):
        """Test large growth is reported as-is."""
        days = make_days([1] * 7, [0] * 7, [10, 10, 10, 0, 50, 50, 50])

        assert compute_usage_trend(days) == 400

    def test_zero_first_half(self):
        """Test zero baseline gives 0 instead of dividing by zero."""
        days = make_days([1] * 7, [0] * 7, [0, 0, 0, 5, 10, 10, 10])

        assert compute_usage_trend(days) == 0

    def test_empty_window(self):
        """Test empty window gives 0."""
        assert compute_usage_trend([]) == 0

    def test_short_window_halves_overlap(self):
        """Test windows under 6 days compare first 3 against last 3."""
        days = make_days([1] * 4, [0] * 4, [10, 20, 30, 40])

        # first mean 20, second mean 30
        assert compute_usage_trend(days) == 50


class TestMetricsSummary:
    """Test summary validation."""

    def test_rejects_out_of_range_rate(self):
        """Test acceptance rate outside [0, 100] is rejected."""
        with pytest.raises(ValueError, match="acceptance_rate"):
            MetricsSummary(total_seats=1, active_users=1, acceptance_rate=101, usage_trend=0)

    def test_negative_trend_allowed(self):
        """Test usage trend may be negative."""
        summary = MetricsSummary(total_seats=1, active_users=1, acceptance_rate=5, usage_trend=-40)

        assert summary.usage_trend == -40


class TestEditorBreakdown:
    """Test editor breakdown of active seats."""

    def test_counts_by_editor_name(self):
        """Test editor versions are stripped and counts sorted."""
        seats = [
            make_seat("a", editor="vscode/1.85.1/copilot/1.143.0"),
            make_seat("b", editor="vscode/1.84.0/copilot/1.140.0"),
            make_seat("c", editor="JetBrains-IC/233.11799.241/"),
            make_seat("d", editor=None),
            make_seat("e", active=False, editor="vim/9.0"),
        ]

        assert editor_breakdown(seats) == [
            ("vscode", 2),
            ("JetBrains-IC", 1),
            ("unknown", 1),
        ]

    def test_no_active_seats(self):
        """Test empty breakdown when nothing is active."""
        assert editor_breakdown([make_seat("a", active=False)]) == []

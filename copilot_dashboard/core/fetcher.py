"""
Dashboard data loading.

Fetches usage and seats concurrently and applies the failure policy.

Fetching never hides errors: ``fetch_metrics`` returns an explicit
FetchResult. Whether a failure is replaced by synthetic data is decided
separately in ``load_summary`` according to ``DashboardConfig.on_failure``.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Optional, Union

import httpx
from loguru import logger

from copilot_dashboard.client.github_client import GitHubClient, RemoteError
from copilot_dashboard.config.loader import ConfigurationError, DashboardConfig, FailurePolicy

from .fallback import generate_fallback
from .metrics import MetricsSummary, derive_summary

FetchError = Union[ConfigurationError, RemoteError]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a fetch: exactly one of summary or error is set."""
    summary: Optional[MetricsSummary] = None
    error: Optional[FetchError] = None

    def __post_init__(self):
        """Validate exactly one outcome is present."""
        if (self.summary is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of summary or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> MetricsSummary:
        """Return the summary or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.summary


async def fetch_metrics(
    config: DashboardConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FetchResult:
    """Fetch usage and seats and derive the summary.

    Both reads run concurrently and both must succeed.

    Args:
        config: Dashboard configuration with the API credential
        http_client: Optional HTTP client to use instead of a fresh one

    Returns:
        FetchResult with the summary, or the ConfigurationError/RemoteError
    """
    try:
        client = GitHubClient(config, http_client=http_client)
    except ConfigurationError as e:
        return FetchResult(error=e)

    async with client:
        # Let both reads settle before the client is closed
        usage, seat_data = await asyncio.gather(
            client.get_usage(),
            client.get_seats(),
            return_exceptions=True,
        )

    for outcome in (usage, seat_data):
        if isinstance(outcome, RemoteError):
            return FetchResult(error=outcome)
        if isinstance(outcome, BaseException):
            raise outcome

    usage_days = usage
    total_seats, seats = seat_data
    return FetchResult(summary=derive_summary(usage_days, seats, total_seats=total_seats))


async def load_summary(
    config: DashboardConfig,
    rng: Optional[random.Random] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> MetricsSummary:
    """Load the dashboard summary, honouring the configured failure policy.

    Raises:
        ConfigurationError: Missing credential under the ERROR policy
        RemoteError: API failure under the ERROR policy
    """
    result = await fetch_metrics(config, http_client=http_client)
    if result.ok:
        return result.summary

    if config.on_failure is FailurePolicy.FALLBACK:
        logger.warning(f"Falling back to synthetic dashboard data: {result.error}")
        return generate_fallback(rng)

    raise result.error

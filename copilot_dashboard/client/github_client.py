"""
GitHub REST client for Copilot enterprise endpoints.

Reads daily usage and seat assignments; every failure becomes a RemoteError.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from ..config.loader import DashboardConfig
from .models import PayloadError, SeatAssignment, UsageDay


class GithubEndpoints(Enum):
    COPILOT_ENTERPRISE_USAGE = "enterprises/{enterprise}/copilot/usage"
    COPILOT_ENTERPRISE_SEATS = "enterprises/{enterprise}/copilot/billing/seats"


class RemoteError(Exception):
    """Raised when a GitHub API call fails.

    ``status_code`` is None for transport failures and malformed payloads.
    """
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """Async client for the enterprise Copilot endpoints.

    The credential is checked at construction so a missing token fails
    before any request is made.
    """

    NEXT_PATTERN = re.compile(r'<([^>]+)>;\s*rel="next"')
    pagination_page_size_limit = 100
    pagination_header_name = "Link"

    def __init__(
        self,
        config: DashboardConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._headers = self._get_headers(config.require_token(), config.api_version)
        self.base_url = config.api_base_url
        self.enterprise = config.enterprise
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def get_usage(self) -> List[UsageDay]:
        """Fetch daily usage records, oldest first."""
        path = self._resolve_route_params(
            GithubEndpoints.COPILOT_ENTERPRISE_USAGE.value,
            {"enterprise": self.enterprise},
        )
        response = await self._send_api_request("get", path)
        payload = self._json(response, path)
        if not isinstance(payload, list):
            raise RemoteError(f"Expected a list of usage records from {path}")

        try:
            days = [UsageDay.from_api(record) for record in payload]
        except PayloadError as e:
            raise RemoteError(f"Malformed usage record from {path}: {e}") from e

        days.sort(key=lambda usage_day: usage_day.day)
        logger.info(f"Received {len(days)} usage days for enterprise {self.enterprise}")
        return days

    async def get_seats(self) -> Tuple[int, List[SeatAssignment]]:
        """Fetch all seat assignments.

        Returns:
            Tuple of (reported total seats, seat assignments)
        """
        path: Optional[str] = self._resolve_route_params(
            GithubEndpoints.COPILOT_ENTERPRISE_SEATS.value,
            {"enterprise": self.enterprise},
        )
        params: Optional[Dict[str, Any]] = {"per_page": self.pagination_page_size_limit}
        total_seats: Optional[int] = None
        seats: List[SeatAssignment] = []

        while path is not None:
            response = await self._send_api_request("get", path, params=params)
            payload = self._json(response, path)
            if not isinstance(payload, dict) or not isinstance(payload.get("seats"), list):
                raise RemoteError(f"Expected a seats object from {path}")

            if total_seats is None:
                reported = payload.get("total_seats")
                if isinstance(reported, bool) or not isinstance(reported, int):
                    raise RemoteError(f"Missing 'total_seats' in response from {path}")
                if reported < 0:
                    raise RemoteError(f"Negative 'total_seats' in response from {path}")
                total_seats = reported

            try:
                seats.extend(SeatAssignment.from_api(record) for record in payload["seats"])
            except PayloadError as e:
                raise RemoteError(f"Malformed seat record from {path}: {e}") from e

            path = self._next_page(response)
            # The next link already carries the query string
            params = None

        logger.info(
            f"Received {len(seats)} seat assignments (total_seats={total_seats}) "
            f"for enterprise {self.enterprise}"
        )
        return total_seats, seats

    async def _send_api_request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = path if path.startswith("http") else f"{self.base_url}/{path}"
        logger.debug(f"Sending {method.upper()} request to {url}")

        try:
            response = await self._client.request(
                method=method,
                url=url,
                headers=self._headers,
                params=params,
            )
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"HTTP status error for {method} request to {path}: {status_code}")
            raise RemoteError(f"GitHub API error: {status_code}", status_code) from e

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"HTTP error for {method} request to {path}: {e}")
            raise RemoteError(f"GitHub API request failed: {e}") from e

    def _next_page(self, response: httpx.Response) -> Optional[str]:
        link_header = response.headers.get(self.pagination_header_name, "")
        match = self.NEXT_PATTERN.search(link_header)
        return match.group(1) if match else None

    @staticmethod
    def _json(response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(f"Invalid JSON in response from {path}") from e

    @staticmethod
    def _get_headers(token: str, api_version: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
        }

    @staticmethod
    def _resolve_route_params(endpoint_template: str, params: Dict[str, str]) -> str:
        """Replace placeholders such as ``{enterprise}`` in an endpoint template."""
        return endpoint_template.format(**params)

"""
Client for the GitHub Copilot REST API.

Provides typed access to enterprise usage and seat data.
"""

from .github_client import GitHubClient, RemoteError
from .models import SeatAssignment, UsageDay

__all__ = ["GitHubClient", "RemoteError", "SeatAssignment", "UsageDay"]

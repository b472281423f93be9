"""
Shared fixtures: sample GitHub Copilot API payloads.
"""

import copy
from typing import Any, Dict, List

import pytest


usage_response: List[Dict[str, Any]] = [
    {
        "day": f"2024-10-{day:02d}",
        "total_suggestions_count": 100,
        "total_acceptances_count": 30,
        "total_lines_suggested": 250,
        "total_lines_accepted": 80,
        "total_active_users": active,
        "total_chat_acceptances": 5,
        "total_chat_turns": 20,
        "total_active_chat_users": 4,
        "breakdown": [],
    }
    # Deliberately out of order; the client sorts by day
    for day, active in [(13, 75), (7, 50), (8, 50), (9, 50), (10, 60), (11, 75), (12, 75)]
]

seats_page_1: Dict[str, Any] = {
    "total_seats": 3,
    "seats": [
        {
            "created_at": "2024-01-10T16:29:56Z",
            "updated_at": "2024-09-01T00:00:00Z",
            "pending_cancellation_date": None,
            "last_activity_at": "2024-10-12T18:03:44Z",
            "last_activity_editor": "vscode/1.85.1/copilot/1.143.0",
            "assignee": {
                "login": "octocat",
                "id": 1,
                "avatar_url": "https://github.com/images/error/octocat_happy.gif",
                "type": "User",
            },
            "assigning_team": {"id": 1, "name": "Justice League", "slug": "justice-league"},
        },
        {
            "created_at": "2024-02-01T10:00:00Z",
            "updated_at": "2024-02-01T10:00:00Z",
            "pending_cancellation_date": "2024-11-01",
            "last_activity_at": None,
            "last_activity_editor": None,
            "assignee": {
                "login": "hubot",
                "id": 2,
                "avatar_url": "https://github.com/images/error/hubot_happy.gif",
                "type": "User",
            },
        },
    ],
}

seats_page_2: Dict[str, Any] = {
    "total_seats": 3,
    "seats": [
        {
            "created_at": "2024-03-05T08:00:00Z",
            "updated_at": "2024-03-05T08:00:00Z",
            "pending_cancellation_date": None,
            "last_activity_at": "2024-10-13T07:00:00Z",
            "last_activity_editor": "JetBrains-IC/233.11799.241/",
            "assignee": {
                "login": "monalisa",
                "id": 3,
                "avatar_url": "https://github.com/images/error/monalisa_happy.gif",
                "type": "User",
            },
        },
    ],
}


@pytest.fixture
def usage_payload() -> List[Dict[str, Any]]:
    return copy.deepcopy(usage_response)


@pytest.fixture
def seats_pages() -> List[Dict[str, Any]]:
    return [copy.deepcopy(seats_page_1), copy.deepcopy(seats_page_2)]

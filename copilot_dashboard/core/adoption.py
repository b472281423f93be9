"""
Seat adoption classification.

Buckets the share of active seats into an adoption tier.
"""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from .metrics import percentage

STRONG_THRESHOLD = 70
MODERATE_THRESHOLD = 40


@total_ordering
class AdoptionStatus(Enum):
    """Adoption tiers, ordered from weakest to strongest."""
    UNDERUTILIZED = "Underutilized"
    MODERATE = "Moderate"
    STRONG = "Strong"

    @property
    def rank(self) -> int:
        return list(AdoptionStatus).index(self)

    def __lt__(self, other: "AdoptionStatus") -> bool:
        if not isinstance(other, AdoptionStatus):
            return NotImplemented
        return self.rank < other.rank


_ASSESSMENTS = {
    AdoptionStatus.STRONG: (
        "Your team is leveraging Copilot effectively. Most seats are actively being used.",
        "Continue monitoring and share best practices across teams.",
    ),
    AdoptionStatus.MODERATE: (
        "There's room to improve Copilot adoption across your organization.",
        "Consider additional training sessions and identifying adoption blockers.",
    ),
    AdoptionStatus.UNDERUTILIZED: (
        "Copilot seats are significantly underutilized. Many licenses are not being used.",
        "Review seat assignments and implement an adoption campaign.",
    ),
}


@dataclass(frozen=True)
class AdoptionClassification:
    """Adoption ratio (0-100) and its tier."""
    ratio: int
    status: AdoptionStatus

    @property
    def description(self) -> str:
        return _ASSESSMENTS[self.status][0]

    @property
    def recommendation(self) -> str:
        return _ASSESSMENTS[self.status][1]


def classify_adoption(active_users: int, total_seats: int) -> AdoptionClassification:
    """Classify seat adoption.

    Ratio is 0 when there are no seats. Tier boundaries are inclusive:
    70 and above is Strong, 40 to 69 is Moderate.

    Raises:
        ValueError: If either count is negative
    """
    if active_users < 0:
        raise ValueError("active_users cannot be negative")
    if total_seats < 0:
        raise ValueError("total_seats cannot be negative")

    ratio = percentage(active_users, total_seats)

    if ratio >= STRONG_THRESHOLD:
        status = AdoptionStatus.STRONG
    elif ratio >= MODERATE_THRESHOLD:
        status = AdoptionStatus.MODERATE
    else:
        status = AdoptionStatus.UNDERUTILIZED

    return AdoptionClassification(ratio=ratio, status=status)

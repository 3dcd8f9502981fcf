"""
Problem type classification for kiosk tickets
"""
from typing import Optional, Tuple

from kiosk_backend.models.checkin import ProblemCategory

# Checked top to bottom; the first rule with a matching keyword wins.
PROBLEM_RULES: Tuple[Tuple[ProblemCategory, Tuple[str, ...]], ...] = (
    (ProblemCategory.VIRUS, ("virus", "malware", "ransom")),
    (ProblemCategory.TUNE_UP, ("tune",)),
    (ProblemCategory.OTHER, ("battery", "screen", "hardware")),
)

DEFAULT_CATEGORY = ProblemCategory.SOFTWARE


def classify_problem(reason: Optional[str]) -> ProblemCategory:
    """
    Map a free-form visit reason to a RepairShopr problem type

    Args:
        reason: Visit reason or issue text as typed by the visitor

    Returns:
        Matching ProblemCategory, Software when nothing matches
    """
    text = (reason or "").lower()
    for category, keywords in PROBLEM_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY

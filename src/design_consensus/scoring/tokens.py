"""Confidence scoring for design tokens."""

from __future__ import annotations

from ..group.cross_page import DEFAULT_MIN_PAGES, HasEvidence, page_urls
from ..io.models import ConfidenceScore, Level

MAX_DENSITY_BONUS = 0.2
LOW_CUTOFF = 0.3
MEDIUM_CUTOFF = 0.6


def confidence_level(value: float, page_count: int, min_page_threshold: int) -> Level:
    """Bucket a confidence value; too few pages is always ``low``."""
    if page_count < min_page_threshold or value < LOW_CUTOFF:
        return "low"
    if value < MEDIUM_CUTOFF:
        return "medium"
    return "high"


def calculate_token_confidence(
    token: HasEvidence,
    total_pages: int,
    min_page_threshold: int = DEFAULT_MIN_PAGES,
) -> ConfidenceScore:
    """Score a token from its page frequency plus a bonus for repeated use per page.

    The density bonus only applies when the token averages more than one
    occurrence per page and is capped at ``MAX_DENSITY_BONUS``.
    """
    page_count = len(page_urls(token))
    occurrence_count = len(token.evidence)

    raw_confidence = page_count / total_pages if total_pages > 0 else 0.0
    avg_per_page = occurrence_count / page_count if page_count > 0 else 0.0
    density_bonus = min((avg_per_page - 1) / 5, MAX_DENSITY_BONUS) if avg_per_page > 1 else 0.0
    value = min(raw_confidence + density_bonus, 1.0)

    percentage = round(raw_confidence * 100)
    reasoning = (
        f"Appears on {page_count}/{total_pages} pages ({percentage}%) "
        f"with {occurrence_count} total occurrences"
    )
    return ConfidenceScore(
        value=value,
        level=confidence_level(value, page_count, min_page_threshold),
        reasoning=reasoning,
    )

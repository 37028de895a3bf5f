"""Cross-page consensus for any token type carrying evidence."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence, TypeVar

from ..io.models import CrossPageResult, Evidence

DEFAULT_MIN_PAGES = 3


class HasEvidence(Protocol):
    @property
    def evidence(self) -> Sequence[Evidence]: ...


E = TypeVar("E", bound=HasEvidence)


def page_urls(token: HasEvidence) -> frozenset[str]:
    """Return the distinct pages a token was observed on."""
    return frozenset(entry.page_url for entry in token.evidence)


def validate_cross_page(
    tokens: Iterable[E],
    min_page_count: int = DEFAULT_MIN_PAGES,
    *,
    total_pages: int,
) -> list[CrossPageResult[E]]:
    """Measure how widely each token recurs across the crawled pages.

    Confidence is the share of crawled pages the token appears on; a token
    becomes a standard once it is seen on *min_page_count* distinct pages.
    Results are ordered by confidence, highest first, keeping input order
    among ties.
    """
    results: list[CrossPageResult[E]] = []
    for token in tokens:
        pages = page_urls(token)
        confidence = len(pages) / total_pages if total_pages > 0 else 0.0
        results.append(
            CrossPageResult(
                token=token,
                page_urls=pages,
                occurrence_count=len(token.evidence),
                confidence=confidence,
                is_standard=len(pages) >= min_page_count,
            )
        )

    results.sort(key=lambda result: result.confidence, reverse=True)
    return results


def partition_standards(results: Iterable[CrossPageResult[E]]) -> list[CrossPageResult[E]]:
    """Return the results promoted to design standards, in order."""
    return [result for result in results if result.is_standard]

"""End-to-end normalization of per-page design tokens into cross-page standards."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Mapping, TypeVar

from .features.spacing import detect_spacing_scale
from .features.units import (
    DEFAULT_BASE_FONT_SIZE,
    normalize_spacing_values,
    normalize_typography_values,
)
from .group.colors import DEFAULT_COLOR_THRESHOLD, dedupe_colors
from .group.cross_page import DEFAULT_MIN_PAGES, HasEvidence, partition_standards, validate_cross_page
from .io.dtcg import format_all_tokens
from .io.models import (
    CategoryResults,
    ColorResults,
    ColorToken,
    ConfidenceScore,
    CrossPageResult,
    MotionToken,
    NormalizationResult,
    NormalizedValue,
    PageTokens,
    RadiusToken,
    ResultMetadata,
    ShadowToken,
    SpacingResults,
    SpacingToken,
    TypographyResults,
    TypographyToken,
)
from .io.schema import validate_dtcg_output
from .scoring.tokens import calculate_token_confidence

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=HasEvidence)

_DEMOTED_LEVEL = {"high": "medium", "medium": "low", "low": "low"}


@dataclass(frozen=True, slots=True)
class NormalizationOptions:
    min_page_threshold: int = DEFAULT_MIN_PAGES
    base_font_size: float = DEFAULT_BASE_FONT_SIZE
    color_distance_threshold: float = DEFAULT_COLOR_THRESHOLD


@dataclass(slots=True)
class _AggregatedTokens:
    colors: List[ColorToken]
    typography: List[TypographyToken]
    spacing: List[SpacingToken]
    radii: List[RadiusToken]
    shadows: List[ShadowToken]
    motion: List[MotionToken]


def aggregate_tokens(all_page_tokens: Mapping[str, PageTokens]) -> _AggregatedTokens:
    """Flatten every page's tokens into one list per category, in page order."""
    aggregated = _AggregatedTokens([], [], [], [], [], [])
    for tokens in all_page_tokens.values():
        aggregated.colors.extend(tokens.colors)
        aggregated.typography.extend(tokens.typography)
        aggregated.spacing.extend(tokens.spacing)
        aggregated.radii.extend(tokens.radii)
        aggregated.shadows.extend(tokens.shadows)
        aggregated.motion.extend(tokens.motion)
    return aggregated


def normalize_pipeline(
    all_page_tokens: Mapping[str, PageTokens],
    options: NormalizationOptions | None = None,
) -> NormalizationResult:
    """Run aggregation, deduplication, unit normalization, scale detection and
    cross-page validation, then attach the DTCG rendering of the standards.

    ``UnitFormatError`` from a malformed length propagates unchanged. DTCG
    validation problems are logged and never fail the run.
    """
    options = options or NormalizationOptions()
    min_pages = options.min_page_threshold
    total_pages = len(all_page_tokens)

    aggregated = aggregate_tokens(all_page_tokens)
    logger.info(
        "Aggregated %d pages: %d colors, %d typography, %d spacing, %d radii, %d shadows, %d motion",
        total_pages,
        len(aggregated.colors),
        len(aggregated.typography),
        len(aggregated.spacing),
        len(aggregated.radii),
        len(aggregated.shadows),
        len(aggregated.motion),
    )

    clusters = dedupe_colors(aggregated.colors, options.color_distance_threshold)
    typography = normalize_typography_values(aggregated.typography, options.base_font_size)
    spacing = normalize_spacing_values(aggregated.spacing, options.base_font_size)
    scale = detect_spacing_scale(token.normalized_value.pixels for token in spacing)
    logger.info(
        "Detected spacing base unit %dpx (coverage %.2f); %d color clusters",
        scale.base_unit,
        scale.coverage,
        len(clusters),
    )

    def validate(tokens, unit_of=None):
        results = validate_cross_page(tokens, min_pages, total_pages=total_pages)
        return _score(results, total_pages, min_pages, unit_of)

    color_results = validate(clusters)
    typography_results = validate(typography, lambda token: token.normalized_size)
    spacing_results = validate(spacing, lambda token: token.normalized_value)
    radius_results = validate(aggregated.radii)
    shadow_results = validate(aggregated.shadows)
    motion_results = validate(aggregated.motion)

    result = NormalizationResult(
        colors=ColorResults(clusters, partition_standards(color_results), color_results),
        typography=TypographyResults(typography, partition_standards(typography_results), typography_results),
        spacing=SpacingResults(spacing, scale, partition_standards(spacing_results), spacing_results),
        radii=CategoryResults(partition_standards(radius_results), radius_results),
        shadows=CategoryResults(partition_standards(shadow_results), shadow_results),
        motion=CategoryResults(partition_standards(motion_results), motion_results),
        metadata=ResultMetadata(
            total_pages=total_pages,
            min_page_threshold=min_pages,
            base_font_size=options.base_font_size,
            timestamp=datetime.now(timezone.utc).isoformat(),
        ),
    )

    dtcg = format_all_tokens(result)
    validation = validate_dtcg_output(dtcg)
    if not validation.valid:
        logger.warning("DTCG validation warnings: %s", "; ".join(validation.errors))

    logger.info(
        "Standards: %d colors, %d typography, %d spacing, %d radii, %d shadows, %d motion",
        len(result.colors.standards),
        len(result.typography.standards),
        len(result.spacing.standards),
        len(result.radii.standards),
        len(result.shadows.standards),
        len(result.motion.standards),
    )
    return dataclasses.replace(result, dtcg=dtcg)


def _score(
    results: Iterable[CrossPageResult[E]],
    total_pages: int,
    min_pages: int,
    unit_of: Callable[[Any], NormalizedValue] | None = None,
) -> list[CrossPageResult[E]]:
    scored: list[CrossPageResult[E]] = []
    for result in results:
        score = calculate_token_confidence(result.token, total_pages, min_pages)
        if unit_of is not None:
            score = _penalize_unresolved_percent(score, unit_of(result.token))
        scored.append(dataclasses.replace(result, score=score))
    return scored


def _penalize_unresolved_percent(score: ConfidenceScore, value: NormalizedValue) -> ConfidenceScore:
    # Percentages pass through as pixels without a containing block.
    if value.unit != "%":
        return score
    return dataclasses.replace(
        score,
        level=_DEMOTED_LEVEL[score.level],
        reasoning=f"{score.reasoning}; {value.original} is unresolved and read as pixels",
    )

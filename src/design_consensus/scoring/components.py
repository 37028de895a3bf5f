"""Confidence scoring for components aggregated across pages."""

from __future__ import annotations

import json

from ..group.cross_page import DEFAULT_MIN_PAGES
from ..io.models import AggregatedComponent, ComponentConfidenceScore, ComponentVariant
from .tokens import confidence_level

WEIGHTS = {
    "page_frequency": 0.5,
    "variant_consistency": 0.3,
    "density": 0.2,
}
MAX_DENSITY_BONUS = 0.15
EXPECTED_INSTANCES_PER_PAGE = 3


def variant_signature(variant: ComponentVariant) -> str:
    """Return a stable key for the size/emphasis/shape of a variant."""
    return json.dumps(
        {"size": variant.size, "emphasis": variant.emphasis, "shape": variant.shape},
        sort_keys=True,
    )


def calculate_component_confidence(
    component: AggregatedComponent,
    total_pages: int,
    min_page_threshold: int = DEFAULT_MIN_PAGES,
) -> ComponentConfidenceScore:
    """Score a component by page frequency, variant uniformity and instance density."""
    page_count = len(component.page_urls)
    instance_count = len(component.instances)

    page_frequency = page_count / total_pages if total_pages > 0 else 0.0

    expected_instances = page_count * EXPECTED_INSTANCES_PER_PAGE
    density_bonus = (
        min(instance_count / expected_instances, MAX_DENSITY_BONUS) if expected_instances > 0 else 0.0
    )

    # One shared signature is full consistency; n distinct signatures over n
    # instances falls to 1/n.
    unique_variants = len({variant_signature(variant) for variant in component.variants})
    variant_consistency = (
        1 - (max(unique_variants, 1) - 1) / instance_count if instance_count > 0 else 0.0
    )

    value = min(
        WEIGHTS["page_frequency"] * page_frequency
        + WEIGHTS["variant_consistency"] * variant_consistency
        + WEIGHTS["density"] * density_bonus,
        1.0,
    )

    reasoning = (
        f"Found on {page_count}/{total_pages} pages with {instance_count} instances. "
        f"{unique_variants} unique variant(s) (consistency: {variant_consistency * 100:.1f}%)."
    )
    return ComponentConfidenceScore(
        value=value,
        level=confidence_level(value, page_count, min_page_threshold),
        page_count=page_count,
        instance_count=instance_count,
        variant_consistency=variant_consistency,
        reasoning=reasoning,
    )

"""W3C Design Tokens (DTCG) formatting of normalization results."""

from __future__ import annotations

from typing import Any, Callable, Dict, Sequence

from .models import (
    ColorCluster,
    ConfidenceScore,
    CrossPageResult,
    MotionToken,
    NormalizationResult,
    NormalizedSpacingToken,
    NormalizedTypographyToken,
    RadiusToken,
    ShadowToken,
)

EXTENSION_KEY = "design-consensus"
_SPACING_SIZES = ("xs", "sm", "md", "lg", "xl", "xxl")

DTCGToken = Dict[str, Any]
DTCGTokenFile = Dict[str, Any]


def format_color_token(cluster: ColorCluster, score: ConfidenceScore) -> DTCGToken:
    page_count = len({entry.page_url for entry in cluster.evidence})
    return {
        "$type": "color",
        "$value": cluster.canonical,
        "$description": f"Appears on {len(cluster.evidence)} elements across {page_count} pages",
        "$extensions": {
            EXTENSION_KEY: {
                **_score_fields(score),
                "occurrences": cluster.occurrences,
                "variants": list(cluster.variants),
                "evidenceCount": len(cluster.evidence),
            }
        },
    }


def format_typography_token(token: NormalizedTypographyToken, score: ConfidenceScore) -> DTCGToken:
    return {
        "$type": "typography",
        "$value": {
            "fontFamily": token.family,
            "fontSize": token.size,
            "fontWeight": token.weight,
            "lineHeight": token.line_height,
            "letterSpacing": token.letter_spacing,
        },
        "$extensions": {
            EXTENSION_KEY: {
                **_score_fields(score),
                "normalizedSizePixels": token.normalized_size.pixels,
                "evidenceCount": len(token.evidence),
            }
        },
    }


def format_spacing_token(token: NormalizedSpacingToken, score: ConfidenceScore) -> DTCGToken:
    return {
        "$type": "dimension",
        "$value": token.value,
        "$extensions": {
            EXTENSION_KEY: {
                **_score_fields(score),
                "normalizedValuePixels": token.normalized_value.pixels,
                "context": token.context,
                "evidenceCount": len(token.evidence),
            }
        },
    }


def format_radius_token(token: RadiusToken, score: ConfidenceScore) -> DTCGToken:
    return {
        "$type": "dimension",
        "$value": token.value,
        "$extensions": {
            EXTENSION_KEY: {
                **_score_fields(score),
                "normalizedValuePixels": token.value_pixels,
                "evidenceCount": len(token.evidence),
            }
        },
    }


def format_shadow_token(token: ShadowToken, score: ConfidenceScore) -> DTCGToken:
    layers = [
        {
            "offsetX": layer.offset_x,
            "offsetY": layer.offset_y,
            "blur": layer.blur,
            "spread": layer.spread,
            "color": layer.color,
            "inset": layer.inset,
        }
        for layer in token.layers
    ]
    if len(layers) == 1:
        value: Any = layers[0]
    elif layers:
        value = layers
    else:
        value = token.value
    return {
        "$type": "shadow",
        "$value": value,
        "$extensions": {
            EXTENSION_KEY: {
                **_score_fields(score),
                "layers": len(token.layers),
                "evidenceCount": len(token.evidence),
            }
        },
    }


def format_motion_token(token: MotionToken, score: ConfidenceScore) -> DTCGToken:
    token_type = "cubicBezier" if token.property == "easing" else "duration"
    return {
        "$type": token_type,
        "$value": token.value,
        "$extensions": {
            EXTENSION_KEY: {
                **_score_fields(score),
                "property": token.property,
                "durationMs": token.duration_ms,
                "evidenceCount": len(token.evidence),
            }
        },
    }


def token_name(kind: str, index: int, total: int) -> str:
    """Return a positional name such as ``color-1``, ``heading-2`` or ``spacing-md``."""
    if kind == "typography":
        headings = int(total * 0.2)
        subheadings = int(total * 0.5)
        if index < total * 0.2:
            return f"heading-{index + 1}"
        if index < total * 0.5:
            return f"subheading-{index - headings + 1}"
        return f"body-{index - subheadings + 1}"
    if kind == "spacing":
        if index < len(_SPACING_SIZES):
            return f"spacing-{_SPACING_SIZES[index]}"
        return f"spacing-{index + 1}"
    return f"{kind}-{index + 1}"


def format_all_tokens(result: NormalizationResult) -> DTCGTokenFile:
    """Build a DTCG token tree from the standards of *result*.

    Colors keep the frequency order of the clusters, typography is ordered
    largest size first and spacing smallest first. Empty groups are omitted.
    """
    tree: DTCGTokenFile = {}
    _add_group(tree, "colors", "color", result.colors.standards, format_color_token)
    _add_group(
        tree,
        "typography",
        "typography",
        sorted(
            result.typography.standards,
            key=lambda item: item.token.normalized_size.pixels,
            reverse=True,
        ),
        format_typography_token,
    )
    _add_group(
        tree,
        "spacing",
        "spacing",
        sorted(result.spacing.standards, key=lambda item: item.token.normalized_value.pixels),
        format_spacing_token,
    )
    _add_group(tree, "radii", "radius", result.radii.standards, format_radius_token)
    _add_group(tree, "shadows", "shadow", result.shadows.standards, format_shadow_token)
    _add_group(tree, "motion", "motion", result.motion.standards, format_motion_token)
    return tree


def _add_group(
    tree: DTCGTokenFile,
    group: str,
    kind: str,
    results: Sequence[CrossPageResult[Any]],
    formatter: Callable[[Any, ConfidenceScore], DTCGToken],
) -> None:
    if not results:
        return
    tree[group] = {
        token_name(kind, index, len(results)): formatter(item.token, _score_for(item))
        for index, item in enumerate(results)
    }


def _score_for(result: CrossPageResult[Any]) -> ConfidenceScore:
    if result.score is not None:
        return result.score
    confidence = result.confidence
    level = "high" if confidence > 0.6 else "medium" if confidence > 0.3 else "low"
    return ConfidenceScore(
        value=confidence,
        level=level,
        reasoning=f"{result.occurrence_count} occurrences across {len(result.page_urls)} pages",
    )


def _score_fields(score: ConfidenceScore) -> Dict[str, Any]:
    return {"confidence": score.value, "level": score.level}

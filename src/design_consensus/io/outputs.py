"""Output helpers for persisting normalization results."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Tuple

import pandas as pd

from .models import CrossPageResult, NormalizationResult

CATEGORIES: Tuple[str, ...] = ("colors", "typography", "spacing", "radii", "shadows", "motion")


def result_to_payload(result: NormalizationResult) -> Dict[str, Any]:
    """Return *result* as JSON-compatible primitives; sets become sorted lists."""
    return json.loads(json.dumps(asdict(result), default=_json_default))


def write_result(path: Path, result: NormalizationResult) -> Path:
    """Write the full normalization result to *path* as JSON and return the path."""
    path.write_text(json.dumps(result_to_payload(result), indent=2), encoding="utf-8")
    return path


def write_dtcg(path: Path, result: NormalizationResult) -> Path:
    """Write the DTCG token tree of *result* to *path* and return the path."""
    path.write_text(json.dumps(result.dtcg, indent=2), encoding="utf-8")
    return path


def build_metrics(result: NormalizationResult) -> Dict[str, Any]:
    """Summarize a run: page count, per-category totals and the spacing grid."""
    metrics: Dict[str, Any] = {
        "total_pages": result.metadata.total_pages,
        "min_page_threshold": result.metadata.min_page_threshold,
        "base_font_size": result.metadata.base_font_size,
        "color_clusters": len(result.colors.clusters),
        "spacing_base_unit": result.spacing.scale.base_unit,
        "spacing_scale": list(result.spacing.scale.scale),
        "spacing_coverage": result.spacing.scale.coverage,
        "dtcg_tokens": sum(len(group) for group in result.dtcg.values()),
        "timestamp": result.metadata.timestamp,
    }
    for category in CATEGORIES:
        group = getattr(result, category)
        metrics[category] = {"observed": len(group.all), "standards": len(group.standards)}
    return metrics


def write_metrics(path: Path, result: NormalizationResult) -> Path:
    path.write_text(json.dumps(build_metrics(result), indent=2), encoding="utf-8")
    return path


def result_rows(result: NormalizationResult) -> Iterator[Dict[str, Any]]:
    """Yield one flat row per cross-page result across all categories."""
    for category in CATEGORIES:
        for item in getattr(result, category).all:
            yield _row(category, item)


def write_standards_csv(path: Path, result: NormalizationResult) -> Path:
    """Write the promoted standards of every category to *path* as CSV."""
    columns = ["category", "value", "pages", "occurrences", "confidence", "level"]
    with path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(columns)
        for row in result_rows(result):
            if not row["is_standard"]:
                continue
            writer.writerow(
                [
                    row["category"],
                    row["value"],
                    row["pages"],
                    row["occurrences"],
                    f"{row['confidence']:.6f}",
                    row["level"],
                ]
            )
    return path


def write_token_table(path: Path, result: NormalizationResult) -> int:
    """Write every cross-page result to a parquet table and return the row count."""
    df = pd.DataFrame(list(result_rows(result)))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False, engine="pyarrow")
    return len(df)


def token_label(token: Any) -> str:
    """Return the display value of a token from any category."""
    canonical = getattr(token, "canonical", None)
    if canonical is not None:
        return str(canonical)
    if hasattr(token, "family") and hasattr(token, "size"):
        return f"{token.family} {token.size} {token.weight}"
    return str(getattr(token, "value", ""))


def _row(category: str, item: CrossPageResult[Any]) -> Dict[str, Any]:
    return {
        "category": category,
        "value": token_label(item.token),
        "pages": len(item.page_urls),
        "occurrences": item.occurrence_count,
        "confidence": item.confidence,
        "is_standard": item.is_standard,
        "score": item.score.value if item.score else None,
        "level": item.score.level if item.score else None,
    }


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

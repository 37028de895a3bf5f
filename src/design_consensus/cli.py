"""Command-line interface for the design_consensus project."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable

from tqdm import tqdm

from .features.units import DEFAULT_BASE_FONT_SIZE, UnitFormatError
from .group.colors import DEFAULT_COLOR_THRESHOLD
from .group.cross_page import DEFAULT_MIN_PAGES
from .io.models import NormalizationResult, PageTokens, PageTokensError, load_page_tokens
from .io.outputs import (
    build_metrics,
    write_dtcg,
    write_metrics,
    write_result,
    write_standards_csv,
    write_token_table,
)
from .pipeline import NormalizationOptions, normalize_pipeline


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the normalization pipeline."""
    parser = argparse.ArgumentParser(
        description="Collapse per-page design tokens into cross-page design standards."
    )
    parser.add_argument(
        "--input",
        required=True,
        help="JSON file mapping page URLs to tokens, or a directory of per-page JSON files.",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Directory path where outputs will be written.",
    )
    parser.add_argument(
        "--min-pages",
        type=int,
        default=DEFAULT_MIN_PAGES,
        help="Distinct pages a token needs to become a standard (default %(default)s).",
    )
    parser.add_argument(
        "--base-font-size",
        type=float,
        default=DEFAULT_BASE_FONT_SIZE,
        help="Root font size in px for rem/em conversion (default %(default)s).",
    )
    parser.add_argument(
        "--color-threshold",
        type=float,
        default=DEFAULT_COLOR_THRESHOLD,
        help="LAB distance under which colors merge (default %(default)s).",
    )
    parser.add_argument(
        "--debug-clusters",
        nargs="?",
        const=10,
        type=int,
        metavar="N",
        default=0,
        help="Show the top N color clusters with their variants (default 10).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity for pipeline stages.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def read_input(path: Path) -> Dict[str, PageTokens]:
    """Load page tokens from a single JSON file or a directory of page files.

    Each page file in a directory holds ``{"url": ..., "tokens": {...}}``;
    files are read in name order so runs are reproducible.
    """
    if not path.exists():
        raise FileNotFoundError(f"Input path does not exist: {path}")
    if path.is_file():
        return load_page_tokens(_read_json(path))

    pages: Dict[str, Any] = {}
    for page_file in tqdm(sorted(path.glob("*.json")), desc="Loading pages", unit="page", leave=False):
        payload = _read_json(page_file)
        if not isinstance(payload, dict) or "url" not in payload:
            raise PageTokensError(f"{page_file}: expected an object with 'url' and 'tokens'")
        url = str(payload["url"])
        if url in pages:
            raise PageTokensError(f"{page_file}: duplicate page url {url!r}")
        pages[url] = payload.get("tokens") or {}
    return load_page_tokens(pages)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise PageTokensError(f"{path}: invalid JSON ({exc})") from exc


def _write_outputs(result: NormalizationResult, out_dir: Path) -> None:
    """Persist every output file; a failed write is reported and skipped."""
    writers: list[tuple[str, Callable[[Path, NormalizationResult], Any]]] = [
        ("normalized.json", write_result),
        ("tokens.dtcg.json", write_dtcg),
        ("metrics.json", write_metrics),
        ("standards.csv", write_standards_csv),
    ]
    for name, writer in writers:
        path = out_dir / name
        try:
            writer(path, result)
        except OSError as exc:
            print(f"[output] failed to write {path}: {exc}")

    table_path = out_dir / "tokens.parquet"
    try:
        rows = write_token_table(table_path, result)
    except (OSError, ImportError, ValueError) as exc:
        print(f"[output] failed to write {table_path}: {exc}")
    else:
        print(f"[tokens] wrote {rows} rows to {table_path}")


def _print_summary(result: NormalizationResult) -> None:
    metrics = build_metrics(result)
    print(f"Pages: {metrics['total_pages']}")
    print(f"Color clusters: {metrics['color_clusters']}")
    for category in ("colors", "typography", "spacing", "radii", "shadows", "motion"):
        counts = metrics[category]
        print(f"{category.capitalize()}: {counts['standards']} standards of {counts['observed']} observed")
    print(
        f"Spacing base unit: {metrics['spacing_base_unit']}px "
        f"(coverage {metrics['spacing_coverage'] * 100:.1f}%)"
    )
    print(f"Min pages: {metrics['min_page_threshold']}")


def _debug_clusters(result: NormalizationResult, limit: int) -> None:
    """Print the most frequent color clusters and their merged variants."""
    if limit <= 0:
        return
    if not result.colors.all:
        print("[clusters] no color clusters")
        return
    for index, item in enumerate(result.colors.all[:limit], start=1):
        cluster = item.token
        variants = ", ".join(dict.fromkeys(cluster.variants))
        level = item.score.level if item.score else "n/a"
        print(
            f"  {index}. {cluster.canonical} x{cluster.occurrences} "
            f"pages={len(item.page_urls)} conf={item.confidence:.3f} ({level}) -> {variants}"
        )


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        pages = read_input(Path(args.input))
    except (FileNotFoundError, PageTokensError) as exc:
        print(f"[error] {exc}")
        return 1
    print(f"[pages] loaded {len(pages)} pages")

    options = NormalizationOptions(
        min_page_threshold=args.min_pages,
        base_font_size=args.base_font_size,
        color_distance_threshold=args.color_threshold,
    )
    try:
        result = normalize_pipeline(pages, options)
    except UnitFormatError as exc:
        print(f"[error] normalization failed: {exc}")
        return 1

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    _write_outputs(result, out_dir)
    _print_summary(result)

    if args.debug_clusters:
        _debug_clusters(result, args.debug_clusters)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

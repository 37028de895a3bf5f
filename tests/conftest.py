"""Shared fixtures for the normalization tests."""

import sys
from pathlib import Path

import pytest


def ensure_src_on_path() -> None:
    root = Path(__file__).resolve().parent.parent
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


ensure_src_on_path()

from design_consensus.io.models import (  # noqa: E402
    ColorToken,
    Evidence,
    PageTokens,
    SpacingToken,
    TypographyToken,
)


def make_evidence(page_url: str, selector: str = "body", count: int = 1) -> tuple[Evidence, ...]:
    return tuple(
        Evidence(
            page_url=page_url,
            selector=f"{selector}:nth-child({index + 1})",
            timestamp="2024-01-01T00:00:00Z",
            computed_styles={},
        )
        for index in range(count)
    )


def color(value: str, *pages: str) -> ColorToken:
    evidence = tuple(entry for page in pages for entry in make_evidence(page))
    return ColorToken(value=value, original_value=value, evidence=evidence)


@pytest.fixture
def three_page_tokens() -> dict[str, PageTokens]:
    """Three pages sharing a near-duplicate blue pair, with red on one page only."""
    pages = {}
    for index, url in enumerate(
        ["https://example.com/", "https://example.com/about", "https://example.com/pricing"]
    ):
        tokens = PageTokens(
            colors=[color("#1a73e8", url), color("#1a74e8", url)],
            typography=[
                TypographyToken(family="Inter", size="1rem", size_pixels=16, evidence=make_evidence(url, "p")),
            ],
            spacing=[
                SpacingToken(value="8px", value_pixels=8, context="padding", evidence=make_evidence(url, "div")),
                SpacingToken(value="1rem", value_pixels=16, context="margin", evidence=make_evidence(url, "section")),
            ],
        )
        if index == 0:
            tokens.colors.append(color("#ff0000", url))
        pages[url] = tokens
    return pages

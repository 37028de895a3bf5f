"""CSS length normalization to pixels."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable

from ..io.models import (
    NormalizedSpacingToken,
    NormalizedTypographyToken,
    NormalizedValue,
    SpacingToken,
    TypographyToken,
    token_fields,
)

DEFAULT_BASE_FONT_SIZE = 16

_LENGTH_RE = re.compile(r"^(-?(?:\d+(?:\.\d+)?|\.\d+))(px|rem|em|pt|%)$")
_RELATIVE_UNITS = {"rem", "em"}
_PIXEL_PLACES = Decimal("0.01")
# Enough digits to quantize any finite float to two places.
_PIXEL_PRECISION = 400


class UnitFormatError(ValueError):
    """Raised for a length string that is not a finite ``<number><unit>``."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid value format: {value!r}")
        self.value = value


def normalize_unit(
    value: str,
    base_font_size: float = DEFAULT_BASE_FONT_SIZE,
    parent_font_size: float | None = None,
) -> NormalizedValue:
    """Convert a CSS length such as ``1.5rem`` or ``12pt`` to pixels.

    ``%`` is passed through unchanged since it cannot be resolved without
    layout context. ``em`` resolves against *parent_font_size* when given,
    otherwise against *base_font_size*.
    """
    if not isinstance(value, str):
        raise UnitFormatError(str(value))
    match = _LENGTH_RE.match(value)
    if match is None:
        raise UnitFormatError(value)

    number_text, unit = match.groups()
    number = float(number_text)

    if unit == "rem":
        pixels = number * base_font_size
    elif unit == "em":
        pixels = number * (parent_font_size if parent_font_size is not None else base_font_size)
    elif unit == "pt":
        pixels = number * 96 / 72
    else:
        pixels = number
    if not math.isfinite(pixels):
        raise UnitFormatError(value)

    return NormalizedValue(
        pixels=_round_pixels(pixels),
        original=value,
        unit=unit,  # type: ignore[arg-type]
        base_font_size=base_font_size if unit in _RELATIVE_UNITS else None,
    )


def normalize_spacing_values(
    tokens: Iterable[SpacingToken],
    base_font_size: float = DEFAULT_BASE_FONT_SIZE,
) -> list[NormalizedSpacingToken]:
    """Return spacing tokens with a pixel-normalized copy of their value."""
    return [
        NormalizedSpacingToken(
            **token_fields(token),
            normalized_value=normalize_unit(token.value, base_font_size),
        )
        for token in tokens
    ]


def normalize_typography_values(
    tokens: Iterable[TypographyToken],
    base_font_size: float = DEFAULT_BASE_FONT_SIZE,
) -> list[NormalizedTypographyToken]:
    """Return typography tokens with a pixel-normalized copy of their size."""
    return [
        NormalizedTypographyToken(
            **token_fields(token),
            normalized_size=normalize_unit(token.size, base_font_size),
        )
        for token in tokens
    ]


def _round_pixels(pixels: float) -> float:
    # Decimal over repr keeps 2.675 at 2.68 instead of the binary 2.67.
    with localcontext() as ctx:
        ctx.prec = _PIXEL_PRECISION
        return float(Decimal(repr(pixels)).quantize(_PIXEL_PLACES, rounding=ROUND_HALF_UP))

"""Spacing scale inference from observed pixel values."""

from __future__ import annotations

import math
from functools import reduce
from typing import Iterable, Sequence

from ..io.models import SpacingScale

COMMON_BASES: tuple[int, ...] = (4, 8, 6, 10)
MIN_COMMON_BASE_COVERAGE = 0.5
_MIN_VALUES_FOR_COMMON_BASE = 3


def detect_spacing_scale(values: Iterable[float]) -> SpacingScale:
    """Infer the base unit and scale of a set of spacing values in pixels.

    The GCD of the rounded values is used unless it collapses to 1, in which
    case the best-covering common base (4, 8, 6, 10) is adopted when at least
    half of the values are multiples of it. A one-off outlier therefore does
    not destroy an otherwise regular 4px grid.
    """
    rounded = [_round_half_up(value) for value in values]
    positives = [value for value in rounded if value > 0]
    if not positives:
        return SpacingScale(base_unit=1, scale=[], coverage=0.0)

    base_unit = reduce(math.gcd, positives[1:], positives[0])

    if base_unit == 1 and len(positives) > _MIN_VALUES_FOR_COMMON_BASE:
        best_base, best_coverage = 1, 0.0
        for base in COMMON_BASES:
            coverage = _coverage(positives, base)
            if coverage > best_coverage:
                best_base, best_coverage = base, coverage
        if best_coverage >= MIN_COMMON_BASE_COVERAGE:
            base_unit = best_base

    scale = [value for value in sorted(set(positives)) if value % base_unit == 0]
    return SpacingScale(
        base_unit=base_unit,
        scale=scale,
        coverage=_coverage(positives, base_unit),
    )


def _coverage(values: Sequence[int], base: int) -> float:
    if not values:
        return 0.0
    return sum(1 for value in values if value % base == 0) / len(values)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

"""Color parsing and perceptual distance utilities."""

from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np
from PIL import ImageColor

RGB = tuple[int, int, int]


def parse_color(value: str) -> RGB | None:
    """Return the RGB triple for a CSS color string, or ``None`` if unparseable.

    Accepts the forms Pillow understands: ``#rgb``, ``#rrggbb``, ``#rrggbbaa``,
    ``rgb()``, ``rgba()``, ``hsl()`` and named colors. Alpha is ignored.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = ImageColor.getrgb(value.strip())
    except ValueError:
        return None
    return (int(parsed[0]), int(parsed[1]), int(parsed[2]))


def rgb_to_lab(colors: Sequence[RGB]) -> np.ndarray:
    """Return an ``(N, 3)`` float array of CIE L*a*b* values for *colors*."""
    if len(colors) == 0:
        return np.empty((0, 3), dtype=np.float32)

    rgb = np.asarray(colors, dtype=np.float32).reshape(-1, 1, 3) / 255.0
    lab = cv2.cvtColor(rgb, cv2.COLOR_RGB2Lab)
    return lab.reshape(-1, 3).astype(np.float64)


def lab_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two LAB vectors (CIE76 delta E)."""
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def delta_e(color_a: str, color_b: str) -> float | None:
    """Return the LAB distance between two CSS colors, ``None`` if either is invalid."""
    rgb_a = parse_color(color_a)
    rgb_b = parse_color(color_b)
    if rgb_a is None or rgb_b is None:
        return None
    lab = rgb_to_lab([rgb_a, rgb_b])
    return lab_distance(lab[0], lab[1])

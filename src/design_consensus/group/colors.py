"""Perceptual deduplication of color tokens."""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from ..features.color import lab_distance, parse_color, rgb_to_lab
from ..io.models import ColorCluster, ColorToken

logger = logging.getLogger(__name__)

# Conventional "just noticeable difference" in LAB space.
DEFAULT_COLOR_THRESHOLD = 2.3


def dedupe_colors(
    colors: Iterable[ColorToken],
    threshold: float = DEFAULT_COLOR_THRESHOLD,
) -> list[ColorCluster]:
    """Merge perceptually similar colors into clusters.

    Colors are visited in input order and compared against the canonical
    (founding) color of each existing cluster; the first cluster within
    *threshold* absorbs the color. Unparseable colors are skipped. Clusters
    are returned most frequent first.
    """
    parsed: list[tuple[ColorToken, tuple[int, int, int]]] = []
    for token in colors:
        rgb = parse_color(token.value)
        if rgb is None:
            logger.debug("Skipping unparseable color %r", token.value)
            continue
        parsed.append((token, rgb))

    if not parsed:
        return []

    labs = rgb_to_lab([rgb for _, rgb in parsed])
    clusters: list[ColorCluster] = []
    canonical_labs: list[np.ndarray] = []

    for (token, _), lab in zip(parsed, labs):
        match: ColorCluster | None = None
        for cluster, canonical_lab in zip(clusters, canonical_labs):
            if lab_distance(lab, canonical_lab) < threshold:
                match = cluster
                break

        if match is not None:
            match.variants.append(token.value)
            match.evidence.extend(token.evidence)
            match.occurrences += 1
        else:
            clusters.append(
                ColorCluster(
                    canonical=token.value,
                    variants=[token.value],
                    evidence=list(token.evidence),
                    occurrences=1,
                )
            )
            canonical_labs.append(lab)

    logger.debug("Clustered %d colors into %d clusters", len(parsed), len(clusters))
    return sorted(clusters, key=lambda cluster: cluster.occurrences, reverse=True)

"""First-fit greedy clustering with a caller-supplied distance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class Group(Generic[T]):
    """A cluster whose representative is its first member and never changes."""

    representative: T
    members: List[T] = field(default_factory=list)


def fuzzy_groups(
    items: Iterable[T],
    distance: Callable[[T, T], float],
    threshold: float,
) -> list[Group[T]]:
    """Return groups built by scanning *items* in order.

    Each item joins the first existing group whose representative lies
    strictly within *threshold*, otherwise it founds a new group.
    """
    groups: list[Group[T]] = []
    for item in items:
        for group in groups:
            if distance(item, group.representative) < threshold:
                group.members.append(item)
                break
        else:
            groups.append(Group(representative=item, members=[item]))
    return groups


def fuzzy_cluster(
    items: Iterable[T],
    distance: Callable[[T, T], float],
    threshold: float,
) -> list[list[T]]:
    """Cluster *items* and return member lists in first-appearance order."""
    return [group.members for group in fuzzy_groups(items, distance, threshold)]

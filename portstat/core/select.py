"""Top-N selection by remaining port headroom."""

from typing import Callable, Iterable, TypeVar

from portstat.lib.models import PortCounter

T = TypeVar("T")


def by_available_ports(counter: PortCounter) -> int:
    """Ranking key: fewest available ports first."""
    return counter.available_ports


def select_top_n(
    items: Iterable[T],
    n: int,
    key: Callable[[T], int] = by_available_ports,
) -> list[T]:
    """
    Pick the n items with the smallest key, ascending.

    Items with equal keys keep their input order, so the tuple discovered
    first wins a tie.

    Args:
        items: Items to rank
        n: Number of items wanted, clamped to len(items)
        key: Ranking key

    Returns:
        Up to n items sorted ascending by key
    """
    if n <= 0:
        return []
    return sorted(items, key=key)[:n]

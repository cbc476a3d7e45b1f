from __future__ import annotations

from typing import List, Union

ELLIPSIS = "..."

PageMarker = Union[int, str]


def pagination_range(current: int, total: int, delta: int = 2) -> List[PageMarker]:
    """Page buttons to show for a 1-based ``current`` page out of ``total``.

    The first and last pages are always present; pages further than
    ``delta`` from the current one collapse into ``"..."``.

    >>> pagination_range(5, 10)
    [1, '...', 3, 4, 5, 6, 7, '...', 10]
    >>> pagination_range(1, 3)
    [1, 2, 3]
    """
    total = max(1, int(total))
    current = min(max(1, int(current)), total)
    delta = max(0, int(delta))

    markers: List[PageMarker] = [1]
    left = max(2, current - delta)
    right = min(total - 1, current + delta)

    if left > 2:
        markers.append(ELLIPSIS)
    markers.extend(range(left, right + 1))
    if right < total - 1:
        markers.append(ELLIPSIS)
    if total > 1:
        markers.append(total)
    return markers


def page_count(row_count: int, page_size: int) -> int:
    """Number of pages, never less than one so "Page 1 of 1" shows for empty tables."""
    size = max(1, int(page_size))
    return max(1, -(-max(0, int(row_count)) // size))

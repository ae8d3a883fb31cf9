"""
Indices (precomputed lookup tables)
===================================

Simple indices (maps from value -> sorted list of row IDs) make the common
filters fast.

Example:
- `by_type["TORNADO"]` gives the sorted row IDs of every TORNADO record.
- `date_to_ids[19960101]` gives IDs for all events that began on 1996-01-01.
- `undated_ids` holds rows whose BGN_DATE could not be parsed.

Sorted ID lists allow fast intersections using the two-pointer technique.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List
from bisect import bisect_left
from .models import StormEvent

@dataclass
class Indices:
    """Container of precomputed indices for fast filtering."""
    by_type: Dict[str, List[int]]
    date_to_ids: Dict[int, List[int]]
    dates_sorted: List[int]
    undated_ids: List[int]

def build_indices(events: List[StormEvent]) -> Indices:
    """Build indices from the loaded dataset."""
    by_type: Dict[str, List[int]] = {}
    date_to_ids: Dict[int, List[int]] = {}
    undated_ids: List[int] = []

    for e in events:
        by_type.setdefault(e.event_type, []).append(e.event_id)
        key = e.date_key()
        if key is None:
            undated_ids.append(e.event_id)
        else:
            date_to_ids.setdefault(key, []).append(e.event_id)

    for d in (by_type, date_to_ids):
        for k in d:
            d[k].sort()

    return Indices(by_type=by_type, date_to_ids=date_to_ids,
                   dates_sorted=sorted(date_to_ids.keys()), undated_ids=sorted(undated_ids))

def since_ids(idx: Indices, date_key: int) -> List[int]:
    """Return sorted event IDs whose begin date key is >= `date_key`.

    Binary search on `dates_sorted`, then merge the ID lists. Undated rows
    never qualify.
    """
    lo = bisect_left(idx.dates_sorted, date_key)
    out: List[int] = []
    for k in idx.dates_sorted[lo:]:
        out.extend(idx.date_to_ids[k])
    out.sort()
    return out

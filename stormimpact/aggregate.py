"""
Grouped Top-N aggregation
=========================

Works on plain (event_type, value) pairs so that health and economic impact
go through exactly the same code:

    [("A", 10), ("B", 30), ("A", 5)]  ->  group_sum  ->  [B=30, A=15]

Labels are grouped by exact string; "Tornado" and "TORNADO" stay separate.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Tuple
import math

from .dsa import merge_sort
from .models import ImpactRow


def group_sum(pairs: Iterable[Tuple[str, Optional[float]]]) -> List[ImpactRow]:
    """Sum values per label, keeping first-encountered label order.

    Missing (None/NaN) values add nothing.
    """
    totals: Dict[str, float] = {}
    for label, value in pairs:
        v = 0.0 if value is None else float(value)
        if math.isnan(v):
            v = 0.0
        totals[label] = totals.get(label, 0.0) + v
    return [ImpactRow(event_type=k, total=v) for k, v in totals.items()]


def top_n(pairs: Iterable[Tuple[str, Optional[float]]], n: int = 10) -> List[ImpactRow]:
    """Return the `n` labels with the largest sums, descending; ties keep first-seen order."""
    if n <= 0:
        raise ValueError("n must be a positive integer")
    ranked = merge_sort(group_sum(pairs), key=lambda r: r.total, reverse=True)
    return ranked[:n]

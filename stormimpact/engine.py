"""
Core engine
===========

The engine works like a tiny offline analytics engine:

1) Load dataset -> list of StormEvent records (immutable)
2) Build indices -> fast lookup tables
3) Maintain a *current selection* of event IDs (QueryState.active_ids)
4) Apply the date / event-type filters to update the selection
5) Rank event types by a summed impact metric over the selection

`analyze()` is the one-pass report: date filter from the config, then the
health and economic top-N lists. It reads the full dataset and leaves the
interactive selection alone, so running it twice gives the same answer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional
import csv
import json
import logging

from .aggregate import top_n
from .config import AnalysisConfig
from .damage import is_zeroed
from .dsa import intersect_sorted
from .indices import Indices, since_ids
from .models import METRICS, ImpactRow, StormEvent

logger = logging.getLogger(__name__)


@dataclass
class QueryState:
    """Holds the current working set of event IDs (like a view)."""
    active_ids: List[int]


@dataclass
class DataQuality:
    """Counts of the cells that were silently normalized rather than rejected."""
    rows_loaded: int
    rows_selected: int
    unparseable_dates: int
    zeroed_property: int
    zeroed_crop: int
    missing: Dict[str, int]


@dataclass
class ImpactReport:
    """Result of one `analyze()` run."""
    since: date
    rows_in_scope: int
    health: List[ImpactRow]
    economic: List[ImpactRow]
    quality: DataQuality


@dataclass
class ImpactEngine:
    """Storm impact engine.

    The engine stores:
    - events: all StormEvent records
    - idx: precomputed indices for fast filters
    - state: current selection (list of IDs)

    Filters update `state.active_ids` only.
    """
    events: List[StormEvent]
    idx: Indices
    config: AnalysisConfig = field(default_factory=AnalysisConfig)
    dataset_path: Optional[str] = None
    state: QueryState = field(init=False)

    # Stacks for undo/redo (store snapshots of active_ids)
    _undo: List[List[int]] = field(default_factory=list, init=False)
    _redo: List[List[int]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.state = QueryState(active_ids=list(range(len(self.events))))

    # ---------------- History (Stacks) ----------------
    def _push_history(self) -> None:
        self._undo.append(self.state.active_ids[:])
        self._redo.clear()

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.state.active_ids[:])
        self.state.active_ids = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.state.active_ids[:])
        self.state.active_ids = self._redo.pop()
        return True

    # ---------------- Filters ----------------
    def reset(self) -> None:
        """Reset selection to all events."""
        self._push_history()
        self.state = QueryState(active_ids=list(range(len(self.events))))

    def filter_since(self, cutoff: date) -> int:
        """Keep events that began on or after `cutoff`.

        Events with an unparseable begin date are dropped. Returns how many
        of those were in the selection.
        """
        self._push_history()
        current = sorted(self.state.active_ids)
        dropped = len(intersect_sorted(current, self.idx.undated_ids))
        if dropped:
            logger.warning(f"Dropped {dropped} events with an unparseable begin date")
        ids = since_ids(self.idx, _date_key(cutoff))
        self.state.active_ids = intersect_sorted(current, ids)
        return dropped

    def filter_type(self, event_type: str) -> None:
        """Filter current selection to one exact event-type label."""
        self._push_history()
        ids = self.idx.by_type.get(event_type, [])
        self.state.active_ids = intersect_sorted(sorted(self.state.active_ids), ids)

    # ---------------- Output operations ----------------
    def _events_from_ids(self, ids: List[int]) -> List[StormEvent]:
        return [self.events[i] for i in ids]

    def _top(self, ids: List[int], metric: str, n: int) -> List[ImpactRow]:
        m = metric.lower().strip()
        if m not in METRICS:
            raise ValueError(f"metric must be one of: {', '.join(METRICS)}")
        return top_n(((e.event_type, e.metric(m)) for e in self._events_from_ids(ids)), n)

    def top(self, metric: str, n: Optional[int] = None) -> List[ImpactRow]:
        """Rank event types in the current selection by a summed metric."""
        return self._top(self.state.active_ids, metric, self.config.top_n if n is None else n)

    def summary(self, ids: Optional[List[int]] = None) -> DataQuality:
        """Data-quality counters over `ids` (default: current selection)."""
        ids = self.state.active_ids if ids is None else ids
        rows = self._events_from_ids(ids)
        missing = {"fatalities": 0, "injuries": 0, "prop_dmg": 0, "crop_dmg": 0}
        zeroed_prop = zeroed_crop = undated = 0
        for e in rows:
            if e.begin_date is None:
                undated += 1
            if is_zeroed(e.prop_dmg, e.prop_dmg_exp):
                zeroed_prop += 1
            if is_zeroed(e.crop_dmg, e.crop_dmg_exp):
                zeroed_crop += 1
            for name in missing:
                if getattr(e, name) is None:
                    missing[name] += 1
        if zeroed_prop or zeroed_crop:
            logger.warning(
                f"Unrecognized damage scale codes zeroed {zeroed_prop} property "
                f"and {zeroed_crop} crop damage values"
            )
        return DataQuality(
            rows_loaded=len(self.events),
            rows_selected=len(rows),
            unparseable_dates=undated,
            zeroed_property=zeroed_prop,
            zeroed_crop=zeroed_crop,
            missing=missing,
        )

    def analyze(self) -> ImpactReport:
        """Date filter + health/economic top-N over the full dataset."""
        cutoff = self.config.since
        ids = since_ids(self.idx, _date_key(cutoff))
        # damage/missing counts cover ranked rows; undated counts cover the file
        quality = self.summary(ids)
        quality.unparseable_dates = len(self.idx.undated_ids)
        if quality.unparseable_dates:
            logger.warning(f"Dropped {quality.unparseable_dates} events with an unparseable begin date")
        logger.info(f"{len(ids)} of {len(self.events)} events began on or after {cutoff.isoformat()}")
        return ImpactReport(
            since=cutoff,
            rows_in_scope=len(ids),
            health=self._top(ids, "health", self.config.top_n),
            economic=self._top(ids, "economic", self.config.top_n),
            quality=quality,
        )

    def export_csv(self, path: str, rows: List[ImpactRow]) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["rank", "event_type", "total"])
            for rank, r in enumerate(rows, start=1):
                w.writerow([rank, r.event_type, r.total])

    def export_json(self, path: str, rows: List[ImpactRow]) -> None:
        """Export ranked rows to a JSON list of {rank, event_type, total}."""
        payload = [
            {"rank": rank, "event_type": r.event_type, "total": r.total}
            for rank, r in enumerate(rows, start=1)
        ]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)


# ---------------- Helpers ----------------
def _date_key(d: date) -> int:
    return d.year * 10000 + d.month * 100 + d.day

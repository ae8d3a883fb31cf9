"""
Data model (StormEvent)
=======================

Each row of the NOAA storm events file is converted into a `StormEvent`.
Records are immutable (`frozen=True`): filters select IDs, they never edit
the loaded data, and the impact metrics are derived on demand.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .damage import normalize_damage

METRICS = ("health", "economic", "property", "crop", "fatalities", "injuries")


@dataclass(frozen=True)
class StormEvent:
    """Immutable record for one storm-event row."""
    event_id: int
    begin_date_raw: str
    begin_date: Optional[date]
    event_type: str
    fatalities: Optional[int]
    injuries: Optional[int]
    prop_dmg: Optional[float]
    prop_dmg_exp: str
    crop_dmg: Optional[float]
    crop_dmg_exp: str

    def property_damage(self) -> float:
        return normalize_damage(self.prop_dmg, self.prop_dmg_exp)

    def crop_damage(self) -> float:
        return normalize_damage(self.crop_dmg, self.crop_dmg_exp)

    def economic_impact(self) -> float:
        """Property + crop damage in US$."""
        return self.property_damage() + self.crop_damage()

    def health_impact(self) -> int:
        """Fatalities + injuries (missing counts as 0)."""
        return (self.fatalities or 0) + (self.injuries or 0)

    def date_key(self) -> Optional[int]:
        """Return an integer YYYYMMDD key for the begin date, or None if unparsed."""
        d = self.begin_date
        if d is None:
            return None
        return d.year * 10000 + d.month * 100 + d.day

    def metric(self, name: str) -> float:
        n = name.lower().strip()
        if n == "health":
            return self.health_impact()
        if n == "economic":
            return self.economic_impact()
        if n == "property":
            return self.property_damage()
        if n == "crop":
            return self.crop_damage()
        if n == "fatalities":
            return self.fatalities or 0
        if n == "injuries":
            return self.injuries or 0
        raise ValueError(f"metric must be one of: {', '.join(METRICS)}")


@dataclass(frozen=True)
class ImpactRow:
    """One aggregate row: an event-type label and its summed metric."""
    event_type: str
    total: float

"""
Analysis configuration
======================

Defaults reproduce the published analysis: events from 1996-01-01 onwards
(the year NOAA started recording all event types) and the top 10 groups per
metric. The CLI overrides these from its flags.
"""

from dataclasses import dataclass
from datetime import date


@dataclass
class AnalysisConfig:
    """Knobs for one run of the impact analysis."""
    # Keep events that began on or after this date
    since: date = date(1996, 1, 1)

    # How many event types to keep per ranking
    top_n: int = 10

    # Format of the leading token of BGN_DATE
    date_format: str = "%m/%d/%Y"

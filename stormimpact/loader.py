"""
Dataset loader (CSV/XLSX -> StormEvent list)
============================================

This module reads the NOAA storm events export and converts each row into a
`StormEvent` object.

Key ideas:
- Column names are matched after stripping whitespace, and case-insensitively
  as a fallback, because exports vary.
- A missing required column is fatal: nothing is aggregated without the schema.
- Bad cells are not fatal: conversion helpers return None, and the metrics
  treat None as 0.
- The loader returns a list of immutable records and never edits the file.
"""

from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional
import logging
import os
import re

import pandas as pd

from .models import StormEvent

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "BGN_DATE", "EVTYPE", "FATALITIES", "INJURIES",
    "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP",
)


class MissingColumnError(KeyError):
    """Raised when the input file lacks a required column."""

    def __init__(self, column: str, available: List[str]) -> None:
        super().__init__(column)
        self.column = column
        self.available = available

    def __str__(self) -> str:
        return f"Missing required column {self.column!r}. Available={self.available}"


def _to_int(x) -> Optional[int]:
    """Convert a cell to int, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: return int(float(x))
    except (TypeError, ValueError): return None

def _to_float(x) -> Optional[float]:
    """Convert a cell to float, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: return float(x)
    except (TypeError, ValueError): return None

def _to_str(x) -> str:
    if pd.isna(x): return ""
    return str(x).strip()

def _to_label(x) -> str:
    """EVTYPE text exactly as written in the file (no strip, no case change)."""
    if pd.isna(x): return ""
    return str(x)

def _to_code(x) -> str:
    # Excel hands digit scale codes back as numbers (3 or 3.0)
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    return _to_str(x)

def _to_date(x, fmt: str) -> Optional[date]:
    """Parse the leading date token of a cell ("4/18/1950 0:00:00" -> 1950-04-18).

    Real date cells from .xlsx files arrive as datetime/Timestamp and are used as is.
    """
    if isinstance(x, datetime):
        return None if pd.isna(x) else x.date()
    if isinstance(x, date):
        return x
    s = _to_str(x)
    if not s:
        return None
    try:
        return datetime.strptime(s.split()[0], fmt).date()
    except ValueError:
        return None

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _col(df: pd.DataFrame, name: str) -> str:
    cols = list(df.columns)
    if name in cols:
        return name
    norm_map = {_norm(c): c for c in cols}
    found = norm_map.get(_norm(name))
    if found is None:
        raise MissingColumnError(name, cols)
    return found


def read_table(path: str) -> pd.DataFrame:
    """Read a .csv (compression inferred) or .xlsx file.

    CSV columns are all read as text. Excel cells keep their native types so
    date cells stay dates. Only empty cells count as missing: labels such as
    "NA" or "NULL" are kept as written.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    if path.lower().endswith((".xlsx", ".xlsm")):
        df = pd.read_excel(path, engine="openpyxl", dtype=object,
                           keep_default_na=False, na_values=[""])
    else:
        df = pd.read_csv(path, dtype=str, low_memory=False,
                         keep_default_na=False, na_values=[""])
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df


def events_from_frame(df: pd.DataFrame, date_format: str = "%m/%d/%Y") -> List[StormEvent]:
    """Convert a raw storm-events DataFrame to StormEvent records.

    Raises:
        MissingColumnError: if any of REQUIRED_COLUMNS is absent.
    """
    cols = [_col(df, name) for name in REQUIRED_COLUMNS]

    events: List[StormEvent] = []
    rows = df[cols].itertuples(index=False, name=None)
    for i, (bgn, evtype, fat, inj, pdmg, pexp, cdmg, cexp) in enumerate(rows):
        events.append(StormEvent(
            event_id=i,
            begin_date_raw=_to_str(bgn),
            begin_date=_to_date(bgn, date_format),
            event_type=_to_label(evtype),
            fatalities=_to_int(fat),
            injuries=_to_int(inj),
            prop_dmg=_to_float(pdmg),
            prop_dmg_exp=_to_code(pexp),
            crop_dmg=_to_float(cdmg),
            crop_dmg_exp=_to_code(cexp),
        ))
    return events


def load_storm_events(path: str, date_format: str = "%m/%d/%Y") -> List[StormEvent]:
    """Load the NOAA storm events export from `path`."""
    df = read_table(path)
    logger.info(f"Read {len(df)} rows and {len(df.columns)} columns from {path}")
    return events_from_frame(df, date_format=date_format)

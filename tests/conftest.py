"""Shared fixtures: a small storm events file in the NOAA export layout."""

import pytest
import pandas as pd


STORM_ROWS = [
    # BGN_DATE, EVTYPE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP
    ("4/18/1950 0:00:00", "TORNADO", 50, 500, 25.0, "K", 0.0, ""),
    ("12/31/1995 0:00:00", "FLOOD", 100, 100, 1.0, "B", 0.0, ""),
    ("1/1/1996 0:00:00", "FLOOD", 2, 0, 2.5, "M", 10.0, "K"),
    ("06/15/2005 0:00:00", "TORNADO", 10, 90, 100.0, "K", 0.0, ""),
    ("08/29/2005 0:00:00", "HURRICANE", 15, 5, 3.0, "B", 5.0, "m"),
    ("07/04/2010 0:00:00", "HEAT", 30, 10, 0.0, "", 0.0, ""),
    ("07/05/2010 0:00:00", "heat", 1, 1, None, "", None, ""),
    ("NOTADATE", "TORNADO", 1000, 1000, 9.0, "B", 0.0, ""),
    ("03/03/2001 0:00:00", "HAIL", 0, 0, 5.0, "?", 7.0, "3"),
]

COLUMNS = ["BGN_DATE", "EVTYPE", "FATALITIES", "INJURIES",
           "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP"]


@pytest.fixture
def storm_frame():
    df = pd.DataFrame(STORM_ROWS, columns=COLUMNS)
    df.insert(0, "STATE__", 1.0)
    return df


@pytest.fixture
def storm_csv(tmp_path, storm_frame):
    path = tmp_path / "storm.csv"
    storm_frame.to_csv(path, index=False)
    return path

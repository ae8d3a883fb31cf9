"""
Unit tests for the engine: date filter, rankings, data-quality summary, exports.
"""

import csv
import json
from datetime import date

import pytest

from stormimpact.config import AnalysisConfig
from stormimpact.engine import ImpactEngine
from stormimpact.indices import build_indices, since_ids
from stormimpact.loader import events_from_frame


@pytest.fixture
def engine(storm_frame):
    events = events_from_frame(storm_frame)
    return ImpactEngine(events=events, idx=build_indices(events))


def _labels(rows):
    return [(r.event_type, r.total) for r in rows]


def test_indices(engine):
    assert engine.idx.by_type["TORNADO"] == [0, 3, 7]
    assert engine.idx.undated_ids == [7]
    assert since_ids(engine.idx, 19960101) == [2, 3, 4, 5, 6, 8]


def test_date_filter_boundaries(engine):
    dropped = engine.filter_since(date(1996, 1, 1))
    ids = engine.state.active_ids
    assert 1 not in ids          # 12/31/1995
    assert 2 in ids              # 01/01/1996
    assert 7 not in ids          # NOTADATE
    assert dropped == 1


def test_analyze_rankings(engine):
    report = engine.analyze()
    assert report.since == date(1996, 1, 1)
    assert report.rows_in_scope == 6
    assert _labels(report.health) == [
        ("TORNADO", 100.0), ("HEAT", 40.0), ("HURRICANE", 20.0),
        ("FLOOD", 2.0), ("heat", 2.0), ("HAIL", 0.0),
    ]
    assert _labels(report.economic)[:4] == [
        ("HURRICANE", 3_005_000_000.0), ("FLOOD", 2_510_000.0),
        ("TORNADO", 100_000.0), ("HAIL", 70.0),
    ]


def test_analyze_is_idempotent(engine):
    first = engine.analyze()
    second = engine.analyze()
    assert first.health == second.health
    assert first.economic == second.economic


def test_analyze_leaves_selection_alone(engine):
    engine.analyze()
    assert len(engine.state.active_ids) == len(engine.events)


def test_analyze_respects_config(storm_frame):
    events = events_from_frame(storm_frame)
    eng = ImpactEngine(events=events, idx=build_indices(events),
                       config=AnalysisConfig(since=date(1900, 1, 1), top_n=2))
    report = eng.analyze()
    assert report.rows_in_scope == 8
    assert _labels(report.health) == [("TORNADO", 650.0), ("FLOOD", 202.0)]


def test_data_quality(engine):
    q = engine.analyze().quality
    assert q.rows_loaded == 9
    assert q.unparseable_dates == 1
    assert q.zeroed_property == 1
    assert q.zeroed_crop == 0
    assert q.missing == {"fatalities": 0, "injuries": 0, "prop_dmg": 1, "crop_dmg": 1}


def test_zeroed_damage_is_logged(engine, caplog):
    with caplog.at_level("WARNING"):
        engine.summary()
    assert "zeroed 1 property" in caplog.text


def test_filter_type_and_history(engine):
    engine.filter_since(date(1996, 1, 1))
    engine.filter_type("TORNADO")
    assert engine.state.active_ids == [3]
    assert _labels(engine.top("health")) == [("TORNADO", 100.0)]
    assert engine.undo()
    assert len(engine.state.active_ids) == 6
    assert engine.redo()
    assert engine.state.active_ids == [3]
    engine.reset()
    assert len(engine.state.active_ids) == 9


def test_top_unknown_metric(engine):
    with pytest.raises(ValueError):
        engine.top("wind")


def test_top_single_metrics(engine):
    engine.filter_since(date(1996, 1, 1))
    assert engine.top("crop", 1)[0].event_type == "HURRICANE"
    assert engine.top("fatalities", 1)[0].event_type == "HEAT"


def test_exports(engine, tmp_path):
    rows = engine.analyze().economic[:2]
    csv_path = tmp_path / "econ.csv"
    json_path = tmp_path / "econ.json"
    engine.export_csv(str(csv_path), rows)
    engine.export_json(str(json_path), rows)

    with open(csv_path, newline="", encoding="utf-8") as f:
        read = list(csv.reader(f))
    assert read[0] == ["rank", "event_type", "total"]
    assert read[1][:2] == ["1", "HURRICANE"]

    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload[1] == {"rank": 2, "event_type": "FLOOD", "total": 2_510_000.0}


def test_top_rejects_zero(engine):
    with pytest.raises(ValueError):
        engine.top("health", 0)


def test_labels_with_leading_whitespace_stay_separate(storm_frame):
    df = storm_frame.copy()
    df.loc[3, "EVTYPE"] = " TSTM WIND"
    df.loc[4, "EVTYPE"] = "TSTM WIND"
    events = events_from_frame(df)
    eng = ImpactEngine(events=events, idx=build_indices(events))
    labels = [r.event_type for r in eng.analyze().health]
    assert " TSTM WIND" in labels
    assert "TSTM WIND" in labels


def test_zeroed_damage_counted_only_in_scope(storm_frame):
    df = storm_frame.copy()
    # pre-cutoff row with a positive magnitude and an unknown code
    df.loc[0, "PROPDMGEXP"] = "-"
    events = events_from_frame(df)
    eng = ImpactEngine(events=events, idx=build_indices(events))
    q = eng.analyze().quality
    assert q.zeroed_property == 1
    assert q.unparseable_dates == 1
    assert q.rows_selected == 6
    assert eng.summary(list(range(len(events)))).zeroed_property == 2

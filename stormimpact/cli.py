"""
Storm Impact Command Line Interface (CLI)
=========================================

Run it like:

    python -m stormimpact.cli --csv "path/to/repdata_StormData.csv.bz2"

By default it prints the top-10 event types by health impact
(fatalities + injuries) and by economic impact (property + crop damage,
US$) for events since 1996-01-01, then exits. With `--interactive` it
starts a REPL for filtering and ranking the in-memory selection.

The CLI DOES NOT modify the dataset file.
"""

from __future__ import annotations
import argparse, logging, os, shlex, sys
from datetime import date, datetime
from typing import List, Optional

from .config import AnalysisConfig
from .engine import DataQuality, ImpactEngine, ImpactReport
from .indices import build_indices
from .loader import MissingColumnError, load_storm_events
from .models import METRICS, ImpactRow

logger = logging.getLogger(__name__)

HELP = """
Commands:
  help
  stats
  reset
  undo
  redo

  filter since <MM/DD/YYYY>        (example: filter since 01/01/1996)
  filter type "<EVTYPE>"           (example: filter type "TORNADO")

  top <metric> [n]                 (example: top economic 5)
  types [prefix]
  export csv|json <metric> "<path>"
  quit

Metrics: health, economic, property, crop, fatalities, injuries
"""


def _parse_iso_date(s: str) -> date:
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {s!r}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="stormimpact",
                                 description="Rank storm event types by health and economic impact.")
    ap.add_argument("--csv", required=True, help="Path to the NOAA storm data file (.csv, .csv.bz2 or .xlsx)")
    ap.add_argument("--since", type=_parse_iso_date, default=AnalysisConfig.since,
                    help="Keep events on or after this date (default: 1996-01-01)")
    ap.add_argument("--top", type=int, default=AnalysisConfig.top_n, help="Rows per ranking (default: 10)")
    ap.add_argument("--interactive", action="store_true", help="Start the interactive prompt")
    ap.add_argument("--export-dir", help="Write health_top.csv and economic_top.csv here")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    1) Load dataset
    2) Build indices
    3) Print the report, or start an interactive REPL
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    if args.top <= 0:
        print("Error: --top must be a positive integer")
        return 2

    config = AnalysisConfig(since=args.since, top_n=args.top)
    try:
        events = load_storm_events(args.csv, date_format=config.date_format)
    except (FileNotFoundError, MissingColumnError) as e:
        logger.error(f"Could not load {args.csv}: {e}")
        print(f"Error: {e}")
        return 1

    engine = ImpactEngine(events=events, idx=build_indices(events), config=config, dataset_path=args.csv)
    print(f"Loaded {len(events)} events.")

    if args.interactive:
        repl(engine)
        return 0

    report = engine.analyze()
    print_report(report)
    if args.export_dir:
        os.makedirs(args.export_dir, exist_ok=True)
        for name, rows in (("health", report.health), ("economic", report.economic)):
            path = os.path.join(args.export_dir, f"{name}_top.csv")
            engine.export_csv(path, rows)
            print(f"Exported {name} ranking to {path}")
    return 0


def repl(engine: ImpactEngine) -> None:
    print("Type 'help' for commands.")
    while True:
        try:
            line = input("storm> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line.lower() in ("quit", "exit"):
            break
        try:
            handle(engine, line)
        except Exception as e:
            print(f"Error: {e}")


def handle(engine: ImpactEngine, line: str) -> None:
    """Handle one CLI command line.

    This parses the command and calls the appropriate engine method.
    """
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        print(f"Current result size: {len(engine.state.active_ids)}")
        print(f"Event types: {len(engine.idx.by_type)} | Dated events: {len(engine.events) - len(engine.idx.undated_ids)}")
        _print_quality(engine.summary())
        return

    if cmd == "reset":
        engine.reset()
        print("State reset.")
        return

    if cmd == "undo":
        print("Undone." if engine.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if engine.redo() else "Nothing to redo.")
        return

    if cmd == "types":
        prefix = parts[1].lower() if len(parts) >= 2 else ""
        vals = sorted(v for v in engine.idx.by_type if v.lower().startswith(prefix))
        for v in vals[:50]:
            print(v)
        if len(vals) > 50:
            print(f"... ({len(vals)} total, showing 50)")
        return

    if cmd == "filter":
        if len(parts) < 3:
            raise ValueError('usage: filter since <MM/DD/YYYY> | filter type "<EVTYPE>"')
        kind = parts[1].lower()
        if kind == "since":
            try:
                cutoff = datetime.strptime(parts[2], engine.config.date_format).date()
            except ValueError:
                raise ValueError(f"date must look like 01/01/1996, got {parts[2]!r}")
            dropped = engine.filter_since(cutoff)
            print(f"Filtered since {cutoff.isoformat()} ({dropped} undated dropped). Size={len(engine.state.active_ids)}")
            return
        if kind == "type":
            t = parts[2]; engine.filter_type(t); print(f"Filtered type={t}. Size={len(engine.state.active_ids)}"); return
        raise ValueError("filter kind must be: since, type")

    if cmd == "top":
        if len(parts) < 2:
            raise ValueError(f"usage: top <metric> [n]; metrics: {', '.join(METRICS)}")
        metric = parts[1]
        n = int(parts[2]) if len(parts) >= 3 else None
        rows = engine.top(metric, n)
        print(f"Top {len(rows)} event types by {metric}:")
        _print_rows(rows)
        return

    if cmd == "export":
        # export <csv|json> <metric> "<path>"
        if len(parts) < 4:
            print('Usage: export csv economic "out.csv"  OR  export json health "out.json"')
            return
        fmt, metric, out_path = parts[1].lower(), parts[2], parts[3]
        rows = engine.top(metric)
        if fmt == "csv":
            engine.export_csv(out_path, rows)
        elif fmt == "json":
            engine.export_json(out_path, rows)
        else:
            print("Unknown export format. Use: csv or json")
            return
        print(f"Exported {fmt.upper()} to {out_path}")
        return

    print("Unknown command. Type 'help'.")


def print_report(report: ImpactReport) -> None:
    print(f"\nEvents on or after {report.since.isoformat()}: {report.rows_in_scope}")
    print(f"\nTop {len(report.health)} event types by health impact (fatalities + injuries):")
    _print_rows(report.health)
    print(f"\nTop {len(report.economic)} event types by economic impact (US$):")
    _print_rows(report.economic)
    print("")
    _print_quality(report.quality)


def _print_rows(rows: List[ImpactRow]) -> None:
    for rank, r in enumerate(rows, start=1):
        print(f"{rank:>3}. {r.event_type:<30} {r.total:>20,.0f}")


def _print_quality(q: DataQuality) -> None:
    print(f"Rows loaded={q.rows_loaded} selected={q.rows_selected} unparseable_dates={q.unparseable_dates}")
    print(f"Damage zeroed by unrecognized scale codes: property={q.zeroed_property} crop={q.zeroed_crop}")
    print("Missing cells: " + " ".join(f"{k}={v}" for k, v in q.missing.items()))


if __name__ == "__main__":
    sys.exit(main())

"""CLI that turns a json-server snapshot into dashboard report artifacts."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from factoryenergy.integration import load_dashboard_snapshot
from factoryenergy.reporting import (
    ReportThresholds,
    build_dashboard_summary,
    export_dashboard_csv,
    summary_to_jsonable,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DashboardReportArtifacts:
    """Paths produced by one report execution."""

    summary_path: Path
    csv_path: Path | None


def build_parser() -> argparse.ArgumentParser:
    """Create CLI parser for dashboard report generation."""
    parser = argparse.ArgumentParser(
        prog="factoryenergy-report",
        description="Compute dashboard metrics from a json-server db.json and export JSON/CSV reports.",
    )
    parser.add_argument("--snapshot", type=Path, default=Path("db.json"))
    parser.add_argument("--output-dir", type=Path, default=Path("artifacts/dashboard-report"))
    parser.add_argument(
        "--machine-id",
        action="append",
        default=None,
        help="Machine to project; repeatable. Defaults to every machine in the roster.",
    )
    parser.add_argument("--csv", action=argparse.BooleanOptionalAction, default=True)
    parser.add_argument("--high-consumption-kwh", type=float, default=100.0)
    parser.add_argument("--high-daily-cost-mad", type=float, default=1000.0)
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
    )
    return parser


def run_report_from_args(args: argparse.Namespace) -> DashboardReportArtifacts:
    """Execute report generation from parsed CLI args."""
    snapshot = load_dashboard_snapshot(args.snapshot)
    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    summary = build_dashboard_summary(snapshot, machine_ids=args.machine_id)
    summary_path = output_dir / "dashboard_summary.json"
    _write_json(summary_path, summary_to_jsonable(summary))

    csv_path: Path | None = None
    if args.csv:
        thresholds = ReportThresholds(
            high_consumption_kwh=args.high_consumption_kwh,
            high_daily_cost_mad=args.high_daily_cost_mad,
        )
        csv_path = output_dir / "dashboard_export.csv"
        csv_path.write_text(
            export_dashboard_csv(
                snapshot,
                summary.metrics,
                exported_at_ms=int(time.time() * 1000),
                thresholds=thresholds,
            ),
            encoding="utf-8",
        )
    logger.info("Dashboard report written to %s", output_dir)
    return DashboardReportArtifacts(summary_path=summary_path, csv_path=csv_path)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        artifacts = run_report_from_args(args)
    except Exception as exc:
        print(f"[ERROR] Dashboard report failed: {exc}", file=sys.stderr)
        return 2

    print(f"summary: {artifacts.summary_path}")
    if artifacts.csv_path is not None:
        print(f"csv: {artifacts.csv_path}")
    return 0


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8")


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import getpass
import logging
from pathlib import Path
from typing import List, Sequence

from grc_metrics_cli.client import GrcClient
from grc_metrics_cli.config import read_config, write_config
from grc_metrics_cli.exceptions import ConfigError
from grc_metrics_cli.exporters.assessments import MaturityExporter, PciDssExporter
from grc_metrics_cli.exporters.base import BaseExporter
from grc_metrics_cli.exporters.risk_metrics import RiskMetricsExporter
from grc_metrics_cli.models.config import AppConfig
from grc_metrics_cli.scoring.calculator import compute_risk_score
from grc_metrics_cli.scoring.impact import aggregate_impact
from grc_metrics_cli.scoring.levels import classify_risk_level, is_above_tolerance

_SUBDIRS = ("metrics", "assessments")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grc-metrics-cli",
        description="Risk scoring and compliance dashboard metrics for a GRC organization.",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--init",
        metavar="API_URL",
        help="Initialize configuration with the GRC API URL.",
    )
    group.add_argument("--report-all", action="store_true", help="Write every report.")
    group.add_argument("--risk-metrics", action="store_true", help="Write risk register metrics.")
    group.add_argument("--pci-dss", action="store_true", help="Write PCI DSS completion statistics.")
    group.add_argument("--maturity", action="store_true", help="Write maturity assessment scores.")
    group.add_argument(
        "--score",
        nargs=4,
        type=int,
        metavar=("C", "I", "A", "LIKELIHOOD"),
        help="Score a single risk from its CIA ratings and likelihood (1-5 each).",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Overwrite existing files without confirmation.",
    )
    parser.add_argument(
        "--keep-raw-json", action="store_true",
        help="Also write JSON files alongside Markdown and YAML.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Show debug logging.",
    )
    return parser


def _run_init(api_url: str) -> None:
    if not api_url.startswith("https://"):
        raise ConfigError("API URL must start with https://")

    bearer_token = getpass.getpass("Enter your bearer token: ")
    if not bearer_token.strip():
        raise ConfigError("Bearer token cannot be empty.")

    organization_id = input("Enter your organization ID: ")
    if not organization_id.strip():
        raise ConfigError("Organization ID cannot be empty.")

    config = AppConfig(
        api_url=api_url,
        bearer_token=bearer_token.strip(),
        organization_id=organization_id.strip(),
    )

    cwd = Path.cwd()
    write_config(cwd, config)

    for subdir in _SUBDIRS:
        (cwd / subdir).mkdir(exist_ok=True)

    print("Configuration saved to .grc-metrics.ini")
    print("Created directories: " + ", ".join(f"{d}/" for d in _SUBDIRS))


def _run_score(ratings: Sequence[int]) -> None:
    confidentiality, integrity, availability, likelihood = ratings
    impact = aggregate_impact(confidentiality, integrity, availability)
    score = compute_risk_score(impact, likelihood)
    print(f"Impact: {impact}")
    print(f"Risk score: {score}")
    print(f"Risk level: {classify_risk_level(score).value}")
    print(f"Above tolerance: {'yes' if is_above_tolerance(score) else 'no'}")


def _run_reports(args: argparse.Namespace) -> None:
    cwd = Path.cwd()
    config = read_config(cwd)
    client = GrcClient(config)

    export_kwargs = {
        "force": args.force,
        "keep_raw_json": args.keep_raw_json,
    }

    exporters: List[BaseExporter] = []
    if args.report_all or args.risk_metrics:
        exporters.append(RiskMetricsExporter(client, cwd / "metrics", **export_kwargs))
    if args.report_all or args.pci_dss:
        exporters.append(PciDssExporter(client, cwd / "assessments", **export_kwargs))
    if args.report_all or args.maturity:
        exporters.append(MaturityExporter(client, cwd / "assessments", **export_kwargs))

    for exporter in exporters:
        exporter.export()


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.init:
        _run_init(args.init)
    elif args.score:
        _run_score(args.score)
    elif args.report_all or args.risk_metrics or args.pci_dss or args.maturity:
        _run_reports(args)
    else:
        parser.print_help()

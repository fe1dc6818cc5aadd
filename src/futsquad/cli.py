"""Command-line interface for inspecting a club roster export."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from futsquad.config import FORMATION_CHOICES
from futsquad.config_loader import Settings
from futsquad.ingest import RosterImportError, get_reference_map, load_roster_csv
from futsquad.models import RosterEntry
from futsquad.recommend import RecommendationError, RecommendationGateway
from futsquad.views import DEFAULT_MAX_PRICE, FilterCriteria, parse_sort_spec, project, summarize


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect a club roster CSV and get squad recommendations")
    parser.add_argument("roster", type=Path, help="Path to the exported club CSV")
    parser.add_argument("--name", default="", help="Case-insensitive name substring")
    parser.add_argument("--position", default="", help="Preferred or alternate position substring")
    parser.add_argument("--club", default="", help="Team or league substring")
    parser.add_argument("--rarity", default="", help="Exact rarity")
    parser.add_argument("--nation", default="", help="Exact nation")
    parser.add_argument("--min-rating", type=int, default=0)
    parser.add_argument("--max-rating", type=int, default=99)
    parser.add_argument("--min-price", type=float, default=0)
    parser.add_argument("--max-price", type=float, default=DEFAULT_MAX_PRICE)
    parser.add_argument(
        "--tradeable",
        choices=["all", "tradeable", "untradeable"],
        default="all",
        help="Filter on the tradeable flag",
    )
    parser.add_argument(
        "--sort",
        default="rating:desc",
        help="Comma separated sort keys with optional :asc/:desc (e.g. rating:desc,name)",
    )
    parser.add_argument("--limit", type=int, default=25, help="Rows to print (0 for all)")
    parser.add_argument("--delimiter", default=None, help="Force a delimiter instead of detecting it")
    parser.add_argument("--reference", type=Path, default=None, help="Reference dataset JSON")
    parser.add_argument("--settings", type=Path, default=None, help="Settings JSON profile")
    parser.add_argument("--report", type=Path, default=None, help="Optional path to write the import report JSON")
    parser.add_argument("--improve", action="store_true", help="Request squad improvement recommendations")
    parser.add_argument("--budget", type=int, default=None, help="Coin budget for upgrades")
    parser.add_argument(
        "--formation",
        choices=sorted(FORMATION_CHOICES),
        default=None,
        help="Preferred formation for recommendations",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _format_row(entry: RosterEntry) -> str:
    stats = "yes" if entry.has_detailed_stats else "-"
    return (
        f"{entry.rating:>3}  {entry.name[:28]:<28}  {entry.preferred_position:<4}  "
        f"{entry.team[:20]:<20}  {entry.external_price:>10}  {stats}"
    )


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    settings = Settings.load(args.settings) if args.settings else Settings.from_env()
    reference_map = get_reference_map(args.reference or settings.reference_path)

    try:
        result = load_roster_csv(args.roster, reference_map, delimiter=args.delimiter)
    except FileNotFoundError as exc:
        raise SystemExit(f"Roster file not found: {args.roster}") from exc
    except RosterImportError as exc:
        raise SystemExit(str(exc)) from exc

    report = result.report
    print(
        f"Imported {report.accepted_rows}/{report.total_rows} rows "
        f"({report.enriched_rows} with detailed stats, {report.skipped_rows} skipped)"
    )
    for diagnostic in report.diagnostics:
        print(f"  row {diagnostic.row}: {diagnostic.reason}")

    summary = summarize(result.entries)
    print(
        f"Average rating {summary.average_rating:.1f}; "
        f"prices {summary.min_price:,.0f} - {summary.max_price:,.0f} "
        f"({summary.priced_players} priced)"
    )

    try:
        sort = parse_sort_spec(args.sort)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    criteria = FilterCriteria(
        name=args.name,
        position=args.position,
        club=args.club,
        rarity=args.rarity,
        nation=args.nation,
        min_rating=args.min_rating,
        max_rating=args.max_rating,
        min_price=args.min_price,
        max_price=args.max_price,
        tradeable=args.tradeable,
    )
    entries = project(result.entries, criteria, sort)
    shown = entries if args.limit <= 0 else entries[: args.limit]
    print(f"\n{len(entries)} players match")
    for entry in shown:
        print(_format_row(entry))

    if args.report:
        payload = {
            "total_rows": report.total_rows,
            "accepted_rows": report.accepted_rows,
            "enriched_rows": report.enriched_rows,
            "delimiter": report.delimiter,
            "diagnostics": [asdict(item) for item in report.diagnostics],
            "summary": asdict(summary),
        }
        args.report.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Report written to {args.report}")

    if args.improve:
        gateway = RecommendationGateway.from_settings(settings)
        budget = settings.default_coins if args.budget is None else args.budget
        try:
            recommendation = gateway.get_squad_improvements(result.entries, budget, args.formation)
        except (RecommendationError, ValueError) as exc:
            raise SystemExit(str(exc)) from exc
        print(json.dumps(recommendation.model_dump(by_alias=True), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()

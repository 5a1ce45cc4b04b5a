"""Command-line interface for computing team depth rankings from season statistics."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from rosterdepth.config import (
    DEFAULT_SCORE_LADDER,
    PipelineConfig,
    apply_environment,
    default_ladder,
    iter_families,
)
from rosterdepth.config_loader import ConfigProfile
from rosterdepth.errors import RosterDepthError
from rosterdepth.pipeline import PipelineResult, PipelineSources, load_inputs, run_pipeline
from rosterdepth.ranking import COMBINED
from rosterdepth.report import comparison_to_csv, report_to_json


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rank team depth from clustered player statistics")
    parser.add_argument("season", type=Path, help="Path to season statistics CSV")
    parser.add_argument(
        "--family",
        default=None,
        choices=sorted(family.name for family in iter_families()),
        help="Statistic family used as clustering features (default: basic)",
    )
    parser.add_argument("--roster", type=Path, required=True, help="Current-season roster CSV")
    parser.add_argument("--reference", type=Path, required=True, help="Reference ranking CSV")
    parser.add_argument("--supplementary", type=Path, default=None, help="Curated rows for absent players")
    parser.add_argument("--rookies", type=Path, default=None, help="Rookie to comparable-veteran CSV")
    parser.add_argument(
        "--participation",
        type=Path,
        default=None,
        help="Per-game table supplying games played/started when the season table lacks them",
    )
    parser.add_argument(
        "--season-column",
        action="append",
        default=[],
        help="Mapping for season CSV columns (e.g., points=PTS)",
    )
    parser.add_argument(
        "--roster-column",
        action="append",
        default=[],
        help="Mapping for roster CSV columns (e.g., team=Tm)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load settings/column JSON profile", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save settings/column JSON profile", default=None)
    parser.add_argument("--min-games-started", type=int, default=None)
    parser.add_argument("--min-games-played", type=int, default=None)
    parser.add_argument("--clusters", type=int, default=None, help="Number of clusters K")
    parser.add_argument("--top-n", type=int, default=None, help="Players counted per team")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for k-means")
    parser.add_argument(
        "--ladder",
        default=None,
        help="Comma-separated scores for clusters from strongest to weakest (e.g., 15,10,5,3,1)",
    )
    parser.add_argument(
        "--allow-short-rosters",
        action="store_true",
        help="Report teams below --top-n players instead of aborting",
    )
    parser.add_argument("--report-teams", type=int, default=None, help="Teams listed at the top and bottom")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("depth_comparison.csv"),
        help="Output comparison CSV path",
    )
    parser.add_argument("--report", type=Path, default=None, help="Optional path to write the JSON report")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _parse_ladder(raw: str | None) -> tuple[int, ...] | None:
    if raw is None:
        return None
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise ValueError(f"Invalid ladder {raw!r}, expected comma-separated integers") from None


def _preview(items: Sequence[str], limit: int = 5) -> str:
    preview = ", ".join(items[:limit])
    more = len(items) - limit
    suffix = f", +{more} more" if more > 0 else ""
    return f"{preview}{suffix}"


def _build_config(args: argparse.Namespace, profile: ConfigProfile) -> PipelineConfig:
    config = apply_environment(profile.to_config())
    config = config.with_overrides(
        family=args.family,
        min_games_started=args.min_games_started,
        min_games_played=args.min_games_played,
        n_clusters=args.clusters,
        top_n=args.top_n,
        seed=args.seed,
        score_ladder=_parse_ladder(args.ladder),
        report_teams=args.report_teams,
    )
    if args.allow_short_rosters:
        config = config.with_overrides(strict_rosters=False)
    if args.ladder is None and config.score_ladder == DEFAULT_SCORE_LADDER:
        config = config.with_overrides(score_ladder=default_ladder(config.n_clusters))
    return config.validate()


def _print_summary(result: PipelineResult) -> None:
    comparison = result.comparison
    count = result.config.report_teams
    normalization = result.normalization
    print(
        f"Normalized {normalization.raw_rows} rows into {normalization.total_players} players "
        f"({len(normalization.dropped_low_participation)} below participation threshold)"
    )
    for name in (*comparison.algorithms, COMBINED):
        top = [row.team for row in comparison.top_teams(name, count)]
        bottom = [row.team for row in comparison.bottom_teams(name, count)]
        print(f"[{name}] mean |rank difference| = {comparison.fit[name]:.2f}")
        print(f"  top {count}: {', '.join(top)}")
        print(f"  bottom {count}: {', '.join(bottom)}")

    if result.unmatched:
        names = [item.name for item in result.unmatched]
        print(f"Players without a current team ({len(names)}): {_preview(names)}")
    for issue in result.roster_issues:
        print(f"Short roster [{issue.algorithm}]: {issue}")
    for warning in result.convergence_warnings:
        print(f"Clustering warning: {warning}")


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    profile = ConfigProfile()
    if args.load_profile:
        profile = ConfigProfile.load(args.load_profile)
    try:
        season_mapping = _parse_mapping(args.season_column)
        roster_mapping = _parse_mapping(args.roster_column)
        if season_mapping:
            profile.columns["season"] = profile.columns_for("season") | season_mapping
        if roster_mapping:
            profile.columns["roster"] = profile.columns_for("roster") | roster_mapping
        config = _build_config(args, profile)
    except (KeyError, ValueError) as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    if args.save_profile:
        profile.settings = {
            **profile.settings,
            "family": config.family,
            "min_games_started": config.min_games_started,
            "min_games_played": config.min_games_played,
            "n_clusters": config.n_clusters,
            "top_n": config.top_n,
            "seed": config.seed,
            "score_ladder": list(config.score_ladder),
            "strict_rosters": config.strict_rosters,
            "report_teams": config.report_teams,
        }
        profile.save(args.save_profile)
        print(f"Saved profile to {args.save_profile}")

    sources = PipelineSources(
        season=args.season,
        roster=args.roster,
        reference=args.reference,
        supplementary=args.supplementary,
        rookies=args.rookies,
        participation=args.participation,
    )
    try:
        result = run_pipeline(load_inputs(sources, config, profile), config)
    except RosterDepthError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    args.output.write_text(comparison_to_csv(result.comparison), encoding="utf-8")
    print(f"Wrote rank comparison to {args.output}")
    if args.report:
        args.report.write_text(report_to_json(result), encoding="utf-8")
        print(f"Wrote report to {args.report}")
    _print_summary(result)


if __name__ == "__main__":
    main()

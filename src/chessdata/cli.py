"""CLI entry point and main processing flow."""

import argparse
import hashlib
import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from chessdata import config
from chessdata.fetch import fetch_with_cache
from chessdata.serialize import board_json, competition_json, to_json
from chessdata.service import TournamentExtractor, load_competitions
from chessdata.store import load_competition_standings, replace_competition_standings
from chessdata.teams import find_team
from chessdata.util import ChessdataError, ConfigError

logger = logging.getLogger("chessdata")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessdata",
        description="Scrape team competition data from chess-results.com and chess.cz.",
    )
    parser.add_argument(
        "--raw-cache", choices=["on", "off"], default="off",
        help="Keep raw HTML copies under data/raw (default: off)",
    )
    parser.add_argument(
        "--log-level", choices=["INFO", "DEBUG"], default="INFO",
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("standings", help="Refresh standings of all active competitions")
    p.add_argument("--competitions", required=True, type=Path,
                   help="JSON file listing competitions")
    p.add_argument("--store", type=Path, default=None,
                   help="Standings CSV (default: data/standings.csv)")

    p = sub.add_parser("match", help="Board results of one team match")
    p.add_argument("--url", required=True, help="Competition URL")
    p.add_argument("--round", required=True, type=int)
    p.add_argument("--home", required=True, help="Home team name")
    p.add_argument("--away", required=True, help="Away team name")

    p = sub.add_parser("roster", help="Team roster with per-round results")
    p.add_argument("--url", required=True, help="Competition URL")
    p.add_argument("--snr", required=True, type=int, help="Team number")

    p = sub.add_parser("players", help="Start list or ranking of an individual tournament")
    p.add_argument("--url", required=True)

    p = sub.add_parser("team-snr", help="Find a stored team and its roster number")
    p.add_argument("--competitions", required=True, type=Path)
    p.add_argument("--competition-id", required=True)
    p.add_argument("--team", required=True, help="Team name (fuzzy)")
    p.add_argument("--store", type=Path, default=None)

    p = sub.add_parser("rosada", help="Ratings from a Rosada player profile")
    p.add_argument("--id", required=True)
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def _project_root() -> Path:
    """Find project root (directory containing pyproject.toml or data/)."""
    p = Path.cwd()
    for _ in range(10):
        if (p / "pyproject.toml").exists():
            return p
        if (p / "data").is_dir():
            return p
        parent = p.parent
        if parent == p:
            break
        p = parent
    return Path.cwd()


def _raw_fetcher(cache_dir: Path):
    def fetch(url: str) -> str:
        name = hashlib.md5(url.encode("utf-8")).hexdigest() + ".html"
        return fetch_with_cache(url, cache_dir / name, use_cache=True)
    return fetch


def _emit(payload: dict) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _run_standings(args: argparse.Namespace, extractor: TournamentExtractor, data_dir: Path) -> dict:
    competitions = load_competitions(args.competitions)
    store_path = args.store or data_dir / "standings.csv"

    results = extractor.refresh_all(competitions)
    for snapshot in results:
        replace_competition_standings(store_path, snapshot)

    failed = [s.competition_id for s in results if s.error]
    logger.info("=== Summary ===")
    logger.info("Competitions: %d (failed: %d)", len(results), len(failed))
    logger.info("Teams: %d", sum(len(s.standings) for s in results))
    return {
        "standings": [competition_json(s) for s in results],
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }


def _run_team_snr(args: argparse.Namespace, data_dir: Path) -> dict:
    competitions = {c.id: c for c in load_competitions(args.competitions)}
    comp = competitions.get(args.competition_id)
    if comp is None:
        raise ConfigError(f"Competition not found: {args.competition_id}")

    standings = load_competition_standings(args.store or data_dir / "standings.csv", comp.id)
    team = find_team(standings, args.team)
    if team is None:
        raise ChessdataError(f"Team not found in standings: {args.team}")
    return {"snr": team.rank, "url": comp.url, "team": team.team}


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    _setup_logging(args.log_level)

    root = _project_root()
    data_dir = root / config.DATA_DIR
    if args.raw_cache == "on":
        extractor = TournamentExtractor(fetch=_raw_fetcher(data_dir / "raw"))
    else:
        extractor = TournamentExtractor()

    start_time = time.time()
    try:
        if args.command == "standings":
            payload = _run_standings(args, extractor, data_dir)
        elif args.command == "match":
            boards = extractor.fetch_match_details(args.url, args.round, args.home, args.away)
            payload = {"boards": [board_json(b) for b in boards]}
        elif args.command == "roster":
            players = extractor.fetch_roster(args.url, args.snr)
            payload = {"players": to_json(players), "count": len(players)}
        elif args.command == "team-snr":
            payload = _run_team_snr(args, data_dir)
        elif args.command == "players":
            payload = to_json(extractor.fetch_player_list(args.url))
        else:
            payload = to_json(extractor.fetch_rosada_profile(args.id))
    except ChessdataError as e:
        logger.error("Fatal error: %s", e)
        _emit({"error": str(e)})
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        _emit({"error": "Failed to load data"})
        sys.exit(1)

    _emit(payload)
    logger.info("Elapsed: %.1fs", time.time() - start_time)

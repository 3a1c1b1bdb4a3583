"""Tournament data extraction: refresh standings, resolve matches, rosters."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from chessdata import config
from chessdata.cache import TTLCache
from chessdata.fetch import (
    boards_url,
    chesscz_url,
    fetch_page,
    roster_url,
    rosada_url,
    schedule_url,
    standings_url,
)
from chessdata.models import (
    BoardResult,
    Competition,
    CompetitionSnapshot,
    PlayerListResult,
    RosadaProfile,
    RosterPlayer,
    ScheduleEntry,
    StandingRow,
)
from chessdata.parse_players import parse_player_list
from chessdata.parse_roster import parse_roster_page
from chessdata.parse_rosada import parse_rosada_profile
from chessdata.parse_schedule import parse_schedule_page
from chessdata.parse_standings import parse_chesscz_standings, parse_standings_page
from chessdata.resolver import resolve_match_boards
from chessdata.teams import attach_schedules
from chessdata.util import ChessdataError, ConfigError, FetchError, ParseError, require_rows

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def load_competitions(path: Path) -> list[Competition]:
    """Read the competitions JSON file (a list of objects)."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read competitions from {path}: {e}") from e
    if not isinstance(data, list):
        raise ConfigError(f"{path} must contain a JSON list")

    competitions = []
    for item in data:
        try:
            competitions.append(Competition(
                id=str(item["id"]),
                name=item.get("name", str(item["id"])),
                url=item.get("url") or "",
                category=item.get("category") or "youth",
                active=item.get("active", True),
                chesscz_url=item.get("chessczUrl"),
            ))
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid competition entry {item!r}: {e}") from e
    return competitions


def is_chess_results(url: str) -> bool:
    return config.CHESS_RESULTS_HOST in (url or "")


class TournamentExtractor:
    """Fetches and parses tournament pages; owns the lookup cache."""

    def __init__(
        self,
        cache: TTLCache | None = None,
        fetch: Callable[[str], str] = fetch_page,
        max_workers: int = config.MAX_WORKERS,
    ) -> None:
        self.cache = cache or TTLCache(config.CACHE_TTL, config.CACHE_MAX_ENTRIES)
        self.fetch = fetch
        self.max_workers = max_workers

    # -- standings -------------------------------------------------------

    def fetch_standings(self, url: str) -> list[StandingRow]:
        page_url = standings_url(url)
        return parse_standings_page(self.fetch(page_url), page_url)

    def fetch_schedule(self, url: str) -> list[ScheduleEntry]:
        page_url = schedule_url(url)
        return parse_schedule_page(self.fetch(page_url), page_url)

    def _chess_results_standings(self, comp: Competition) -> list[StandingRow]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            standings_future = pool.submit(self.fetch_standings, comp.url)
            schedule_future = pool.submit(self.fetch_schedule, comp.url)
            standings = standings_future.result()
            try:
                schedule = schedule_future.result()
            except FetchError as e:
                logger.warning("Schedule unavailable for %s: %s", comp.name, e)
                schedule = []
        attach_schedules(standings, schedule)
        return standings

    def _chesscz_standings(self, comp: Competition) -> list[StandingRow]:
        url = comp.chesscz_url or chesscz_url(comp.id)
        return parse_chesscz_standings(self.fetch(url), url)

    def refresh_competition(self, comp: Competition) -> CompetitionSnapshot:
        """Standings of one competition; failures end up in snapshot.error."""
        logger.info("Processing %s...", comp.name)
        snapshot = CompetitionSnapshot(
            competition_id=comp.id,
            name=comp.name,
            url=comp.url or comp.chesscz_url or "",
            category=comp.category,
            standings=[],
            updated_at=_now(),
        )
        try:
            if is_chess_results(comp.url):
                standings = self._chess_results_standings(comp)
            else:
                standings = self._chesscz_standings(comp)
            snapshot.standings = require_rows(standings, "standings", snapshot.url)
        except ChessdataError as e:
            logger.error("Error fetching %s: %s", comp.name, e)
            snapshot.error = str(e)
        except Exception as e:
            logger.error("Unexpected error for %s: %s", comp.name, e, exc_info=True)
            snapshot.error = str(e)
        return snapshot

    def refresh_all(self, competitions: list[Competition]) -> list[CompetitionSnapshot]:
        active = [c for c in competitions if c.active]
        if not active:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(self.refresh_competition, active))

    # -- per-request lookups --------------------------------------------

    def fetch_match_details(
        self, url: str, round_no: int | str, home: str, away: str,
    ) -> list[BoardResult]:
        """Boards of one match; empty when the page or the match is missing."""
        key = (url, "rd", str(round_no), home, away)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        page_url = boards_url(url, round_no)
        logger.info("Scraping details: %s for %s vs %s", page_url, home, away)
        try:
            boards = resolve_match_boards(self.fetch(page_url), home, away)
        except FetchError as e:
            logger.error("Error scraping details: %s", e)
            return []
        if boards:
            self.cache.set(key, boards)
        return boards

    def fetch_roster(self, url: str, snr: int | str) -> list[RosterPlayer]:
        key = (url, "snr", str(snr))
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        page_url = roster_url(url, snr)
        logger.info("Scraping roster: %s", page_url)
        try:
            players = parse_roster_page(self.fetch(page_url), page_url)
        except FetchError as e:
            logger.error("Error scraping roster: %s", e)
            return []
        if players:
            self.cache.set(key, players)
        return players

    def fetch_player_list(self, url: str) -> PlayerListResult:
        return parse_player_list(self.fetch(url), url)

    def fetch_rosada_profile(self, rosada_id: str) -> RosadaProfile:
        if not str(rosada_id).isdigit():
            raise ParseError(f"Invalid Rosada ID: {rosada_id!r}")
        url = rosada_url(rosada_id)
        logger.info("Scraping Rosada profile: %s", url)
        return parse_rosada_profile(self.fetch(url), str(rosada_id), url)

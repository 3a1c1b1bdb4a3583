"""Team roster parser (chess-results art=1 with snr)."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from chessdata.html_text import SPLIT_ROW_START, parse_int, split_rows
from chessdata.models import RosterPlayer

logger = logging.getLogger(__name__)

_ROSTER_ROW = re.compile(r'class="CRg[12]')
_FIDE_LINK = re.compile(r"ratings\.fide\.com")
# The last two centred cells of a player row hold total points and games
TOTAL_CELLS = 2
_WIN = ("1",)
_LOSS = ("0",)
_DRAW = ("½", "0.5", "0,5")


def _classes(td: Tag) -> list[str]:
    return td.get("class", [])


def _result_anchor(tds: list[Tag]) -> int:
    """Index after which per-round result cells start."""
    for i, td in enumerate(tds):
        if td.find("a", href=_FIDE_LINK):
            return i
    for i, td in enumerate(tds):
        if "CRr" in _classes(td):
            return i
    return len(tds)


def split_result_cells(values: list[str]) -> tuple[list[str], list[str]]:
    """Split trailing centred cells into per-round results and totals."""
    if len(values) < TOTAL_CELLS:
        return [], values
    return values[:-TOTAL_CELLS], values[-TOTAL_CELLS:]


def tally(round_results: list[str]) -> tuple[float, int]:
    """Points and games from round cells; blanks and byes are not games."""
    points = 0.0
    played = 0
    for value in round_results:
        if value in _WIN:
            played += 1
            points += 1
        elif value in _LOSS:
            played += 1
        elif value in _DRAW:
            played += 1
            points += 0.5
    return points, played


def format_score(points: float, played: int) -> str:
    if played == 0:
        return "-"
    return f"{points:g}/{played}"


def parse_roster_row(row: str) -> RosterPlayer | None:
    """Parse a single player row; None when rank or name is missing."""
    soup = BeautifulSoup(row, "html.parser")
    tds = soup.find_all("td")
    if len(tds) < 5:
        return None

    rank = None
    for td in tds:
        if "CRc" in _classes(td):
            rank = parse_int(td.get_text(strip=True))
            break

    link = soup.find("a", class_="CRdb")
    name = link.get_text(" ", strip=True) if link else ""
    if not rank or not name:
        return None

    ratings = [parse_int(td.get_text(strip=True)) for td in tds if "CRr" in _classes(td)]
    ratings = [r for r in ratings if r is not None]
    elo = ratings[0] if ratings else None
    perf = ratings[-1] if len(ratings) >= 2 else None

    anchor = _result_anchor(tds)
    centred = [
        td.get_text(strip=True)
        for td in tds[anchor + 1:]
        if "CRc" in _classes(td)
    ]
    round_results, _totals = split_result_cells(centred)
    points, played = tally(round_results)

    return RosterPlayer(
        rank=rank,
        name=name,
        elo=elo or None,
        perf=perf or None,
        round_results=round_results,
        played=played,
        points=points,
        score=format_score(points, played),
    )


def parse_roster_page(html: str, source_url: str = "") -> list[RosterPlayer]:
    players: list[RosterPlayer] = []
    for fragment in split_rows(html, SPLIT_ROW_START):
        if not _ROSTER_ROW.search(fragment):
            continue
        player = parse_roster_row(fragment)
        if player is not None:
            players.append(player)
    logger.info("Parsed %d roster players from %s", len(players), source_url or "roster page")
    return players

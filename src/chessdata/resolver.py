"""Locate one team match on a round pairings page and read its boards.

A chess-results art=3 page lists every match of a round as one flat run of
table rows: a bold header row naming both teams, followed by one row per
board. Nothing but row order ties a board to its match, so the page is
scanned with two states:

SEEKING    until a row's text contains both team names.
CAPTURING  board rows are collected until the next header row.

Board rows come in several layouts (plain, with title cells, with
federation flag cells). Each field is read by a chain of fallbacks tried in
order; support for a new layout should be added as another fallback.
"""

import logging
import re
from typing import Callable

from chessdata.html_text import (
    SPLIT_CLASSED_ROW,
    cell_text,
    clean,
    has_header_cell,
    is_data_row,
    split_rows,
)
from chessdata.models import BoardResult
from chessdata.teams import is_elo

logger = logging.getLogger(__name__)

SEEKING = "seeking"
CAPTURING = "capturing"

_BOLD_ROW = 'class="CRg1b"'
_MIN_STRUCTURED_CELLS = 6
_GUEST_SEARCH_START = 6
_GUEST_FALLBACK_CELLS = (8, 9)
_RESULT_FALLBACK_CELL = 10
_SCORE = re.compile(r"^[\d½]+[.,]?[\d½]?\s*[:\-]\s*[\d½]+[.,]?[\d½]?$")
_HALF = ("½", "0.5", "0,5")


def is_next_header(row: str) -> bool:
    return has_header_cell(row) or _BOLD_ROW in row


def _home_elo(cells: list[str]) -> str:
    # a title or flag cell may sit between name and rating, so try 5 first
    for i in (5, 4):
        text = cell_text(cells, i)
        if is_elo(text):
            return text
    return ""


def _guest_by_comma(cells: list[str]) -> int | None:
    """First cell from 6 on that looks like "Surname, Given"."""
    for i in range(_GUEST_SEARCH_START, len(cells)):
        text = cell_text(cells, i)
        if "," in text and len(text) > 3:
            return i
    return None


def _guest_by_position(cells: list[str]) -> int | None:
    for i in _GUEST_FALLBACK_CELLS:
        if len(cell_text(cells, i)) > 2:
            return i
    return None


_GUEST_STRATEGIES: list[Callable[[list[str]], int | None]] = [
    _guest_by_comma,
    _guest_by_position,
]


def _guest_index(cells: list[str]) -> int | None:
    for strategy in _GUEST_STRATEGIES:
        index = strategy(cells)
        if index is not None:
            return index
    return None


def _guest_elo(cells: list[str], guest: int | None) -> str:
    if guest is None:
        return ""
    for i in (guest + 2, guest + 1):
        text = cell_text(cells, i)
        if is_elo(text):
            return text
    return ""


def _result_by_score(cells: list[str]) -> str:
    for i in range(len(cells) - 1, 0, -1):
        text = cell_text(cells, i)
        if _SCORE.match(text):
            return text
    return ""


def _result_by_half_pair(cells: list[str]) -> str:
    """Draws rendered as two separate ½ cells."""
    for i in range(len(cells) - 1, 1, -1):
        if cell_text(cells, i) in _HALF and cell_text(cells, i - 1) in _HALF:
            return "½ - ½"
    return ""


def _result_by_position(cells: list[str]) -> str:
    if len(cells) > _RESULT_FALLBACK_CELL:
        return cell_text(cells, _RESULT_FALLBACK_CELL) or "-"
    return ""


_RESULT_STRATEGIES: list[Callable[[list[str]], str]] = [
    _result_by_score,
    _result_by_half_pair,
    _result_by_position,
]


def _result(cells: list[str]) -> str:
    for strategy in _RESULT_STRATEGIES:
        result = strategy(cells)
        if result:
            return result
    return ""


def parse_board_row(row: str) -> BoardResult:
    """Parse one board row; rows with 5 or fewer cells come back raw."""
    cells = row.split("</td>")
    if len(cells) < _MIN_STRUCTURED_CELLS:
        return BoardResult(raw=clean(row))

    guest = _guest_index(cells)
    return BoardResult(
        board=cell_text(cells, 0),
        home_player=cell_text(cells, 3),
        home_elo=_home_elo(cells),
        guest_player=cell_text(cells, guest) if guest is not None else "",
        guest_elo=_guest_elo(cells, guest),
        result=_result(cells),
    )


def resolve_match_boards(html: str, home: str, away: str) -> list[BoardResult]:
    """Boards of the home-vs-away match on a round pairings page.

    Empty when no header row names both teams.
    """
    home_key = home.lower()
    away_key = away.lower()
    state = SEEKING
    boards: list[BoardResult] = []

    for row in split_rows(html, SPLIT_CLASSED_ROW):
        if state == SEEKING:
            text = clean(row).lower()
            if home_key in text and away_key in text:
                logger.debug("Match header found: %s", clean(row))
                state = CAPTURING
            continue

        if is_next_header(row):
            break
        if is_data_row(row):
            boards.append(parse_board_row(row))

    if state == SEEKING:
        logger.info("No match header for %s vs %s", home, away)
    else:
        logger.info("Resolved %d boards for %s vs %s", len(boards), home, away)
    return boards

"""Round-by-round fixture list parser (chess-results art=2)."""

import logging
import re
from dataclasses import dataclass

from chessdata.html_text import (
    cell_text,
    cells_of,
    clean,
    is_data_row,
    row_tail,
    split_rows,
)
from chessdata.models import ScheduleEntry

logger = logging.getLogger(__name__)

_ROUND_HEADER = re.compile(r"(\d+)\.\s*(Runde|Round|Kolo)", re.IGNORECASE)
_ROUND_WORDS = ("runde", "round", "kolo")
_LABELED_DATE = re.compile(r"Datum kola\s*([\d/.]+)")
_BARE_DATE = re.compile(r"(\d{1,2}\.\d{1,2}\.\d{4}|\d{4}/\d{1,2}/\d{1,2})")
_SCORE_SIDE = r"(\d+(?:[.,]5)?½?|½)"
_RESULT = re.compile(_SCORE_SIDE + r"\s*[:\-]\s*" + _SCORE_SIDE)
_HAS_SCORE = re.compile(r"[\d½]")


@dataclass
class RoundHeader:
    round: int
    date: str | None


def parse_round_header(text: str) -> RoundHeader | None:
    """Read round number and date from cleaned header text.

    >>> parse_round_header("2. Kolo Datum kola 15.3.2025")
    RoundHeader(round=2, date='15.3.2025')
    """
    m = _ROUND_HEADER.search(text)
    if not m:
        return None
    date_match = _LABELED_DATE.search(text) or _BARE_DATE.search(text)
    date = date_match.group(1).rstrip(".") if date_match else None
    return RoundHeader(round=int(m.group(1)), date=date or None)


def _fixture_result(cells: list[str], row_text: str) -> str | None:
    home_score = cell_text(cells, 3)
    away_score = cell_text(cells, 5)
    both_scored = _HAS_SCORE.search(home_score) and _HAS_SCORE.search(away_score)
    if both_scored or "½" in (home_score, away_score):
        return f"{home_score} : {away_score}"
    m = _RESULT.search(row_text)
    if m:
        return f"{m.group(1)} : {m.group(2)}"
    return None


def parse_schedule_page(html: str, source_url: str = "") -> list[ScheduleEntry]:
    """Parse every fixture of every round, in page order.

    Fixtures seen before the first round header are dropped since their
    round is unknown.
    """
    entries: list[ScheduleEntry] = []
    current: RoundHeader | None = None
    orphans = 0

    for fragment in split_rows(html):
        lower = fragment.lower()
        if any(w in lower for w in _ROUND_WORDS):
            header = parse_round_header(clean(fragment))
            if header:
                # a header without a date keeps the last date seen
                if header.date is None and current is not None:
                    header.date = current.date
                current = header

        if not is_data_row(fragment, allow_bold=True):
            continue

        row = row_tail(fragment)
        cells = cells_of(row)
        if len(cells) <= 5:
            continue
        if not cell_text(cells, 0).isdigit():
            continue

        home = cell_text(cells, 1)
        away = cell_text(cells, 2)
        if not home or not away:
            continue
        if current is None:
            orphans += 1
            continue

        entries.append(ScheduleEntry(
            round=current.round,
            date=current.date,
            home=home,
            away=away,
            result=_fixture_result(cells, clean(row)),
        ))

    if orphans:
        logger.debug("Dropped %d fixtures seen before any round header", orphans)
    logger.info("Parsed %d fixtures from %s", len(entries), source_url or "schedule page")
    return entries

"""Individual tournament start lists and final rankings."""

import logging
import re
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup

from chessdata.html_text import clean
from chessdata.models import PlayerEntry, PlayerListResult

logger = logging.getLogger(__name__)

_HEADER_LABEL = re.compile(r"^(Poř\.|Jméno|Body|Rtg|Fed)$", re.IGNORECASE)
_RATING = re.compile(r"^[12]\d{3}$")
_POINTS = re.compile(r"^\d+([.,]5)?$")
_CLUB = re.compile(r"[^\W\d_]{4,}")
_FED = re.compile(r"^[A-Z]{3}$")
_RESULT_VIEWS = {"1", "4"}


def is_results_url(url: str) -> bool:
    arts = parse_qs(urlsplit(url).query).get("art", [])
    return any(a in _RESULT_VIEWS for a in arts)


def _name_index(raw: list[str], texts: list[str]) -> int | None:
    upper = min(len(raw), 5)
    for i in range(1, upper):
        if "<a " in raw[i] and "tnr" in raw[i]:
            return i
    for i in range(1, upper):
        if len(texts[i]) > 5 and not texts[i].isdigit():
            return i
    return None


def _elo(texts: list[str], name_idx: int) -> str:
    for i in range(max(0, name_idx - 2), min(len(texts), name_idx + 4)):
        if i != name_idx and (_RATING.match(texts[i]) or texts[i] == "0"):
            return texts[i]
    return ""


def _points(texts: list[str], name_idx: int) -> str:
    for i in range(name_idx + 1, len(texts)):
        text = texts[i]
        if not _POINTS.match(text):
            continue
        if _RATING.match(text):
            continue
        if text == "0" and i < name_idx + 3:
            continue  # unrated player next to the name
        return text
    return ""


def _first_after(texts: list[str], name_idx: int, pattern: re.Pattern, start_ok=None) -> str:
    for text in texts[name_idx + 1:]:
        if pattern.search(text) and (start_ok is None or start_ok(text)):
            return text
    return ""


def parse_player_list(html: str, url: str) -> PlayerListResult:
    """Players of a start list (art=0) or ranking (art=1/4) page."""
    is_results = is_results_url(url)
    soup = BeautifulSoup(html, "html.parser")
    players: list[PlayerEntry] = []

    for tr in soup.find_all("tr"):
        tds = tr.find_all("td", recursive=False)
        if len(tds) < 3:
            continue
        raw = [td.decode_contents() for td in tds]
        texts = [clean(r) for r in raw]

        if any(_HEADER_LABEL.match(t) for t in texts):
            continue
        if not texts[0].isdigit():
            continue

        name_idx = _name_index(raw, texts)
        if name_idx is None:
            continue

        elo = _elo(texts, name_idx)
        points = _points(texts, name_idx) if is_results else ""
        if points and not elo and float(points.replace(",", ".")) > 100:
            elo, points = points, ""

        players.append(PlayerEntry(
            rank=texts[0],
            name=texts[name_idx],
            elo=elo,
            club=_first_after(texts, name_idx, _CLUB, lambda t: not t[:1].isdigit()),
            fed=_first_after(texts, name_idx, _FED),
            points=points,
            is_result=is_results and bool(points),
        ))

    list_type = "results" if is_results or any(p.points for p in players) else "startlist"
    logger.info("Parsed %d players (%s) from %s", len(players), list_type, url)
    return PlayerListResult(players=players, count=len(players), type=list_type)

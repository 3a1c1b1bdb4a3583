"""Team standings parsers (chess-results art=46 and legacy chess.cz)."""

import logging
import re

from bs4 import BeautifulSoup

from chessdata import config
from chessdata.config import StandingsColumns
from chessdata.html_text import (
    cell_text,
    cells_of,
    clean,
    extract_href,
    has_header_cell,
    is_data_row,
    parse_int,
    parse_locale_float,
    resolve_href,
    row_tail,
    split_rows,
)
from chessdata.models import StandingRow
from chessdata.teams import is_home_club

logger = logging.getLogger(__name__)

_TEAM_HEADER_LABELS = ("mannschaft", "team", "družstvo", "druzstvo")
_TEAM_LINK_MARKERS = ("snr=", "art=")
_MAX_COLUMN_SHIFT = 2


def header_team_offset(html: str, columns: StandingsColumns) -> int:
    """Offset of the team column in the header row versus columns.team.

    Returns 0 when there is no header or it has no recognisable team label.
    """
    for row in split_rows(html):
        if not has_header_cell(row):
            continue
        labels = [clean(c).lower() for c in row.split("</th>")]
        for i, label in enumerate(labels):
            if any(label.startswith(t) for t in _TEAM_HEADER_LABELS):
                offset = i - columns.team
                if abs(offset) > _MAX_COLUMN_SHIFT:
                    logger.warning("Ignoring team header at column %d", i)
                    return 0
                if offset:
                    logger.warning(
                        "Standings header has team column at %d, expected %d",
                        i, columns.team,
                    )
                return offset
    return 0


def _team_cell_index(cells: list[str], default: int) -> int:
    """Index of the cell linking to the team page, nearest the default column."""
    lo = max(1, default - _MAX_COLUMN_SHIFT)
    hi = min(len(cells), default + _MAX_COLUMN_SHIFT + 1)
    for i in sorted(range(lo, hi), key=lambda i: abs(i - default)):
        href = extract_href(cells[i])
        if href and any(m in cells[i] for m in _TEAM_LINK_MARKERS):
            return i
    return default


def _number(cells: list[str], index: int, field: str) -> float:
    value = parse_locale_float(cell_text(cells, index))
    if value is None:
        logger.debug("Non-numeric %s cell %d, using 0", field, index)
        return 0.0
    return value


def _count(cells: list[str], index: int) -> int:
    value = parse_int(cell_text(cells, index))
    return value if value is not None and value >= 0 else 0


def parse_standings_row(
    row: str,
    source_url: str,
    columns: StandingsColumns,
) -> StandingRow | None:
    """Parse one CRg1/CRg2 row; None when it has no rank or team."""
    cells = cells_of(row_tail(row))
    if len(cells) <= columns.team:
        return None

    team_idx = _team_cell_index(cells, columns.team)
    cols = columns.shifted(team_idx - columns.team)

    rank = parse_int(cell_text(cells, cols.rank))
    team = cell_text(cells, cols.team)
    if rank is None or not team:
        return None

    return StandingRow(
        rank=rank,
        team=team,
        games=_count(cells, cols.games),
        wins=_count(cells, cols.wins),
        draws=_count(cells, cols.draws),
        losses=_count(cells, cols.losses),
        points=_number(cells, cols.points, "points"),
        score=_number(cells, cols.score, "score"),
        is_home_club=is_home_club(team),
        details_url=resolve_href(extract_href(cells[cols.team]), source_url),
    )


def parse_standings_page(
    html: str,
    source_url: str,
    columns: StandingsColumns = config.DEFAULT_STANDINGS_COLUMNS,
) -> list[StandingRow]:
    """Parse a standings page into rows ordered by rank.

    Rows without a numeric rank or a team name are skipped; duplicate ranks
    keep their first occurrence.
    """
    columns = columns.shifted(header_team_offset(html, columns))
    rows: list[StandingRow] = []
    skipped = 0

    for fragment in split_rows(html):
        if not is_data_row(fragment):
            continue
        row = parse_standings_row(fragment, source_url, columns)
        if row is None:
            skipped += 1
            continue
        rows.append(row)

    rows.sort(key=lambda r: r.rank)
    unique: list[StandingRow] = []
    seen: set[int] = set()
    for row in rows:
        if row.rank in seen:
            logger.warning("Duplicate rank %d (%s) dropped", row.rank, row.team)
            continue
        seen.add(row.rank)
        unique.append(row)

    logger.info(
        "Parsed %d standings rows from %s (skipped %d)",
        len(unique), source_url, skipped,
    )
    return unique


def parse_chesscz_standings(html: str, source_url: str) -> list[StandingRow]:
    """Legacy chess.cz team table: rank, team link and bold match points."""
    logger.warning("Using deprecated chess.cz standings parser for %s", source_url)
    soup = BeautifulSoup(html, "html.parser")
    rows: list[StandingRow] = []

    for tr in soup.find_all("tr"):
        link = tr.find("a", href=re.compile("druzstvo"))
        cells = tr.find_all("td")
        if not link or not cells:
            continue
        rank = parse_int(cells[0].get_text(strip=True))
        team = link.get_text(strip=True)
        if rank is None or not team:
            continue

        bold = tr.find("b")
        points = parse_int(bold.get_text(strip=True)) if bold else None

        rows.append(StandingRow(
            rank=rank,
            team=team,
            points=float(points) if points is not None else 0.0,
            is_home_club=is_home_club(team),
            details_url=resolve_href(link.get("href"), source_url),
        ))
        if len(rows) >= config.CHESSCZ_MAX_ROWS:
            break

    rows.sort(key=lambda r: r.rank)
    logger.info("Parsed %d chess.cz standings rows from %s", len(rows), source_url)
    return rows

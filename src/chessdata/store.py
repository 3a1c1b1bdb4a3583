"""Standings snapshot CSV with whole-competition replace."""

import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path

from chessdata.models import CompetitionSnapshot, StandingRow, TeamFixture

logger = logging.getLogger(__name__)

STANDINGS_COLUMNS = [
    "competition_id", "rank", "team", "games", "wins", "draws", "losses",
    "points", "score", "is_home_club", "details_url", "schedule_json",
    "updated_at",
]
SORT_COLUMNS = ["competition_id", "rank"]


def _read_csv(path: Path) -> list[dict]:
    """Read existing CSV file, return list of dicts. Empty list if missing."""
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def _write_csv(path: Path, rows: list[dict], fieldnames: list[str]) -> None:
    """Write rows to CSV with LF line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(
            f, fieldnames=fieldnames, quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        writer.writeheader()
        writer.writerows(rows)
    tmp.replace(path)


def _sort_rows(rows: list[dict]) -> list[dict]:
    def sort_key(row: dict) -> tuple:
        try:
            rank = int(row.get("rank", ""))
        except (ValueError, TypeError):
            rank = 0
        return (row.get("competition_id", ""), rank)

    return sorted(rows, key=sort_key)


def _row_to_dict(competition_id: str, row: StandingRow, updated_at: str) -> dict:
    return {
        "competition_id": competition_id,
        "rank": str(row.rank),
        "team": row.team,
        "games": str(row.games),
        "wins": str(row.wins),
        "draws": str(row.draws),
        "losses": str(row.losses),
        "points": str(row.points),
        "score": str(row.score),
        "is_home_club": "T" if row.is_home_club else "F",
        "details_url": row.details_url or "",
        "schedule_json": json.dumps(
            [asdict(f) for f in row.schedule], ensure_ascii=False,
        ),
        "updated_at": updated_at,
    }


def _dict_to_row(d: dict) -> StandingRow:
    schedule = [TeamFixture(**f) for f in json.loads(d.get("schedule_json") or "[]")]
    return StandingRow(
        rank=int(d["rank"]),
        team=d["team"],
        games=int(d.get("games") or 0),
        wins=int(d.get("wins") or 0),
        draws=int(d.get("draws") or 0),
        losses=int(d.get("losses") or 0),
        points=float(d.get("points") or 0),
        score=float(d.get("score") or 0),
        is_home_club=d.get("is_home_club") == "T",
        details_url=d.get("details_url") or None,
        schedule=schedule,
    )


def replace_competition_standings(path: Path, snapshot: CompetitionSnapshot) -> bool:
    """Replace one competition's stored rows with a fresh snapshot.

    A failed or empty snapshot never replaces stored rows: stale standings
    are kept rather than erased. Returns whether the file was written.
    """
    if snapshot.error or not snapshot.standings:
        logger.warning(
            "Skipping store update for %s: %s",
            snapshot.competition_id, snapshot.error or "no standings parsed",
        )
        return False

    existing = _read_csv(path)
    kept = [r for r in existing if r.get("competition_id") != snapshot.competition_id]
    removed = len(existing) - len(kept)

    kept.extend(
        _row_to_dict(snapshot.competition_id, row, snapshot.updated_at)
        for row in snapshot.standings
    )
    kept = _sort_rows(kept)
    _write_csv(path, kept, STANDINGS_COLUMNS)
    logger.info(
        "Replaced standings for %s: removed %d, added %d -> %d total rows in %s",
        snapshot.competition_id, removed, len(snapshot.standings), len(kept), path,
    )
    return True


def load_competition_standings(path: Path, competition_id: str) -> list[StandingRow]:
    rows = [_dict_to_row(d) for d in _read_csv(path)
            if d.get("competition_id") == competition_id]
    return sorted(rows, key=lambda r: r.rank)


def load_all_standings(path: Path) -> dict[str, list[StandingRow]]:
    """All stored snapshots keyed by competition id."""
    result: dict[str, list[StandingRow]] = {}
    for d in _sort_rows(_read_csv(path)):
        result.setdefault(d["competition_id"], []).append(_dict_to_row(d))
    return result


def stored_updated_at(path: Path, competition_id: str) -> str | None:
    for d in _read_csv(path):
        if d.get("competition_id") == competition_id:
            return d.get("updated_at") or None
    return None

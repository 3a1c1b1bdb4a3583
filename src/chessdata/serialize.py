"""JSON shapes handed to the website frontend."""

from dataclasses import asdict, is_dataclass
from typing import Any

from chessdata.models import BoardResult, CompetitionSnapshot, StandingRow


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def to_json(value: Any) -> Any:
    """Dataclasses to dicts with camelCase keys, recursively."""
    if isinstance(value, BoardResult) and value.is_raw:
        return {"raw": value.raw}
    if is_dataclass(value) and not isinstance(value, type):
        return {camel(k): to_json(getattr(value, k)) for k in asdict(value)}
    if isinstance(value, dict):
        return {camel(str(k)): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def board_json(board: BoardResult) -> dict:
    data = to_json(board)
    if not board.is_raw:
        data.pop("raw", None)
    return data


def standing_json(row: StandingRow) -> dict:
    data = to_json(row)
    data["isBizuterie"] = row.is_home_club
    return data


def competition_json(snapshot: CompetitionSnapshot) -> dict:
    data = {
        "competitionId": snapshot.competition_id,
        "name": snapshot.name,
        "url": snapshot.url,
        "category": snapshot.category,
        "standings": [standing_json(r) for r in snapshot.standings],
        "updatedAt": snapshot.updated_at,
    }
    if snapshot.error:
        data["error"] = snapshot.error
    return data

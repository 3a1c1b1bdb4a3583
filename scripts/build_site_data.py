"""Build JSON data files for the club website from stored standings.

Usage:
    python scripts/build_site_data.py --competitions competitions.json
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path

from chessdata.serialize import standing_json, to_json
from chessdata.service import load_competitions
from chessdata.store import load_all_standings, stored_updated_at
from chessdata.teams import team_letter

ROOT = Path(__file__).resolve().parent.parent
STANDINGS_CSV = ROOT / "data" / "standings.csv"
OUT_DIR = ROOT / "docs" / "data"


def write_json(filename: str, data: object) -> None:
    path = OUT_DIR / filename
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(f"  wrote {path} ({path.stat().st_size:,} bytes)")


def build_standings(competitions, stored) -> dict:
    """The document behind the standings page, one entry per competition."""
    entries = []
    for comp in sorted(competitions, key=lambda c: (c.category, c.name)):
        entries.append({
            "competitionId": comp.id,
            "name": comp.name,
            "url": comp.url,
            "category": comp.category,
            "updatedAt": stored_updated_at(STANDINGS_CSV, comp.id),
            "standings": [standing_json(r) for r in stored.get(comp.id, [])],
        })
    return {
        "standings": entries,
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }


def build_upcoming_matches(competitions, stored) -> list[dict]:
    """Unplayed fixtures of our teams, ordered by competition and round."""
    matches = []
    for comp in competitions:
        for row in stored.get(comp.id, []):
            if not row.is_home_club:
                continue
            for fixture in row.schedule:
                if fixture.result and fixture.result != "-":
                    continue
                item = to_json(fixture)
                item.update({
                    "competitionId": comp.id,
                    "competition": comp.name,
                    "team": row.team,
                    "teamLetter": team_letter(row.team),
                })
                matches.append(item)
    return sorted(matches, key=lambda m: (m["competitionId"], m["round"]))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--competitions", type=Path, required=True)
    args = parser.parse_args()

    OUT_DIR.mkdir(parents=True, exist_ok=True)
    print("Loading data...")
    competitions = load_competitions(args.competitions)
    stored = load_all_standings(STANDINGS_CSV)
    print(f"  {len(competitions):,} competitions, {len(stored):,} with standings")

    print("Building standings.json...")
    write_json("standings.json", build_standings(competitions, stored))

    print("Building upcoming_matches.json...")
    write_json("upcoming_matches.json", build_upcoming_matches(competitions, stored))

    print("Done!")


if __name__ == "__main__":
    main()

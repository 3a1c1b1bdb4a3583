"""Tests for chessdata.store."""

import csv
from pathlib import Path

from chessdata.models import CompetitionSnapshot, StandingRow, TeamFixture
from chessdata.store import (
    STANDINGS_COLUMNS,
    load_all_standings,
    load_competition_standings,
    replace_competition_standings,
    stored_updated_at,
)


def _read_csv_rows(path: Path) -> list[dict]:
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def _make_snapshot(competition_id: str = "kp", **overrides) -> CompetitionSnapshot:
    defaults = dict(
        competition_id=competition_id,
        name="Krajský přebor",
        url="https://s2.chess-results.com/tnr1.aspx?lan=5&art=46",
        category="adult",
        standings=[
            StandingRow(rank=2, team="Sokol Turnov", games=7, points=10.0, score=20.5),
            StandingRow(rank=1, team='TJ Bižuterie Jablonec "A"', games=7, points=13.0,
                        score=27.5, is_home_club=True),
        ],
        updated_at="2025-11-12T10:00:00+00:00",
    )
    defaults.update(overrides)
    return CompetitionSnapshot(**defaults)


class TestReplaceCompetitionStandings:
    def test_writes_header_and_rows(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        assert replace_competition_standings(path, _make_snapshot())
        rows = _read_csv_rows(path)
        assert len(rows) == 2
        assert list(rows[0].keys()) == STANDINGS_COLUMNS

    def test_sorted_by_rank(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        replace_competition_standings(path, _make_snapshot())
        assert [r["rank"] for r in _read_csv_rows(path)] == ["1", "2"]

    def test_lf_line_endings(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        replace_competition_standings(path, _make_snapshot())
        raw = path.read_bytes()
        assert b"\r\n" not in raw

    def test_replaces_only_one_competition(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        replace_competition_standings(path, _make_snapshot("kp"))
        replace_competition_standings(path, _make_snapshot("ks"))
        fresh = _make_snapshot("kp", standings=[StandingRow(rank=1, team="Nový tým")])
        replace_competition_standings(path, fresh)

        stored = load_all_standings(path)
        assert [r.team for r in stored["kp"]] == ["Nový tým"]
        assert len(stored["ks"]) == 2

    def test_empty_snapshot_keeps_previous(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        replace_competition_standings(path, _make_snapshot())
        before = path.read_bytes()

        assert not replace_competition_standings(path, _make_snapshot(standings=[]))
        assert path.read_bytes() == before

    def test_failed_snapshot_keeps_previous(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        replace_competition_standings(path, _make_snapshot())
        before = load_competition_standings(path, "kp")

        failed = _make_snapshot(error="HTTP 503 for https://s2.chess-results.com/tnr1.aspx")
        assert not replace_competition_standings(path, failed)
        assert load_competition_standings(path, "kp") == before

    def test_empty_snapshot_without_file(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        assert not replace_competition_standings(path, _make_snapshot(standings=[]))
        assert not path.exists()


class TestLoad:
    def test_round_trip_fields(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        row = StandingRow(
            rank=1, team='TJ Bižuterie Jablonec "A"', games=7, wins=6, draws=1,
            points=13.0, score=27.5, is_home_club=True,
            details_url="https://s2.chess-results.com/tnr1.aspx?snr=3",
            schedule=[TeamFixture(round=8, date="TBD", opponent="Sokol Turnov",
                                  result=None, is_home=True)],
        )
        replace_competition_standings(path, _make_snapshot(standings=[row]))
        assert load_competition_standings(path, "kp") == [row]

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_competition_standings(tmp_path / "none.csv", "kp") == []
        assert load_all_standings(tmp_path / "none.csv") == {}

    def test_updated_at(self, tmp_path: Path) -> None:
        path = tmp_path / "standings.csv"
        replace_competition_standings(path, _make_snapshot())
        assert stored_updated_at(path, "kp") == "2025-11-12T10:00:00+00:00"
        assert stored_updated_at(path, "other") is None

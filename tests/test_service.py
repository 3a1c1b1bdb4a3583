"""Tests for chessdata.service with a fake page fetcher."""

import json
import threading
from pathlib import Path

import pytest

from chessdata.cache import TTLCache
from chessdata.models import Competition
from chessdata.service import TournamentExtractor, is_chess_results, load_competitions
from chessdata.store import load_competition_standings, replace_competition_standings
from chessdata.util import ConfigError, FetchError, ParseError

KP_URL = "https://s2.chess-results.com/tnr100.aspx?lan=5&art=46&SNode=S0"
KS_URL = "https://s2.chess-results.com/tnr200.aspx?lan=5&art=46"


class FakeFetch:
    """Serves pages by URL substring and records every request."""

    def __init__(self, pages: dict) -> None:
        self.pages = pages
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str) -> str:
        with self._lock:
            self.calls.append(url)
        for marker, page in self.pages.items():
            if marker in url:
                if isinstance(page, Exception):
                    raise page
                return page
        raise FetchError(f"HTTP 404 for {url}")


def _competition(comp_id: str = "kp", url: str = KP_URL, **kwargs) -> Competition:
    return Competition(id=comp_id, name=comp_id.upper(), url=url, **kwargs)


class TestLoadCompetitions:
    def test_reads_list(self, tmp_path: Path) -> None:
        path = tmp_path / "competitions.json"
        path.write_text(json.dumps([
            {"id": "kp", "name": "Krajský přebor", "url": KP_URL, "category": "adult"},
            {"id": "2025-kp-liberec", "name": "KP Liberec", "chessczUrl": "https://www.chess.cz/soutez/x/",
             "active": False},
        ]), encoding="utf-8")

        competitions = load_competitions(path)
        assert [c.id for c in competitions] == ["kp", "2025-kp-liberec"]
        assert competitions[0].category == "adult"
        assert competitions[1].category == "youth"
        assert competitions[1].chesscz_url == "https://www.chess.cz/soutez/x/"
        assert competitions[1].active is False

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_competitions(tmp_path / "missing.json")

    def test_not_a_list(self, tmp_path: Path) -> None:
        path = tmp_path / "competitions.json"
        path.write_text('{"id": "kp"}', encoding="utf-8")
        with pytest.raises(ConfigError):
            load_competitions(path)

    def test_entry_without_id(self, tmp_path: Path) -> None:
        path = tmp_path / "competitions.json"
        path.write_text('[{"name": "KP"}]', encoding="utf-8")
        with pytest.raises(ConfigError):
            load_competitions(path)


class TestRefreshCompetition:
    def test_standings_with_schedule(self, standings_html: str, schedule_html: str) -> None:
        fetch = FakeFetch({"tnr100.aspx?lan=5&art=46": standings_html,
                           "tnr100.aspx?lan=5&art=2": schedule_html})
        snapshot = TournamentExtractor(fetch=fetch).refresh_competition(_competition())

        assert snapshot.error is None
        assert [r.rank for r in snapshot.standings] == [1, 2, 3, 4]
        home = next(r for r in snapshot.standings if r.is_home_club)
        assert [f.round for f in home.schedule] == [1, 2]
        others = [r for r in snapshot.standings if not r.is_home_club]
        assert all(r.schedule == [] for r in others)

    def test_schedule_failure_tolerated(self, standings_html: str) -> None:
        fetch = FakeFetch({"tnr100.aspx?lan=5&art=46": standings_html,
                           "art=2": FetchError("HTTP 500 for schedule")})
        snapshot = TournamentExtractor(fetch=fetch).refresh_competition(_competition())
        assert snapshot.error is None
        assert len(snapshot.standings) == 4

    def test_fetch_error_recorded(self) -> None:
        fetch = FakeFetch({"tnr100": FetchError("HTTP 503 for tnr100")})
        snapshot = TournamentExtractor(fetch=fetch).refresh_competition(_competition())
        assert snapshot.standings == []
        assert "HTTP 503" in snapshot.error

    def test_empty_page_is_an_error(self) -> None:
        fetch = FakeFetch({"tnr100": "<html><body>Maintenance</body></html>"})
        snapshot = TournamentExtractor(fetch=fetch).refresh_competition(_competition())
        assert snapshot.standings == []
        assert "No standings rows" in snapshot.error

    def test_unexpected_error_recorded(self) -> None:
        fetch = FakeFetch({"tnr100": RuntimeError("boom")})
        snapshot = TournamentExtractor(fetch=fetch).refresh_competition(_competition())
        assert snapshot.error == "boom"

    def test_chesscz_competition(self, chesscz_html: str) -> None:
        fetch = FakeFetch({"chess.cz/soutez/2025-kp-liberec": chesscz_html})
        comp = _competition("2025-kp-liberec", url="")
        snapshot = TournamentExtractor(fetch=fetch).refresh_competition(comp)
        assert [r.team for r in snapshot.standings][:1] == ["TJ Bižuterie Jablonec A"]
        assert fetch.calls == ["https://www.chess.cz/soutez/2025-kp-liberec/"]


class TestRefreshAll:
    def test_failure_isolated_per_competition(self, standings_html: str, schedule_html: str) -> None:
        fetch = FakeFetch({
            "tnr100.aspx?lan=5&art=46": standings_html,
            "tnr100.aspx?lan=5&art=2": schedule_html,
            "tnr200": FetchError("HTTP 503 for tnr200"),
        })
        snapshots = TournamentExtractor(fetch=fetch).refresh_all(
            [_competition("kp"), _competition("ks", url=KS_URL)]
        )
        assert [s.competition_id for s in snapshots] == ["kp", "ks"]
        assert len(snapshots[0].standings) == 4
        assert snapshots[1].error is not None

    def test_inactive_skipped(self, standings_html: str) -> None:
        fetch = FakeFetch({"tnr100": standings_html})
        snapshots = TournamentExtractor(fetch=fetch).refresh_all(
            [_competition("kp", active=False)]
        )
        assert snapshots == []
        assert fetch.calls == []

    def test_failed_refresh_keeps_stored_standings(self, tmp_path: Path, standings_html: str) -> None:
        path = tmp_path / "standings.csv"
        good = FakeFetch({"tnr100": standings_html})
        for snapshot in TournamentExtractor(fetch=good).refresh_all([_competition()]):
            replace_competition_standings(path, snapshot)
        before = load_competition_standings(path, "kp")

        empty = FakeFetch({"tnr100": "<html></html>"})
        for snapshot in TournamentExtractor(fetch=empty).refresh_all([_competition()]):
            replace_competition_standings(path, snapshot)
        assert load_competition_standings(path, "kp") == before
        assert len(before) == 4


class TestMatchDetails:
    def test_boards_and_cache(self, round_detail_html: str) -> None:
        fetch = FakeFetch({"art=3": round_detail_html})
        extractor = TournamentExtractor(fetch=fetch)

        boards = extractor.fetch_match_details(KP_URL, 2, "Sokol Gama", "DDM Delta")
        again = extractor.fetch_match_details(KP_URL, 2, "Sokol Gama", "DDM Delta")
        assert len(boards) == 4
        assert again == boards
        assert fetch.calls == ["https://s2.chess-results.com/tnr100.aspx?lan=5&art=3&rd=2"]

    def test_not_found_not_cached(self, round_detail_html: str) -> None:
        fetch = FakeFetch({"art=3": round_detail_html})
        extractor = TournamentExtractor(fetch=fetch)

        assert extractor.fetch_match_details(KP_URL, 2, "Sokol Gama", "TJ Zeta") == []
        assert extractor.fetch_match_details(KP_URL, 2, "Sokol Gama", "TJ Zeta") == []
        assert len(fetch.calls) == 2

    def test_fetch_error_gives_empty(self) -> None:
        fetch = FakeFetch({"art=3": FetchError("HTTP 500")})
        assert TournamentExtractor(fetch=fetch).fetch_match_details(KP_URL, 2, "A", "B") == []

    def test_injected_cache(self, round_detail_html: str) -> None:
        cache = TTLCache(60, 4)
        extractor = TournamentExtractor(cache=cache, fetch=FakeFetch({"art=3": round_detail_html}))
        extractor.fetch_match_details(KP_URL, 2, "Sokol Gama", "DDM Delta")
        assert len(cache) == 1


class TestRosterAndPlayers:
    def test_roster_cached(self, roster_html: str) -> None:
        fetch = FakeFetch({"art=1": roster_html})
        extractor = TournamentExtractor(fetch=fetch)

        players = extractor.fetch_roster(KP_URL, 5)
        extractor.fetch_roster(KP_URL, "5")
        assert len(players) == 3
        assert fetch.calls == ["https://s2.chess-results.com/tnr100.aspx?lan=5&art=1&snr=5"]

    def test_roster_fetch_error(self) -> None:
        fetch = FakeFetch({"art=1": FetchError("HTTP 500")})
        assert TournamentExtractor(fetch=fetch).fetch_roster(KP_URL, 5) == []

    def test_player_list(self, players_startlist_html: str) -> None:
        url = "https://s1.chess-results.com/tnr1310849.aspx?lan=5&art=0"
        result = TournamentExtractor(fetch=FakeFetch({"tnr1310849": players_startlist_html})).fetch_player_list(url)
        assert result.count == 2

    def test_rosada_profile(self, rosada_html: str) -> None:
        fetch = FakeFetch({"rosada.cz": rosada_html})
        profile = TournamentExtractor(fetch=fetch).fetch_rosada_profile("12345")
        assert profile.elo_cr == "2097"
        assert fetch.calls == ["https://elo.rosada.cz/lide/id.php?id=12345"]

    def test_rosada_invalid_id(self) -> None:
        fetch = FakeFetch({})
        with pytest.raises(ParseError):
            TournamentExtractor(fetch=fetch).fetch_rosada_profile("12; drop")
        assert fetch.calls == []


def test_is_chess_results() -> None:
    assert is_chess_results(KP_URL)
    assert not is_chess_results("https://www.chess.cz/soutez/x/")
    assert not is_chess_results("")

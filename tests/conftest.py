"""Shared pytest fixtures for loading HTML test fixtures."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture()
def standings_html() -> str:
    return (FIXTURES_DIR / "standings_sample.html").read_text(encoding="utf-8")


@pytest.fixture()
def schedule_html() -> str:
    return (FIXTURES_DIR / "schedule_sample.html").read_text(encoding="utf-8")


@pytest.fixture()
def round_detail_html() -> str:
    return (FIXTURES_DIR / "round_detail_sample.html").read_text(encoding="utf-8")


@pytest.fixture()
def roster_html() -> str:
    return (FIXTURES_DIR / "roster_sample.html").read_text(encoding="utf-8")


@pytest.fixture()
def players_startlist_html() -> str:
    return (FIXTURES_DIR / "players_startlist.html").read_text(encoding="utf-8")


@pytest.fixture()
def players_results_html() -> str:
    return (FIXTURES_DIR / "players_results.html").read_text(encoding="utf-8")


@pytest.fixture()
def chesscz_html() -> str:
    return (FIXTURES_DIR / "chesscz_sample.html").read_text(encoding="utf-8")


@pytest.fixture()
def rosada_html() -> str:
    return (FIXTURES_DIR / "rosada_sample.html").read_text(encoding="utf-8")

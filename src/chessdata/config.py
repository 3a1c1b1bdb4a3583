"""Runtime settings. Every value can be overridden from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

USER_AGENT = os.environ.get(
    "CHESSDATA_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
REQUEST_TIMEOUT = float(os.environ.get("CHESSDATA_TIMEOUT", "15"))
MAX_RETRIES = int(os.environ.get("CHESSDATA_MAX_RETRIES", "3"))
BACKOFF_BASE = 1  # seconds, doubled after each failed attempt
SLEEP_MIN = 0.5
SLEEP_MAX = 1.5
MIN_PAGE_LENGTH = 500  # shorter 200 responses are treated as blocked

CACHE_TTL = float(os.environ.get("CHESSDATA_CACHE_TTL", "600"))
CACHE_MAX_ENTRIES = int(os.environ.get("CHESSDATA_CACHE_MAX_ENTRIES", "256"))
MAX_WORKERS = int(os.environ.get("CHESSDATA_MAX_WORKERS", "4"))

DATA_DIR = Path(os.environ.get("CHESSDATA_DATA_DIR", "data"))

CHESS_RESULTS_HOST = "chess-results.com"
CHESSCZ_URL = "https://www.chess.cz/soutez/{id}/"
CHESSCZ_MAX_ROWS = 12
ROSADA_URL = "https://elo.rosada.cz/lide/id.php?id={id}"

# Query parameter values selecting a chess-results view
ART_ROSTER = 1
ART_SCHEDULE = 2
ART_BOARDS = 3
ART_STANDINGS = 46


@dataclass(frozen=True)
class StandingsColumns:
    """Cell offsets of the team standings table.

    Observed on chess-results art=46 pages; the site publishes no contract
    for it.
    """

    rank: int = 0
    team: int = 2
    games: int = 3
    wins: int = 4
    draws: int = 5
    losses: int = 6
    points: int = 7
    score: int = 8

    def shifted(self, offset: int) -> "StandingsColumns":
        """Columns after the team cell moved by offset; rank stays put."""
        if offset == 0:
            return self
        return StandingsColumns(
            rank=self.rank,
            team=self.team + offset,
            games=self.games + offset,
            wins=self.wins + offset,
            draws=self.draws + offset,
            losses=self.losses + offset,
            points=self.points + offset,
            score=self.score + offset,
        )


DEFAULT_STANDINGS_COLUMNS = StandingsColumns()

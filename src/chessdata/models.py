"""Data models."""

from dataclasses import dataclass, field


@dataclass
class Competition:
    id: str
    name: str
    url: str
    category: str = "youth"
    active: bool = True
    chesscz_url: str | None = None


@dataclass
class ScheduleEntry:
    round: int
    date: str | None
    home: str
    away: str
    result: str | None  # "5 : 1", None when unplayed


@dataclass
class TeamFixture:
    round: int
    date: str  # "TBD" when the source has no date
    opponent: str
    result: str | None
    is_home: bool


@dataclass
class StandingRow:
    rank: int
    team: str
    games: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: float = 0.0
    score: float = 0.0
    is_home_club: bool = False
    details_url: str | None = None
    schedule: list[TeamFixture] = field(default_factory=list)


@dataclass
class CompetitionSnapshot:
    competition_id: str
    name: str
    url: str
    category: str
    standings: list[StandingRow]
    updated_at: str  # ISO format
    error: str | None = None


@dataclass
class BoardResult:
    board: str = ""
    home_player: str = ""
    home_elo: str = ""
    guest_player: str = ""
    guest_elo: str = ""
    result: str = ""
    raw: str | None = None  # set instead of the fields above for short rows

    @property
    def is_raw(self) -> bool:
        return self.raw is not None


@dataclass
class RosterPlayer:
    rank: int
    name: str
    elo: int | None
    perf: int | None
    round_results: list[str]
    played: int
    points: float
    score: str  # "4.5/7" or "-"


@dataclass
class PlayerEntry:
    rank: str
    name: str
    elo: str
    club: str
    fed: str
    points: str
    is_result: bool


@dataclass
class PlayerListResult:
    players: list[PlayerEntry]
    count: int
    type: str  # results / startlist


@dataclass
class RosadaProfile:
    id: str
    elo_cr: str
    elo_fide: str
    url: str

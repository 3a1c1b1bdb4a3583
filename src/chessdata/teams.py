"""Team classification and name matching."""

import re

from chessdata.models import ScheduleEntry, StandingRow, TeamFixture

_TEAM_LETTER = re.compile(r'"([ABCD])"')
_ELO = re.compile(r"^(\d+|-)$")
_IDENTIFIER = re.compile(r"^(A|B|C|D|E|F|G|L|JR\d+)$", re.IGNORECASE)
_HOME_CLUB_NAMES = ("bižuterie", "bizuterie")
_HOME_TOWN = "jablonec"
_HOME_TOWN_CLUB_TAGS = ("tj", "šk", "sk", "ddm")


def is_home_club(team: str) -> bool:
    """Whether a team name belongs to our club.

    Any "Jablonec" team carrying a club tag (TJ, ŠK, SK, DDM) counts.
    """
    name = team.lower()
    if any(n in name for n in _HOME_CLUB_NAMES):
        return True
    if _HOME_TOWN in name and any(t in name for t in _HOME_TOWN_CLUB_TAGS):
        return True
    return False


def team_letter(team: str) -> str | None:
    """Squad letter from a name like 'TJ Bižuterie "B"'."""
    m = _TEAM_LETTER.search(team)
    return m.group(1) if m else None


def is_elo(text: str) -> bool:
    return bool(text) and _ELO.match(text.strip()) is not None


def simplify(name: str) -> str:
    name = name.lower().replace("n.n.", "")
    name = re.sub(r"[\"']", "", name)
    return re.sub(r"\s+", " ", name).strip()


def is_match(team: str, text: str) -> bool:
    """Fuzzy test whether team appears in text (a row or a fixture side)."""
    simple_team = simplify(team)
    lower = text.lower()

    if simple_team and simple_team in lower:
        return True

    parts = re.sub(r"[\"']", "", team).split()
    last = parts[-1] if parts else ""
    # Squad letters separate "A" from "B" teams of the same club
    if last and (len(last) == 1 or _IDENTIFIER.match(last)):
        ident = re.escape(last.lower())
        if not re.search(rf"(^|\s|[\"']){ident}($|\s|[\"'])", lower):
            return False

    long_words = [w for w in simple_team.split(" ") if len(w) > 2]
    digit_word = next((w for w in long_words if re.search(r"\d", w)), None)
    if digit_word and digit_word not in lower:
        return False

    if not long_words:
        return bool(simple_team) and simple_team in lower

    hits = sum(1 for w in long_words if w in lower)
    return hits >= len(long_words) * 0.6


def team_schedule(team: str, entries: list[ScheduleEntry]) -> list[TeamFixture]:
    """Fixtures of one team, seen from that team's side."""
    fixtures: list[TeamFixture] = []
    for entry in entries:
        if is_match(team, entry.home):
            is_home = True
        elif is_match(team, entry.away):
            is_home = False
        else:
            continue
        fixtures.append(TeamFixture(
            round=entry.round,
            date=entry.date or "TBD",
            opponent=entry.away if is_home else entry.home,
            result=entry.result,
            is_home=is_home,
        ))
    return fixtures


def attach_schedules(
    standings: list[StandingRow],
    entries: list[ScheduleEntry],
) -> None:
    """Give every home-club row its filtered schedule."""
    for row in standings:
        if row.is_home_club:
            row.schedule = team_schedule(row.team, entries)


def _squash(name: str) -> str:
    return re.sub(r"[\s\"']", "", name.lower())


def find_team(standings: list[StandingRow], team_name: str) -> StandingRow | None:
    """Look a team up by name; its rank doubles as the roster ``snr``."""
    wanted = _squash(team_name)
    if wanted:
        for row in standings:
            have = _squash(row.team)
            if have and (wanted in have or have in wanted):
                return row

    lower = team_name.lower()
    for row in standings:
        team = row.team.lower()
        if team and (team in lower or lower in team):
            return row
    return None

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from rally_engine.config import SCHEMA_VERSION


class Side(str, Enum):
    HOME = "Home"
    AWAY = "Away"

    def opponent(self) -> "Side":
        return Side.AWAY if self is Side.HOME else Side.HOME


class MatchStatus(str, Enum):
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"


class Category(str, Enum):
    SERVE = "Serve"
    HIT = "Hit"
    BLOCK = "Block"


class Outcome(str, Enum):
    SCORED = "Scored"
    FAULT = "Fault"
    NEUTRAL = "Neutral"


# Landing zones that are not a court position
OUT_OF_BOUNDS = "0"
NET = "N"


# --- STATISTICS ---

@dataclass(frozen=True)
class PlayerScores:
    scored: int = 0
    faults: int = 0
    all: int = 0

    def record(self, outcome: Outcome, point_ending: bool) -> "PlayerScores":
        scored = self.scored
        faults = self.faults

        if outcome is Outcome.SCORED and point_ending:
            scored += 1
        elif outcome is Outcome.FAULT:
            faults += 1

        return PlayerScores(scored=scored, faults=faults, all=self.all + 1)

    def to_dict(self) -> Dict[str, int]:
        return {"scored": self.scored, "faults": self.faults, "all": self.all}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PlayerScores":
        return PlayerScores(
            scored=int(d.get("scored", 0)),
            faults=int(d.get("faults", 0)),
            all=int(d.get("all", 0)),
        )


BUCKETS = {
    Category.HIT: "hits",
    Category.BLOCK: "blocks",
    Category.SERVE: "serves",
}


@dataclass(frozen=True)
class PlayerStats:
    player: int
    hits: PlayerScores = field(default_factory=PlayerScores)
    blocks: PlayerScores = field(default_factory=PlayerScores)
    serves: PlayerScores = field(default_factory=PlayerScores)

    def with_action(self, category: Category, outcome: Outcome, point_ending: bool) -> "PlayerStats":
        name = BUCKETS[category]
        updated = getattr(self, name).record(outcome, point_ending)
        return replace(self, **{name: updated})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player,
            "hits": self.hits.to_dict(),
            "blocks": self.blocks.to_dict(),
            "serves": self.serves.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PlayerStats":
        return PlayerStats(
            player=int(d["player"]),
            hits=PlayerScores.from_dict(d.get("hits", {}) or {}),
            blocks=PlayerScores.from_dict(d.get("blocks", {}) or {}),
            serves=PlayerScores.from_dict(d.get("serves", {}) or {}),
        )


# --- MATCH STATE ---

@dataclass(frozen=True)
class TeamState:
    sets: int = 0
    points: int = 0
    player_stats: Dict[int, PlayerStats] = field(default_factory=dict)

    def knows(self, player: int) -> bool:
        return player in self.player_stats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sets": self.sets,
            "points": self.points,
            "playerStats": {
                str(number): stats.to_dict()
                for number, stats in self.player_stats.items()
            },
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TeamState":
        raw_stats = d.get("playerStats", {}) or {}
        return TeamState(
            sets=int(d.get("sets", 0)),
            points=int(d.get("points", 0)),
            player_stats={
                int(number): PlayerStats.from_dict(stats)
                for number, stats in raw_stats.items()
            },
        )


@dataclass(frozen=True)
class MatchState:
    """
    Whole match record as seen by the display shell.

    Replaced, never mutated: every accepted rally yields a new instance.
    ``serving`` is the side that won the previous rally (None before the
    first one).
    """
    home_team: TeamState = field(default_factory=TeamState)
    away_team: TeamState = field(default_factory=TeamState)
    status: MatchStatus = MatchStatus.IN_PROGRESS
    serving: Optional[Side] = None
    schema_version: int = SCHEMA_VERSION

    @property
    def is_finished(self) -> bool:
        return self.status is MatchStatus.FINISHED

    @property
    def set_number(self) -> int:
        return self.home_team.sets + self.away_team.sets + 1

    def team(self, side: Side) -> TeamState:
        return self.home_team if side is Side.HOME else self.away_team

    def with_team(self, side: Side, team: TeamState) -> "MatchState":
        if side is Side.HOME:
            return replace(self, home_team=team)
        return replace(self, away_team=team)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "homeTeam": self.home_team.to_dict(),
            "awayTeam": self.away_team.to_dict(),
            "status": self.status.value,
            "serving": self.serving.value if self.serving is not None else None,
            "schemaVersion": self.schema_version,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MatchState":
        serving = d.get("serving")
        return MatchState(
            home_team=TeamState.from_dict(d.get("homeTeam", {}) or {}),
            away_team=TeamState.from_dict(d.get("awayTeam", {}) or {}),
            status=MatchStatus(d.get("status", MatchStatus.IN_PROGRESS.value)),
            serving=Side(serving) if serving is not None else None,
            schema_version=int(d.get("schemaVersion", SCHEMA_VERSION)),
        )


# --- RALLY TYPES ---

@dataclass(frozen=True)
class Action:
    """One player's touch within a rally."""
    player: int
    category: Category
    outcome: Outcome
    side: Side
    offset: int = 0
    zone: Optional[str] = None
    serve_position: Optional[str] = None

    @property
    def is_point_ending(self) -> bool:
        return self.outcome is not Outcome.NEUTRAL


@dataclass
class MatchSnapshot:
    rally_index: int
    set_number: int
    home_points: int
    away_points: int
    home_sets: int
    away_sets: int
    is_finished: bool
    serving: Optional[Side]

    @staticmethod
    def from_state(rally_index: int, state: MatchState) -> "MatchSnapshot":
        set_number = state.set_number
        if state.is_finished:
            set_number -= 1

        return MatchSnapshot(
            rally_index=rally_index,
            set_number=set_number,
            home_points=state.home_team.points,
            away_points=state.away_team.points,
            home_sets=state.home_team.sets,
            away_sets=state.away_team.sets,
            is_finished=state.is_finished,
            serving=state.serving,
        )

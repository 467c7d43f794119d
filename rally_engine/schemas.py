"""
JSON boundary for hosts that talk to the engine in camelCase payloads.

Inbound payloads are validated here; the engine itself only ever sees
well-formed MatchState objects.
"""
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from rally_engine.config import RallyConfig, SCHEMA_VERSION
from rally_engine.models import MatchState
from rally_engine.parser import parse_rally


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class PlayerScoresIn(_WireModel):
    scored: int = Field(0, ge=0)
    faults: int = Field(0, ge=0)
    all: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_totals(self) -> "PlayerScoresIn":
        if self.scored + self.faults > self.all:
            raise ValueError("scored + faults must not exceed all")
        return self


class PlayerStatsIn(_WireModel):
    player: int = Field(..., ge=0, le=99)
    hits: PlayerScoresIn = Field(default_factory=PlayerScoresIn)
    blocks: PlayerScoresIn = Field(default_factory=PlayerScoresIn)
    serves: PlayerScoresIn = Field(default_factory=PlayerScoresIn)


class TeamStateIn(_WireModel):
    sets: int = Field(0, ge=0)
    points: int = Field(0, ge=0)
    player_stats: Dict[str, PlayerStatsIn] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_player_keys(self) -> "TeamStateIn":
        for key, stats in self.player_stats.items():
            if key != str(stats.player):
                raise ValueError(f"playerStats key {key!r} does not match player {stats.player}")
        return self


class MatchStateIn(_WireModel):
    home_team: TeamStateIn = Field(default_factory=TeamStateIn)
    away_team: TeamStateIn = Field(default_factory=TeamStateIn)
    status: Literal["InProgress", "Finished"] = "InProgress"
    serving: Optional[Literal["Home", "Away"]] = None
    schema_version: int = SCHEMA_VERSION

    @field_validator("schema_version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value != SCHEMA_VERSION:
            raise ValueError(f"unsupported schemaVersion {value}")
        return value


class ParseRallyRequest(_WireModel):
    current_stats: MatchStateIn
    rally: str


def load_match_state(payload: Dict[str, Any]) -> MatchState:
    """Validate a camelCase payload and build the MatchState it describes."""
    try:
        validated = MatchStateIn.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid match state: {exc}") from exc

    return MatchState.from_dict(validated.model_dump(by_alias=True))


def parse_rally_payload(
    payload: Dict[str, Any],
    config: Optional[RallyConfig] = None,
) -> Dict[str, Any]:
    """
    JSON form of parse_rally: ``{"currentStats": ..., "rally": "..."}`` in,
    ``{"Ok": ...}`` or ``{"Fail": ...}`` out.
    """
    try:
        request = ParseRallyRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid parse_rally request: {exc}") from exc

    state = MatchState.from_dict(request.current_stats.model_dump(by_alias=True))
    return parse_rally(state, request.rally, config).to_dict()

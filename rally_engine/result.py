from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from rally_engine.models import MatchState


class ReasonKey(str, Enum):
    INVALID_INPUT = "InvalidInput"
    WHO_SCORED = "WhoScored"


WHO_SCORED_MSG = (
    "It's ambiguous which team scored: either name the player who touched "
    "the ball last or place the winning team's prefix after the last action."
)


@dataclass(frozen=True)
class Reason:
    key: ReasonKey
    error_msg: str
    location: int = 0

    @staticmethod
    def invalid_input(error_msg: str, location: int = 0) -> "Reason":
        return Reason(key=ReasonKey.INVALID_INPUT, error_msg=error_msg, location=location)

    @staticmethod
    def who_scored(location: int = 0) -> "Reason":
        return Reason(key=ReasonKey.WHO_SCORED, error_msg=WHO_SCORED_MSG, location=location)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errorMsg": self.error_msg,
            "location": self.location,
            "key": self.key.value,
        }


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of one rally: the next MatchState or the reason it was refused.
    Exactly one of ``state`` / ``reason`` is set.
    """
    state: Optional[MatchState] = None
    reason: Optional[Reason] = None

    def __post_init__(self):
        if (self.state is None) == (self.reason is None):
            raise ValueError("ParseResult needs exactly one of state or reason")

    @staticmethod
    def success(state: MatchState) -> "ParseResult":
        return ParseResult(state=state)

    @staticmethod
    def failure(reason: Reason) -> "ParseResult":
        return ParseResult(reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.state is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.state is not None:
            return {"Ok": self.state.to_dict()}
        return {"Fail": self.reason.to_dict()}

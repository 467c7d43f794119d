import threading
from typing import List, Optional

from rally_engine.config import DEFAULT_CONFIG, RallyConfig
from rally_engine.exceptions import MatchFinishedError, RallyError
from rally_engine.models import MatchState
from rally_engine.parser import new_match, parse_rally
from rally_engine.result import ParseResult


class MatchSession:
    """
    Single local match session.

    Responsibilities:
    - Own the current MatchState of one match
    - Run one parse_rally call at a time
    - Bulk replay rally notation (atomic)
    - Keep committed states for undo
    - Export the committed rallies
    """

    def __init__(self, config: Optional[RallyConfig] = None):
        self._config = config or DEFAULT_CONFIG
        self._lock = threading.Lock()
        self._history: List[MatchState] = [new_match()]
        self._rallies: List[str] = []

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return self._history[-1]

    def submit(self, rally: str) -> ParseResult:
        """
        Parse one rally against the current state.
        The state only changes when the result is Ok.
        """
        with self._lock:
            if self.state.is_finished:
                raise MatchFinishedError("Match is already finished")

            result = parse_rally(self.state, rally, self._config)

            if result.is_ok:
                self._history.append(result.state)
                self._rallies.append(rally)

            return result

    def load_rallies(self, rallies: List[str]) -> List[MatchState]:
        """
        Replay rallies from a fresh match.
        Atomic: if any rally fails -> no state mutation.
        The lock is held for the whole replay, so a concurrent submit
        lands either before (and is replaced) or after the load.
        """
        if not isinstance(rallies, list):
            raise ValueError("rallies must be a list")

        with self._lock:
            state = new_match()
            temp_history = [state]

            for rally in rallies:
                if not isinstance(rally, str):
                    raise ValueError("rallies must be strings")

                result = parse_rally(state, rally, self._config)
                if not result.is_ok:
                    raise RallyError(result.reason)

                state = result.state
                temp_history.append(state)

            # If everything succeeds → commit
            self._history = temp_history
            self._rallies = list(rallies)

        return temp_history[1:]

    def get_history(self) -> List[MatchState]:
        with self._lock:
            return list(self._history[1:])

    def undo(self) -> MatchState:
        with self._lock:
            if not self._rallies:
                raise RuntimeError("No rally to undo")

            self._history.pop()
            self._rallies.pop()
            return self.state

    def export_rallies(self) -> List[str]:
        with self._lock:
            return list(self._rallies)

    def reset(self):
        with self._lock:
            self._history = [new_match()]
            self._rallies = []

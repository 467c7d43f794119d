from typing import List, Optional

from rally_engine.config import RallyConfig
from rally_engine.exceptions import RallyError
from rally_engine.models import MatchSnapshot
from rally_engine.parser import new_match, parse_rally


def build_match_timeline(rallies: List[str], config: Optional[RallyConfig] = None) -> List[MatchSnapshot]:
    """
    Replays a match from scratch using rally notation.
    Returns one snapshot after each rally.
    Does NOT mutate external state.
    """

    state = new_match()

    timeline: List[MatchSnapshot] = []

    for index, rally in enumerate(rallies):

        result = parse_rally(state, rally, config)

        if not result.is_ok:
            raise RallyError(result.reason)

        state = result.state

        timeline.append(MatchSnapshot.from_state(index + 1, state))

        if state.is_finished:
            break

    return timeline

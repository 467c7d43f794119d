import logging
from dataclasses import replace

from rally_engine.config import DEFAULT_CONFIG, RallyConfig
from rally_engine.exceptions import MatchFinishedError
from rally_engine.models import MatchState, MatchStatus, Side

logger = logging.getLogger(__name__)


class ScoreEngine:
    """
    Volleyball score engine.

    Responsibilities:
    - Add the rally point to the winning side
    - Close a set at 25 points (15 in the deciding set) with a 2 point lead
    - Finish the match once a side has won 3 sets
    - Never mutate the state it is given
    """

    def __init__(self, config: RallyConfig = DEFAULT_CONFIG):
        self.config = config

    # =========================================================
    # PUBLIC API
    # =========================================================

    def award_point(self, state: MatchState, side: Side) -> MatchState:
        """
        Return the state after ``side`` wins one rally.
        """
        if state.is_finished:
            raise MatchFinishedError("Match is already finished")

        team = state.team(side)
        state = state.with_team(side, replace(team, points=team.points + 1))
        state = replace(state, serving=side)

        if self._is_set_won(state, side):
            state = self._finalize_set(state, side)
            state = self._update_match_status(state)

        return state

    def is_deciding_set(self, state: MatchState) -> bool:
        return state.set_number == self.config.best_of

    def set_target(self, state: MatchState) -> int:
        if self.is_deciding_set(state):
            return self.config.deciding_points_to
        return self.config.points_to

    # =========================================================
    # SET LOGIC
    # =========================================================

    def _is_set_won(self, state: MatchState, side: Side) -> bool:
        own = state.team(side).points
        other = state.team(side.opponent()).points

        return own >= self.set_target(state) and own - other >= self.config.win_by

    def _finalize_set(self, state: MatchState, side: Side) -> MatchState:
        logger.info(
            "Set %d won by %s %d-%d",
            state.set_number,
            side.value,
            state.team(side).points,
            state.team(side.opponent()).points,
        )

        home_sets = state.home_team.sets + (1 if side is Side.HOME else 0)
        away_sets = state.away_team.sets + (1 if side is Side.AWAY else 0)

        return replace(
            state,
            home_team=replace(state.home_team, sets=home_sets, points=0),
            away_team=replace(state.away_team, sets=away_sets, points=0),
        )

    # =========================================================
    # MATCH LOGIC
    # =========================================================

    def _update_match_status(self, state: MatchState) -> MatchState:
        required = self.config.sets_to_win

        if state.home_team.sets >= required or state.away_team.sets >= required:
            logger.info(
                "Match finished %d-%d",
                state.home_team.sets,
                state.away_team.sets,
            )
            return replace(state, status=MatchStatus.FINISHED)

        return state

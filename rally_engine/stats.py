from dataclasses import replace

from rally_engine.models import MatchState, PlayerStats, Side
from rally_engine.resolver import RallyOutcome


def accumulate(state: MatchState, rally: RallyOutcome) -> MatchState:
    """
    Fold the rally's actions into both teams' player tables.

    Every action adds one attempt to its category bucket. The point-ending
    action also adds a score or a fault. Players seen for the first time are
    registered with empty stats. Returns a new state; ``state`` is untouched.
    """
    tables = {
        Side.HOME: dict(state.home_team.player_stats),
        Side.AWAY: dict(state.away_team.player_stats),
    }
    last_index = len(rally.actions) - 1

    for index, action in enumerate(rally.actions):
        table = tables[action.side]
        current = table.get(action.player)
        if current is None:
            current = PlayerStats(player=action.player)

        table[action.player] = current.with_action(
            action.category,
            action.outcome,
            point_ending=index == last_index,
        )

    return replace(
        state,
        home_team=replace(state.home_team, player_stats=tables[Side.HOME]),
        away_team=replace(state.away_team, player_stats=tables[Side.AWAY]),
    )

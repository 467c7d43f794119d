from rally_engine.models import (
    Action,
    Category,
    MatchState,
    Outcome,
    PlayerScores,
    PlayerStats,
    Side,
    TeamState,
)
from rally_engine.resolver import RallyOutcome
from rally_engine.stats import accumulate


def rally(*actions, point_to=Side.HOME):
    return RallyOutcome(actions=tuple(actions), point_to=point_to)


def act(player, side, category, outcome=Outcome.NEUTRAL):
    return Action(player=player, category=category, outcome=outcome, side=side)


def test_ace_counts_as_scored_serve():
    state = accumulate(MatchState(), rally(act(4, Side.HOME, Category.SERVE, Outcome.SCORED)))

    stats = state.home_team.player_stats[4]
    assert stats.serves == PlayerScores(scored=1, faults=0, all=1)
    assert stats.hits == PlayerScores()
    assert stats.blocks == PlayerScores()
    assert state.away_team.player_stats == {}


def test_every_action_counts_one_attempt():
    state = accumulate(MatchState(), rally(
        act(4, Side.HOME, Category.SERVE),
        act(7, Side.AWAY, Category.HIT),
        act(3, Side.HOME, Category.BLOCK, Outcome.SCORED),
    ))

    assert state.home_team.player_stats[4].serves == PlayerScores(0, 0, 1)
    assert state.away_team.player_stats[7].hits == PlayerScores(0, 0, 1)
    assert state.home_team.player_stats[3].blocks == PlayerScores(1, 0, 1)


def test_fault_counts_as_fault():
    state = accumulate(MatchState(), rally(
        act(4, Side.HOME, Category.SERVE),
        act(7, Side.AWAY, Category.HIT, Outcome.FAULT),
    ))

    assert state.away_team.player_stats[7].hits == PlayerScores(0, 1, 1)


def test_same_player_twice_in_one_rally():
    state = accumulate(MatchState(), rally(
        act(4, Side.HOME, Category.SERVE),
        act(7, Side.AWAY, Category.HIT),
        act(4, Side.HOME, Category.HIT, Outcome.SCORED),
    ))

    stats = state.home_team.player_stats[4]
    assert stats.serves.all == 1
    assert stats.hits == PlayerScores(1, 0, 1)


def test_existing_stats_are_extended_not_replaced():
    before = MatchState(
        away_team=TeamState(points=3, player_stats={
            7: PlayerStats(player=7, hits=PlayerScores(scored=2, faults=1, all=5)),
        }),
    )

    after = accumulate(before, rally(act(7, Side.AWAY, Category.HIT, Outcome.SCORED)))

    assert after.away_team.player_stats[7].hits == PlayerScores(3, 1, 6)
    assert after.away_team.points == 3
    assert before.away_team.player_stats[7].hits == PlayerScores(2, 1, 5)


def test_same_number_on_both_teams_kept_apart():
    state = accumulate(MatchState(), rally(
        act(4, Side.HOME, Category.SERVE),
        act(4, Side.AWAY, Category.HIT, Outcome.SCORED),
    ))

    assert state.home_team.player_stats[4].serves.all == 1
    assert state.home_team.player_stats[4].hits.all == 0
    assert state.away_team.player_stats[4].hits.scored == 1


def test_scored_only_counts_on_point_ending_action():
    scores = PlayerScores().record(Outcome.SCORED, point_ending=False)

    assert scores == PlayerScores(scored=0, faults=0, all=1)

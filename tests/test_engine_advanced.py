import random

import pytest

from rally_engine.models import MatchState, PlayerScores, PlayerStats, Side, TeamState
from rally_engine.parser import new_match, parse_rally


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

# (rally, number of actions, side that wins the point)
VALID_RALLIES = [
    ("!4S.", 1, Side.HOME),
    ("!4S/", 1, Side.AWAY),
    ("!4SA0", 1, Side.AWAY),
    ("@2S !7H5", 2, Side.HOME),
    ("!4S @10K7 !3B.", 3, Side.HOME),
    ("@2SB !7H @11B0", 3, Side.HOME),
    ("!4S @10H !", 2, Side.HOME),
    ("@2S !7K !8H/", 3, Side.AWAY),
]

MALFORMED_RALLIES = [
    "",
    "4x",
    "123S",
    "9k/",
    "!4S. @7H",
    "!4S !4S",
    "!4S @7H /",
    "!4S @7H",
]


def total_attempts(state):
    total = 0
    for team in (state.home_team, state.away_team):
        for stats in team.player_stats.values():
            total += stats.hits.all + stats.blocks.all + stats.serves.all
    return total


def mid_match_state():
    return MatchState(
        home_team=TeamState(sets=1, points=12, player_stats={
            4: PlayerStats(player=4, serves=PlayerScores(2, 1, 9)),
        }),
        away_team=TeamState(sets=1, points=10, player_stats={
            10: PlayerStats(player=10, hits=PlayerScores(4, 2, 11)),
        }),
        serving=Side.HOME,
    )


# ---------------------------------------------------------
# Idempotent rejection
# ---------------------------------------------------------

@pytest.mark.parametrize("rally", MALFORMED_RALLIES)
def test_rejection_is_repeatable(rally):
    state = mid_match_state()

    first = parse_rally(state, rally)
    second = parse_rally(state, rally)

    assert not first.is_ok
    assert first.reason == second.reason


# ---------------------------------------------------------
# No partial mutation
# ---------------------------------------------------------

def test_failed_rally_leaves_state_untouched():
    state = mid_match_state()
    snapshot = state.to_dict()

    parse_rally(state, "!4S @12K !5B. @3H")

    assert state.to_dict() == snapshot


def test_corrected_rally_matches_single_correct_call():
    state = mid_match_state()

    assert not parse_rally(state, "!4S @12K !5B. @3H").is_ok
    corrected = parse_rally(state, "!4S @12K !5B.")
    direct = parse_rally(mid_match_state(), "!4S @12K !5B.")

    assert corrected.state == direct.state


# ---------------------------------------------------------
# Statistic conservation
# ---------------------------------------------------------

@pytest.mark.parametrize("rally, actions, winner", VALID_RALLIES)
def test_each_action_adds_exactly_one_attempt(rally, actions, winner):
    before = mid_match_state()

    after = parse_rally(before, rally).state

    assert total_attempts(after) - total_attempts(before) == actions
    assert after.team(winner).points == before.team(winner).points + 1
    assert after.team(winner.opponent()).points == before.team(winner.opponent()).points


@pytest.mark.parametrize("rally, actions, winner", VALID_RALLIES)
def test_scored_plus_faults_never_exceeds_all(rally, actions, winner):
    state = parse_rally(mid_match_state(), rally).state

    for team in (state.home_team, state.away_team):
        for stats in team.player_stats.values():
            for bucket in (stats.hits, stats.blocks, stats.serves):
                assert bucket.scored + bucket.faults <= bucket.all


# ---------------------------------------------------------
# Deterministic replay
# ---------------------------------------------------------

def test_replay_is_deterministic():
    rng = random.Random(11)
    rallies = [rng.choice(VALID_RALLIES)[0] for _ in range(60)]

    state1 = new_match()
    state2 = new_match()

    for rally in rallies:
        state1 = parse_rally(state1, rally).state
        state2 = parse_rally(state2, rally).state

    assert state1 == state2


# ---------------------------------------------------------
# Large random simulation
# ---------------------------------------------------------

def test_random_match_always_finishes():
    rng = random.Random(5)
    state = new_match()
    rallies = 0

    while not state.is_finished:
        result = parse_rally(state, rng.choice(VALID_RALLIES)[0])
        assert result.is_ok
        state = result.state
        rallies += 1
        assert rallies < 1000

    assert 3 in (state.home_team.sets, state.away_team.sets)
    assert state.home_team.sets + state.away_team.sets <= 5

    assert not parse_rally(state, "!4S.").is_ok

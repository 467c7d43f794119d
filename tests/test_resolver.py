import pytest

from rally_engine.exceptions import RallyError
from rally_engine.interpreter import Interpretation
from rally_engine.models import Action, Category, Outcome, Side
from rally_engine.resolver import resolve
from rally_engine.result import ReasonKey


def action(player, side, outcome=Outcome.NEUTRAL, category=Category.HIT, offset=0):
    return Action(player=player, category=category, outcome=outcome, side=side, offset=offset)


def serve(side=Side.HOME):
    return action(4, side, category=Category.SERVE)


def failure(interpretation):
    with pytest.raises(RallyError) as exc:
        resolve(interpretation)
    return exc.value.reason


# -------------------------------------------------
# Explicit outcomes
# -------------------------------------------------

def test_scored_goes_to_actor():
    rally = resolve(Interpretation(actions=(serve(), action(7, Side.AWAY, Outcome.SCORED))))

    assert rally.point_to is Side.AWAY
    assert rally.point_ending.player == 7


def test_fault_goes_to_opponent():
    rally = resolve(Interpretation(actions=(serve(), action(7, Side.AWAY, Outcome.FAULT))))

    assert rally.point_to is Side.HOME


# -------------------------------------------------
# Award marker
# -------------------------------------------------

def test_award_to_other_side_makes_last_action_a_fault():
    rally = resolve(Interpretation(
        actions=(serve(), action(7, Side.AWAY)),
        award=Side.HOME,
        award_offset=8,
    ))

    assert rally.point_to is Side.HOME
    assert rally.actions[-1].outcome is Outcome.FAULT


def test_award_to_same_side_makes_last_action_scored():
    rally = resolve(Interpretation(
        actions=(serve(), action(7, Side.AWAY)),
        award=Side.AWAY,
        award_offset=8,
    ))

    assert rally.point_to is Side.AWAY
    assert rally.actions[-1].outcome is Outcome.SCORED


def test_award_after_decided_action():
    reason = failure(Interpretation(
        actions=(serve(), action(7, Side.AWAY, Outcome.SCORED)),
        award=Side.AWAY,
        award_offset=9,
    ))

    assert reason.key is ReasonKey.INVALID_INPUT
    assert reason.location == 9


# -------------------------------------------------
# Ambiguity and missing ends
# -------------------------------------------------

def test_ball_out_is_who_scored():
    reason = failure(Interpretation(
        actions=(serve(), action(7, Side.AWAY)),
        ball_out_offset=8,
    ))

    assert reason.key is ReasonKey.WHO_SCORED
    assert reason.location == 8


def test_no_point_ending_action():
    reason = failure(Interpretation(actions=(serve(), action(7, Side.AWAY, offset=4))))

    assert reason.key is ReasonKey.INVALID_INPUT
    assert reason.location == 4


def test_more_than_one_point_ending_action():
    reason = failure(Interpretation(actions=(
        action(4, Side.HOME, Outcome.SCORED, offset=0),
        action(7, Side.AWAY, Outcome.FAULT, offset=4),
    )))

    assert reason.key is ReasonKey.INVALID_INPUT
    assert reason.location == 0


def test_no_actions():
    reason = failure(Interpretation(actions=()))

    assert reason.key is ReasonKey.INVALID_INPUT

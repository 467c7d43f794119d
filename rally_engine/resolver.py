from dataclasses import dataclass, replace
from typing import Tuple

from rally_engine.exceptions import RallyError
from rally_engine.interpreter import Interpretation
from rally_engine.models import Action, Outcome, Side
from rally_engine.result import Reason


@dataclass(frozen=True)
class RallyOutcome:
    actions: Tuple[Action, ...]
    point_to: Side

    @property
    def point_ending(self) -> Action:
        return self.actions[-1]


def resolve(interpretation: Interpretation) -> RallyOutcome:
    """
    Decide which side won the rally.

    A scored last action gives the point to its side, a fault to the
    opponent. A lone team prefix names the winner outright. A lone '/'
    (ball dead, no last touch) is refused with WhoScored.
    """
    actions = interpretation.actions
    if not actions:
        raise RallyError(Reason.invalid_input("At least 1 action required.", 0))

    if interpretation.ball_out_offset is not None:
        raise RallyError(Reason.who_scored(interpretation.ball_out_offset))

    last = actions[-1]

    if interpretation.award is not None:
        if last.is_point_ending:
            raise RallyError(Reason.invalid_input(
                "The last action already decides the rally; drop the team prefix after it.",
                interpretation.award_offset,
            ))
        outcome = Outcome.SCORED if last.side is interpretation.award else Outcome.FAULT
        actions = actions[:-1] + (replace(last, outcome=outcome),)

    point_ending = [a for a in actions if a.is_point_ending]

    if not point_ending:
        raise RallyError(Reason.invalid_input(
            "Nothing in this rally ends the point: mark the last action with "
            "'.' (scored) or '/' (fault), give its landing zone, or place the "
            "winning team's prefix after it.",
            last.offset,
        ))

    if len(point_ending) > 1 or point_ending[0] is not actions[-1]:
        raise RallyError(Reason.invalid_input(
            "Only the last action of a rally can end the point.",
            point_ending[0].offset,
        ))

    terminal = actions[-1]
    if terminal.outcome is Outcome.SCORED:
        point_to = terminal.side
    else:
        point_to = terminal.side.opponent()

    return RallyOutcome(actions=actions, point_to=point_to)

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from rally_engine.config import DEFAULT_CONFIG, RallyConfig
from rally_engine.exceptions import RallyError
from rally_engine.lexer import ACTION_CODES, FAULT_MARK, Token, TokenKind
from rally_engine.models import (
    NET,
    OUT_OF_BOUNDS,
    Action,
    Category,
    MatchState,
    Outcome,
    Side,
)
from rally_engine.result import Reason


@dataclass(frozen=True)
class Interpretation:
    """
    Actions of one rally in order, plus how the notation closed it.

    ``award`` is set when a lone team prefix named the winner,
    ``ball_out_offset`` when a lone '/' ended the rally.
    """
    actions: Tuple[Action, ...]
    award: Optional[Side] = None
    award_offset: Optional[int] = None
    ball_out_offset: Optional[int] = None


def _fail(msg: str, location: int) -> RallyError:
    return RallyError(Reason.invalid_input(msg, location))


def side_for_prefix(prefix: str, config: RallyConfig) -> Side:
    return Side.HOME if prefix == config.home_prefix else Side.AWAY


def interpret(
    tokens: Sequence[Token],
    state: MatchState,
    config: RallyConfig = DEFAULT_CONFIG,
) -> Interpretation:
    if state.is_finished:
        raise _fail("The match is already finished.", 0)

    if not tokens:
        raise _fail("At least 1 action required.", 0)

    actions: List[Action] = []
    index = 0

    while index < len(tokens):
        token = tokens[index]

        if actions and _decides_rally(actions[-1]):
            raise _fail(
                "The rally was already decided by the previous action; "
                "enter one point per rally.",
                token.offset,
            )

        if token.kind in (TokenKind.AWARD, TokenKind.BALL_OUT):
            return _close_rally(tokens, index, actions, config)

        group, index = _take_group(tokens, index)
        actions.append(_build_action(group, state, config, first=not actions))

    actions[-1] = _infer_last_outcome(actions[-1])
    return Interpretation(actions=tuple(actions))


def _decides_rally(action: Action) -> bool:
    return action.is_point_ending or action.zone == OUT_OF_BOUNDS


def _close_rally(
    tokens: Sequence[Token],
    index: int,
    actions: List[Action],
    config: RallyConfig,
) -> Interpretation:
    token = tokens[index]

    if not actions:
        what = "winning team's prefix" if token.kind is TokenKind.AWARD else f"'{FAULT_MARK}'"
        raise _fail(f"The {what} must follow at least one action.", token.offset)

    if index + 1 < len(tokens):
        raise _fail(
            "Nothing may follow the end of the rally.",
            tokens[index + 1].offset,
        )

    if token.kind is TokenKind.AWARD:
        return Interpretation(
            actions=tuple(actions),
            award=side_for_prefix(token.text, config),
            award_offset=token.offset,
        )

    return Interpretation(actions=tuple(actions), ball_out_offset=token.offset)


def _take_group(tokens: Sequence[Token], index: int) -> Tuple[List[Token], int]:
    """Collect [SIDE] PLAYER CODE [SERVE_POSITION] [ZONE] [OUTCOME]."""
    group: List[Token] = []

    if tokens[index].kind is TokenKind.SIDE:
        group.append(tokens[index])
        index += 1

    for expected in (TokenKind.PLAYER, TokenKind.CODE):
        if index >= len(tokens) or tokens[index].kind is not expected:
            location = tokens[index].offset if index < len(tokens) else tokens[-1].offset
            raise _fail("Expected a player number followed by an action code.", location)
        group.append(tokens[index])
        index += 1

    trailing = (TokenKind.SERVE_POSITION, TokenKind.ZONE, TokenKind.OUTCOME)
    while index < len(tokens) and tokens[index].kind in trailing:
        group.append(tokens[index])
        index += 1

    return group, index


def _build_action(
    group: List[Token],
    state: MatchState,
    config: RallyConfig,
    first: bool,
) -> Action:
    by_kind = {token.kind: token for token in group}
    side_token = by_kind.get(TokenKind.SIDE)
    player_token = by_kind[TokenKind.PLAYER]
    code_token = by_kind[TokenKind.CODE]

    category = ACTION_CODES[code_token.text]
    if category is Category.SERVE and not first:
        raise _fail("A serve can only be the first action of a rally.", code_token.offset)

    number = int(player_token.text)
    side = _resolve_side(side_token, player_token, number, category, state, config)

    outcome = Outcome.NEUTRAL
    outcome_token = by_kind.get(TokenKind.OUTCOME)
    if outcome_token is not None:
        outcome = Outcome.FAULT if outcome_token.text == FAULT_MARK else Outcome.SCORED

    zone_token = by_kind.get(TokenKind.ZONE)
    if zone_token is not None and zone_token.text == OUT_OF_BOUNDS and outcome is Outcome.SCORED:
        raise _fail("A ball that lands out cannot score.", outcome_token.offset)

    position_token = by_kind.get(TokenKind.SERVE_POSITION)

    return Action(
        player=number,
        category=category,
        outcome=outcome,
        side=side,
        offset=group[0].offset,
        zone=zone_token.text if zone_token is not None else None,
        serve_position=position_token.text if position_token is not None else None,
    )


def _resolve_side(
    side_token: Optional[Token],
    player_token: Token,
    number: int,
    category: Category,
    state: MatchState,
    config: RallyConfig,
) -> Side:
    if side_token is not None:
        return side_for_prefix(side_token.text, config)

    in_home = state.home_team.knows(number)
    in_away = state.away_team.knows(number)

    if in_home and in_away:
        raise _fail(
            f"Player {number} is on both teams; add the team prefix.",
            player_token.offset,
        )
    if in_home:
        return Side.HOME
    if in_away:
        return Side.AWAY

    if category is Category.SERVE:
        if state.serving is not None:
            return state.serving
        return Side.HOME if config.home_serves_first else Side.AWAY

    raise _fail(
        f"Unknown player {number}; add the team prefix "
        f"('{config.home_prefix}' home, '{config.away_prefix}' away) on first mention.",
        player_token.offset,
    )


def _infer_last_outcome(action: Action) -> Action:
    """A bare landing zone on the last touch tells how the rally ended."""
    if action.is_point_ending or action.zone is None:
        return action

    if action.zone in (OUT_OF_BOUNDS, NET):
        outcome = Outcome.FAULT
    else:
        outcome = Outcome.SCORED

    return replace(action, outcome=outcome)

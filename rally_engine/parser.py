import logging
from typing import Optional

from rally_engine.config import DEFAULT_CONFIG, RallyConfig
from rally_engine.engine import ScoreEngine
from rally_engine.exceptions import RallyError
from rally_engine.interpreter import interpret
from rally_engine.lexer import tokenize
from rally_engine.models import MatchState
from rally_engine.resolver import resolve
from rally_engine.result import ParseResult
from rally_engine.stats import accumulate

logger = logging.getLogger(__name__)


def new_match() -> MatchState:
    """All-zero, in-progress state for the start of a match."""
    return MatchState()


def parse_rally(
    current_stats: MatchState,
    rally: str,
    config: Optional[RallyConfig] = None,
) -> ParseResult:
    """
    Apply one rally to the match.

    Either every stage succeeds and the result holds the next state, or the
    first failure is returned as a located Reason. ``current_stats`` is
    never modified.
    """
    config = config or DEFAULT_CONFIG

    try:
        tokens = tokenize(rally, config)
        interpretation = interpret(tokens, current_stats, config)
        outcome = resolve(interpretation)
    except RallyError as exc:
        logger.info(
            "Rejected rally %r: %s at %d",
            rally,
            exc.reason.key.value,
            exc.reason.location,
        )
        return ParseResult.failure(exc.reason)

    state = accumulate(current_stats, outcome)
    state = ScoreEngine(config).award_point(state, outcome.point_to)

    logger.debug(
        "Rally %r: point to %s, %d-%d (sets %d-%d)",
        rally,
        outcome.point_to.value,
        state.home_team.points,
        state.away_team.points,
        state.home_team.sets,
        state.away_team.sets,
    )
    return ParseResult.success(state)

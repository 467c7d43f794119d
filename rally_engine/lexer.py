"""
Rally notation scanner.

A rally is a list of space separated groups. Each group is one of

    [!|@]<player><code>[serve position][zone][. or /]   an action
    ! or @                                            the named team won the point
    /                                                 ball dead, last touch unknown

Player numbers have one or two digits. Codes: S serve, H hit, K kill, B block.
Zones: 1-9 with an optional sub zone A-D, 0 for out of bounds, N for the net.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List

from rally_engine.config import DEFAULT_CONFIG, RallyConfig
from rally_engine.exceptions import RallyError
from rally_engine.models import Category, NET, OUT_OF_BOUNDS
from rally_engine.result import Reason


DIGITS = "0123456789"
COURT_ZONES = "123456789"
SUB_ZONES = "ABCD"
SERVE_POSITIONS = "ABCDEF"

SCORED_MARK = "."
FAULT_MARK = "/"

ACTION_CODES = {
    "S": Category.SERVE,
    "H": Category.HIT,
    "K": Category.HIT,
    "B": Category.BLOCK,
}

MAX_PLAYER_DIGITS = 2

# Receive, pass, set and freeball codes from the older notation.
UNTRACKED_CODES = "RPEF"
OVERPASS_ZONE = "V"


class TokenKind(str, Enum):
    SIDE = "side"
    PLAYER = "player"
    CODE = "code"
    SERVE_POSITION = "serve_position"
    ZONE = "zone"
    OUTCOME = "outcome"
    AWARD = "award"
    BALL_OUT = "ball_out"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int


def _fail(msg: str, location: int) -> RallyError:
    return RallyError(Reason.invalid_input(msg, location))


def _at_boundary(rally: str, pos: int) -> bool:
    return pos >= len(rally) or rally[pos].isspace()


def tokenize(rally: str, config: RallyConfig = DEFAULT_CONFIG) -> List[Token]:
    """
    Scan ``rally`` into tokens. Raises RallyError (InvalidInput) located at
    the first character that cannot start or continue a token.
    """
    tokens: List[Token] = []
    pos = 0

    while pos < len(rally):
        if rally[pos].isspace():
            pos += 1
            continue
        pos = _scan_group(rally, pos, config, tokens)

    return tokens


def _scan_group(rally: str, pos: int, config: RallyConfig, tokens: List[Token]) -> int:
    c = rally[pos]
    prefixes = (config.home_prefix, config.away_prefix)

    if c in prefixes:
        if _at_boundary(rally, pos + 1):
            tokens.append(Token(TokenKind.AWARD, c, pos))
            return pos + 1

        tokens.append(Token(TokenKind.SIDE, c, pos))
        pos += 1

        if rally[pos] not in DIGITS:
            raise _fail("Expected the player's number after the team prefix.", pos)

    elif c == FAULT_MARK:
        if _at_boundary(rally, pos + 1):
            tokens.append(Token(TokenKind.BALL_OUT, c, pos))
            return pos + 1
        raise _fail("A lone '/' must stand on its own at the end of the rally.", pos + 1)

    elif c == SCORED_MARK:
        raise _fail("A '.' must directly follow an action.", pos)

    elif c not in DIGITS:
        raise _fail(f"Unrecognized character {c!r}.", pos)

    pos = _scan_player(rally, pos, tokens)
    pos = _scan_action(rally, pos, tokens, config)

    if not _at_boundary(rally, pos):
        c = rally[pos]
        if c in DIGITS or c in prefixes:
            raise _fail("Separate actions with a space.", pos)
        raise _fail(f"Unexpected character {c!r} after the action.", pos)

    return pos


def _scan_player(rally: str, pos: int, tokens: List[Token]) -> int:
    end = pos
    while end < len(rally) and rally[end] in DIGITS:
        end += 1

    if end - pos > MAX_PLAYER_DIGITS:
        raise _fail("Player numbers have at most two digits.", pos)

    tokens.append(Token(TokenKind.PLAYER, rally[pos:end], pos))

    if end < len(rally) and rally[end].upper() in UNTRACKED_CODES:
        raise _fail(
            "Receive, pass, set and freeball (R, P, E, F) are not recorded. Use S, H, K or B.",
            end,
        )

    if end >= len(rally) or rally[end].upper() not in ACTION_CODES:
        raise _fail(
            f"Expected an action code (S, H, K or B) after player {rally[pos:end]}.",
            end,
        )

    return end


def _scan_action(rally: str, pos: int, tokens: List[Token], config: RallyConfig) -> int:
    code = rally[pos].upper()
    tokens.append(Token(TokenKind.CODE, code, pos))
    pos += 1

    if code == "B" and pos < len(rally) and rally[pos] in (config.home_prefix, config.away_prefix):
        raise _fail("A block counts for the blocker's team. Put the team prefix before the player.", pos)

    if code == "S" and pos < len(rally) and rally[pos].upper() in SERVE_POSITIONS:
        tokens.append(Token(TokenKind.SERVE_POSITION, rally[pos].upper(), pos))
        pos += 1

    if pos < len(rally):
        c = rally[pos].upper()
        if c in COURT_ZONES:
            zone_start = pos
            pos += 1
            if pos < len(rally) and rally[pos].upper() in SUB_ZONES:
                pos += 1
            tokens.append(Token(TokenKind.ZONE, rally[zone_start:pos].upper(), zone_start))
        elif c in (OUT_OF_BOUNDS, NET):
            tokens.append(Token(TokenKind.ZONE, c, pos))
            pos += 1
        elif c == OVERPASS_ZONE:
            raise _fail("The overpass zone (V) is not supported. Record the zone where the ball landed.", pos)

    if pos < len(rally) and rally[pos] in (SCORED_MARK, FAULT_MARK):
        tokens.append(Token(TokenKind.OUTCOME, rally[pos], pos))
        pos += 1

    return pos

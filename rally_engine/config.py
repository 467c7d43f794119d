from dataclasses import dataclass

SCHEMA_VERSION = 1
DEFAULT_BEST_OF = 5

POINTS_TO_WIN_SET = 25
POINTS_TO_WIN_DECIDING_SET = 15
WIN_BY = 2

HOME_PREFIX = "!"
AWAY_PREFIX = "@"

# Characters the notation already uses for something else.
_RESERVED = {".", "/"}


@dataclass(frozen=True)
class RallyConfig:
    """
    Notation and rule settings for one match.

    The defaults are the indoor volleyball rules: best of 5, sets to 25,
    deciding set to 15, win by 2. Home serves first unless told otherwise.
    """
    home_prefix: str = HOME_PREFIX
    away_prefix: str = AWAY_PREFIX
    home_serves_first: bool = True
    best_of: int = DEFAULT_BEST_OF
    points_to: int = POINTS_TO_WIN_SET
    deciding_points_to: int = POINTS_TO_WIN_DECIDING_SET
    win_by: int = WIN_BY

    def __post_init__(self):
        if self.best_of <= 0:
            raise ValueError("best_of must be positive")

        if self.best_of % 2 == 0:
            raise ValueError("best_of must be odd")

        if self.points_to <= 0 or self.deciding_points_to <= 0:
            raise ValueError("set targets must be positive")

        if self.win_by <= 0:
            raise ValueError("win_by must be positive")

        for prefix in (self.home_prefix, self.away_prefix):
            if len(prefix) != 1:
                raise ValueError(f"Team prefix must be a single character: {prefix!r}")
            if prefix.isalnum() or prefix.isspace() or prefix in _RESERVED:
                raise ValueError(f"Team prefix {prefix!r} clashes with the rally notation")

        if self.home_prefix == self.away_prefix:
            raise ValueError("Home and away prefixes must differ")

    @property
    def sets_to_win(self) -> int:
        return (self.best_of // 2) + 1


DEFAULT_CONFIG = RallyConfig()

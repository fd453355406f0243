"""
Labels for clarity.
"""

from enum import Enum, IntEnum
from typing import List, Literal, Tuple


class Color(IntEnum):
    RED = 0
    GREEN = 1
    BLUE = 2
    YELLOW = 3
    MAGENTA = 4
    CYAN = 5
    WHITE = 6


# Fixed, ordered palette the player picks from
PALETTE: Tuple[Color, ...] = tuple(Color)


class Outcome(str, Enum):
    CORRECT = "correct"              # right color, right place
    WRONG_POSITION = "wrong_position"  # right color, wrong place
    INCORRECT = "incorrect"          # color not (or no longer) in the code


Code = List[Color]
Difficulty = Literal["easy", "difficult"]

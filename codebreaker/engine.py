"""
Pure game logic (no HTTP, no timers).
Each committed guess is scored peg by peg:
- correct: right color in the right position
- wrong_position: the color is still unmatched somewhere else in the secret
- incorrect: nothing left to match

We allow duplicates in the secret and in the guess, so matched pegs are
"consumed" on both sides and can never be counted twice.
"""

from typing import List, Optional, Sequence, Tuple

from .types import Color, Outcome


def score_guess(secret: Sequence[Color], guess: Sequence[Color]) -> List[Outcome]:
    """
    Example:
      secret = [RED, RED, GREEN, BLUE]
      guess  = [RED, GREEN, GREEN, GREEN]
      -> [correct, incorrect, correct, incorrect]
      The only GREEN in the secret is taken by the exact match at index 2,
      so the GREEN at index 1 has nothing left to match.
    """

    # 0. Validate lengths match
    n = len(secret)
    if n == 0 or len(guess) != n:
        raise ValueError("Secret and guess must be the same non-zero length.")

    outcomes = [Outcome.INCORRECT] * n
    # None marks a consumed peg; it never equals a real color
    secret_work: List[Optional[Color]] = list(secret)
    guess_work: List[Optional[Color]] = list(guess)

    # 1. Exact matches first, so they always win over "present elsewhere"
    for i in range(n):
        if guess_work[i] == secret_work[i]:
            outcomes[i] = Outcome.CORRECT
            secret_work[i] = None
            guess_work[i] = None

    # 2. Right color, wrong place: first unconsumed secret peg, left to right
    for i in range(n):
        if guess_work[i] is None:
            continue
        for j in range(n):
            if secret_work[j] is not None and secret_work[j] == guess_work[i]:
                outcomes[i] = Outcome.WRONG_POSITION
                secret_work[j] = None
                guess_work[i] = None
                break

    return outcomes


def count_outcomes(outcomes: Sequence[Outcome]) -> Tuple[int, int, int]:
    """Returns a tuple: (correct, wrong_position, incorrect)"""
    correct = sum(1 for o in outcomes if o is Outcome.CORRECT)
    wrong_position = sum(1 for o in outcomes if o is Outcome.WRONG_POSITION)
    return (correct, wrong_position, len(outcomes) - correct - wrong_position)


def is_win(outcomes: Sequence[Outcome]) -> bool:
    """
    Win = every peg scored correct.
    An empty outcome list is never a win.
    """
    return len(outcomes) > 0 and all(o is Outcome.CORRECT for o in outcomes)

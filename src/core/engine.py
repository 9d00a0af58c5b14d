from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Optional

from .state import ATTEMPTS_MAX, MAX, MIN, GameState

logger = logging.getLogger(__name__)

WIN_MESSAGE = "Congratulations! You guessed the number!"
LOSS_MESSAGE = "Game over! The correct number was {secret}."
TOO_HIGH_MESSAGE = "Too high! Try again."
TOO_LOW_MESSAGE = "Too low! Try again."

__all__ = [
    "MIN",
    "MAX",
    "ATTEMPTS_MAX",
    "generate_secret",
    "new_game",
    "is_valid_guess",
    "evaluate_guess",
    "attempts_used_percent",
]


def generate_secret(rng: Optional[random.Random] = None) -> int:
    """
    Draw a secret number uniformly from [MIN, MAX].

    Parameters
    ----------
    rng : random.Random | None
        Source of randomness. Anything with a `randint(a, b)` method works, so
        tests can pass a seeded `random.Random` or a fixed stub. When omitted,
        the module-level `random` generator is used (gameplay, not crypto).
    """
    source = rng if rng is not None else random
    return source.randint(MIN, MAX)


def new_game(rng: Optional[random.Random] = None) -> GameState:
    """
    Start a new game with a fresh secret and a full set of attempts.

    Returns
    -------
    GameState
        A fresh, immutable game state in "playing" status.
    """
    secret = generate_secret(rng)
    logger.debug("New game started (%d attempts)", ATTEMPTS_MAX)
    return GameState(secret_number=secret)


def is_valid_guess(candidate: int) -> bool:
    """Return True if `candidate` lies in [MIN, MAX]. Attempts and game-over status are not checked."""
    return MIN <= candidate <= MAX


def evaluate_guess(state: GameState, candidate: int) -> GameState:
    """
    Apply a guess and return a new GameState.

    Behavior
    --------
    - Records `candidate` as the last guess and appends it to the history.
    - Consumes one attempt.
    - Outcome, checked in order: a match wins; otherwise running out of
      attempts loses and reveals the secret; otherwise the game continues
      with a too-high / too-low hint.
    - Does not re-check `is_valid_guess` or `is_over`; callers are expected
      to do both before calling.
    """
    remaining = state.remaining_attempts - 1
    base = replace(
        state,
        last_guess=candidate,
        guess_history=state.guess_history + (candidate,),
        remaining_attempts=remaining,
    )

    if candidate == state.secret_number:
        new_state = replace(base, is_over=True, won=True, message=WIN_MESSAGE)
    elif remaining == 0:
        new_state = replace(
            base,
            is_over=True,
            won=False,
            message=LOSS_MESSAGE.format(secret=state.secret_number),
        )
    else:
        hint = TOO_HIGH_MESSAGE if candidate > state.secret_number else TOO_LOW_MESSAGE
        new_state = replace(base, message=hint)

    logger.debug(
        "Guess %s evaluated: status=%s, remaining=%d",
        candidate,
        new_state.status,
        new_state.remaining_attempts,
    )
    return new_state


def attempts_used_percent(state: GameState) -> float:
    """Share of the attempt budget already spent, as a percentage (0–100)."""
    return len(state.guess_history) / ATTEMPTS_MAX * 100.0

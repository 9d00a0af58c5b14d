from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple


GameStatus = Literal["playing", "won", "lost"]

# Fixed game bounds (lower bound of the secret range, upper bound, guesses per game).
MIN = 1
MAX = 100
ATTEMPTS_MAX = 10


@dataclass(frozen=True)
class GameState:
    """
    Immutable container for one round of the number-guessing game.

    Notes
    -----
    - Frozen so that `core.engine` always returns a brand-new state after a
      guess; the previous state stays valid (handy for Streamlit reruns).
    - Rule transitions live in `core.engine`; this file only defines the data
      structure and basic normalization/validation.
    """

    # Core fields
    secret_number: int
    remaining_attempts: int = ATTEMPTS_MAX
    last_guess: Optional[int] = None
    message: str = ""
    is_over: bool = False
    won: Optional[bool] = None
    guess_history: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """
        Normalize and validate fields.

        Normalization
        -------------
        - `guess_history` is stored as a tuple (any iterable is accepted).

        Validation
        ----------
        - `secret_number` must be an int in [MIN, MAX].
        - `remaining_attempts` must not exceed `ATTEMPTS_MAX`.
        - `won` must be None while the game is still running.
        """
        # Because dataclass is frozen, use object.__setattr__ for normalization.
        object.__setattr__(self, "guess_history", tuple(self.guess_history or ()))

        if isinstance(self.secret_number, bool) or not isinstance(self.secret_number, int):
            raise ValueError("`secret_number` must be an integer.")
        if not MIN <= self.secret_number <= MAX:
            raise ValueError(f"`secret_number` must be between {MIN} and {MAX}.")
        if self.remaining_attempts > ATTEMPTS_MAX:
            raise ValueError(f"`remaining_attempts` must be <= {ATTEMPTS_MAX}.")
        if not self.is_over and self.won is not None:
            raise ValueError("`won` is only meaningful once the game is over.")

    @property
    def attempts_used(self) -> int:
        return len(self.guess_history)

    @property
    def status(self) -> GameStatus:
        if not self.is_over:
            return "playing"
        return "won" if self.won else "lost"

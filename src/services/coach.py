from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Tuple

from openai import OpenAI, OpenAIError
from src.core.state import MAX, MIN, GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoachSuggestion:
    """Container for a coach suggestion."""
    guess: int        # recommended next number
    low: int          # smallest number still consistent with the hints
    high: int         # largest number still consistent with the hints
    text: str         # one-sentence rationale
    used_llm: bool    # whether rationale came from the LLM


def _narrow_range(secret: int, history: Iterable[int]) -> Tuple[int, int]:
    """
    Shrink [MIN, MAX] using the hint each past guess produced.

    Rules
    -----
    - A guess below the secret ("too low") moves the lower bound above it.
    - A guess above the secret ("too high") moves the upper bound below it.
    - A guess equal to the secret pins the range to that number.
    """
    low, high = MIN, MAX
    for g in history:
        if g < secret:
            low = max(low, g + 1)
        elif g > secret:
            high = min(high, g - 1)
        else:
            return g, g
    return low, high


def _local_reason(low: int, high: int, guess: int, guesses_made: int) -> str:
    """A deterministic, non-LLM explanation sentence."""
    size = high - low + 1
    if size == 1:
        return f"Only **{guess}** is left, go for it."
    if guesses_made == 0:
        return f"Start in the middle with **{guess}**: whatever the hint says, half of {low}–{high} is ruled out."
    return (
        f"Try **{guess}**: your hints leave {size} numbers between {low} and {high}, "
        f"and the midpoint halves them."
    )


def _llm_reason(low: int, high: int, guess: int, remaining_attempts: int) -> str | None:
    """
    Ask the LLM to phrase a short human-friendly rationale for the chosen number.

    Only the public range and counts are sent; never the secret.
    """
    api_key = os.getenv("OPENAI_API_KEY", "")
    offline = os.getenv("OFFLINE_MODE", "true").lower() == "true"
    if offline or not api_key:
        return None

    client = OpenAI(api_key=api_key)
    model = os.getenv("MODEL_NAME", "gpt-4o-mini")

    user = (
        "You are coaching a player in a guess-the-number game. "
        f"From the hints so far, the secret is between {low} and {high} and "
        f"{remaining_attempts} attempts are left. "
        f"Recommend guessing {guess} and give ONE short sentence explaining why."
    )
    try:
        r = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": user}],
            temperature=0.7,
            max_tokens=60,
        )
        text = (r.choices[0].message.content or "").strip()
        return text or None
    except OpenAIError as e:
        logger.warning(f"Coach LLM call failed, using local rationale: {e}")
        return None


def suggest_next_guess(state: GameState) -> CoachSuggestion:
    """
    Suggest the next number to try.

    Steps
    -----
    1) Narrow [MIN, MAX] using the hints implied by the guess history.
    2) Pick the midpoint of what is left (binary search).
    3) Produce a one-sentence rationale using the LLM; fallback to a local sentence.
    """
    low, high = _narrow_range(state.secret_number, state.guess_history)
    guess = (low + high) // 2

    llm_text = _llm_reason(low, high, guess, state.remaining_attempts)
    if llm_text:
        return CoachSuggestion(guess=guess, low=low, high=high, text=llm_text, used_llm=True)

    local_text = _local_reason(low, high, guess, state.attempts_used)
    return CoachSuggestion(guess=guess, low=low, high=high, text=local_text, used_llm=False)

from __future__ import annotations

import logging
import os
from typing import List, Sequence

from openai import OpenAI, OpenAIError
from src.core.state import ATTEMPTS_MAX, MAX, MIN

logger = logging.getLogger(__name__)


def _count_halving_guesses(history: Sequence[int], secret: int) -> int:
    """
    Count guesses that landed within one number of the midpoint of the range
    still open at the time they were made.
    """
    low, high = MIN, MAX
    good = 0
    for g in history:
        if abs(g - (low + high) // 2) <= 1:
            good += 1
        if g < secret:
            low = max(low, g + 1)
        elif g > secret:
            high = min(high, g - 1)
    return good


def _local_fallback_review(history: Sequence[int], secret: int, won: bool, attempts_max: int) -> str:
    """
    Deterministic local review when LLM is unavailable or fails.
    Produces 3 short bullet points.
    """
    used = len(history)
    halving = _count_halving_guesses(history, secret)

    verdict = f"You won in {used} {'guess' if used == 1 else 'guesses'}!" if won else f"You lost, the number was {secret}."
    return (
        f"**Outcome:** {verdict}\n\n"
        f"- **Attempts:** You used {used} of {attempts_max}.\n"
        f"- **Search:** {halving} of your guesses split the remaining range close to the middle.\n"
        f"- **Next time:** Always guess the midpoint of what the hints leave open; "
        f"{MIN}–{MAX} never needs more than 7 tries that way."
    )


def _format_history_compact(history: Sequence[int], secret: int) -> str:
    """
    Compress history into a concise, LLM-friendly string.
    Example item: "1) 50 -> too high"
    """
    lines: List[str] = []
    for i, g in enumerate(history, start=1):
        if g == secret:
            verdict = "correct"
        elif g > secret:
            verdict = "too high"
        else:
            verdict = "too low"
        lines.append(f"{i}) {g} -> {verdict}")
    return "\n".join(lines)


def generate_review(
    history: Sequence[int],
    secret: int,
    won: bool,
    attempts_max: int = ATTEMPTS_MAX,
    temperature: float = 0.4,
) -> str:
    """
    Generate a short post-game review.

    Behavior
    --------
    - If OFFLINE_MODE=true or key missing -> returns a local, deterministic review.
    - Otherwise, asks an LLM for a compact debrief of the search strategy.
    - The secret is included in the prompt; the app already reveals it once
      the round is over.
    """
    api_key = os.getenv("OPENAI_API_KEY", "")
    offline = os.getenv("OFFLINE_MODE", "true").lower() == "true"
    if offline or not api_key:
        return _local_fallback_review(history, secret, won, attempts_max)

    client = OpenAI(api_key=api_key)
    model = os.getenv("MODEL_NAME", "gpt-4o-mini")

    outcome = "won" if won else "lost"
    hist = _format_history_compact(history, secret)

    sys = "You are a concise strategy coach for a guess-the-number game. Provide clear, actionable feedback."
    user = (
        f"Game outcome: {outcome}\n"
        f"Range: {MIN}-{MAX}, attempts allowed: {attempts_max}\n"
        f"Secret number: {secret}\n"
        f"History (each line = guess -> hint):\n{hist}\n\n"
        "Write a post-game review in ~2 short paragraphs:\n"
        "1) Which guesses narrowed the range well or wasted an attempt (why)\n"
        "2) A concrete tip for the next game\n"
        "Keep it under 100 words total. Avoid bullet lists; use compact prose."
    )

    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[{"role": "system", "content": sys}, {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=250,
        )
        text = (resp.choices[0].message.content or "").strip()
        if not text:
            return _local_fallback_review(history, secret, won, attempts_max)
        # Soft cap for verbosity
        if len(text.split()) > 120:
            text = " ".join(text.split()[:120])
        return text
    except OpenAIError as e:
        logger.warning(f"Review LLM call failed, using local review: {e}")
        return _local_fallback_review(history, secret, won, attempts_max)

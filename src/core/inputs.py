"""
Turn raw player input into a candidate guess.

A submission is accepted iff:
  - it is non-empty after stripping whitespace
  - it contains ASCII digits only (no sign, no decimal point)
  - the number passes `engine.is_valid_guess`

Anything else yields None and the UI should not call `evaluate_guess`.
"""

from __future__ import annotations

from typing import Optional

from .engine import is_valid_guess


def parse_guess(raw: Optional[str]) -> Optional[int]:
    """Return the guess as an int, or None if `raw` is not an acceptable submission."""
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    # str.isdigit() also accepts things like '²'; keep to plain 0-9.
    if not text or not (text.isascii() and text.isdigit()):
        return None

    value = int(text)
    return value if is_valid_guess(value) else None

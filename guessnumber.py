from __future__ import annotations

import logging
import os
import streamlit as st

from dotenv import load_dotenv
load_dotenv(override=False)  # Load .env into process env

# --- Core game imports ---
from src.core.engine import (
    ATTEMPTS_MAX,
    MAX,
    MIN,
    attempts_used_percent,
    evaluate_guess,
    new_game,
)
from src.core.inputs import parse_guess
from src.core.state import GameState

# --- Generative AI services ---
from src.services.coach import suggest_next_guess   # Coach (next number + rationale)
from src.services.review import generate_review      # Post-game AI Review

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =======================================
# Session-state helpers & game management
# =======================================

def _empty_stats() -> dict:
    return {"games": 0, "wins": 0, "losses": 0, "guesses": 0}


def _init_stats() -> None:
    """Ensure a stats dict exists in session state."""
    st.session_state.setdefault("stats", _empty_stats())


def _init_round_state() -> None:
    """Ensure per-round transient keys exist."""
    st.session_state.setdefault("round_counted", False)
    st.session_state.setdefault("coach_suggestion", None)
    st.session_state.setdefault("review_text", None)
    st.session_state.setdefault("input_error", None)


def _start_new_game() -> None:
    """Start a new game and reset per-round flags."""
    st.session_state["game"] = new_game()
    st.session_state["round_counted"] = False
    st.session_state["coach_suggestion"] = None
    st.session_state["review_text"] = None
    st.session_state["input_error"] = None
    logger.info("Started a new round")


def _ensure_game() -> GameState:
    """Ensure there is a valid GameState in session state; create one if missing."""
    if "game" not in st.session_state or not isinstance(st.session_state["game"], GameState):
        _start_new_game()
    _init_stats()
    _init_round_state()
    return st.session_state["game"]


def _count_finished_round(game: GameState) -> None:
    """Fold a finished round into the session stats exactly once."""
    if not game.is_over or st.session_state.get("round_counted", False):
        return
    stats = st.session_state["stats"]
    stats["games"] += 1
    stats["guesses"] += game.attempts_used
    if game.won:
        stats["wins"] += 1
    else:
        stats["losses"] += 1
    st.session_state["round_counted"] = True


# =========
# The App
# =========

def main() -> None:
    st.set_page_config(page_title="Guess the Number", page_icon="🎯", layout="centered")
    st.title("🎯 Guess the Number")
    st.caption(f"I picked a number between {MIN} and {MAX}. You have {ATTEMPTS_MAX} attempts.")

    # ---- Sidebar ----
    with st.sidebar:
        st.header("Game")
        if st.button("🔁 New Game", use_container_width=True):
            _start_new_game()
            st.rerun()

        _init_stats()
        with st.expander("📊 Stats", expanded=True):
            s = st.session_state["stats"]
            games = s["games"]
            winrate = (s["wins"] / games * 100.0) if games else 0.0
            avg_guesses = (s["guesses"] / games) if games else 0.0

            st.metric("Games", games)
            c1, c2 = st.columns(2); c1.metric("Wins", s["wins"]); c2.metric("Losses", s["losses"])
            c3, c4 = st.columns(2); c3.metric("Win rate", f"{winrate:.1f}%"); c4.metric("Avg guesses", f"{avg_guesses:.2f}")

            if st.button("♻️ Reset stats"):
                st.session_state["stats"] = _empty_stats()
                st.success("Stats reset.")

        with st.expander("Debug (env)"):
            st.write("OFFLINE_MODE:", os.getenv("OFFLINE_MODE"))
            st.write("Has OPENAI_API_KEY:", bool(os.getenv("OPENAI_API_KEY")))
            st.write("MODEL_NAME:", os.getenv("MODEL_NAME"))

    game: GameState = _ensure_game()

    # ---- Board ----
    st.subheader("Board")
    st.caption(f"Attempts left: {game.remaining_attempts} / {ATTEMPTS_MAX}")
    st.progress(min(attempts_used_percent(game), 100.0) / 100.0)

    history = ", ".join(str(g) for g in game.guess_history) or "(none)"
    st.caption(f"Your guesses: {history}")

    if game.message and not game.is_over:
        st.info(game.message)

    # ---- Coach ----
    with st.expander("Need a suggestion?"):
        if st.button("🤖 Coach: Next Number", disabled=game.is_over):
            with st.spinner("Thinking..."):
                st.session_state["coach_suggestion"] = suggest_next_guess(game)
            st.rerun()

        coach = st.session_state["coach_suggestion"]
        if coach:
            src = "LLM" if coach.used_llm else "local"
            st.success(
                f"Coach suggests: **{coach.guess}**  \n"
                f"{coach.text}  \n"
                f"*Source: {src}, open range: {coach.low}–{coach.high}*"
            )

    # ---- Move input ----
    st.subheader("Your move")
    with st.form("guess_form", clear_on_submit=True):
        guess_inp = st.text_input(f"Enter a whole number from {MIN} to {MAX}:", max_chars=3)
        submitted = st.form_submit_button("Guess", disabled=game.is_over)
        if submitted and not game.is_over:
            candidate = parse_guess(guess_inp)
            if candidate is None:
                st.session_state["input_error"] = f"Please enter a whole number between {MIN} and {MAX}."
            else:
                st.session_state["input_error"] = None
                st.session_state["game"] = evaluate_guess(game, candidate)
                st.session_state["coach_suggestion"] = None
            st.rerun()

    if st.session_state["input_error"]:
        st.warning(st.session_state["input_error"])

    # ---- Outcome banner + stats update ----
    game = st.session_state["game"]
    _count_finished_round(game)

    if game.is_over and game.won:
        st.success(f"🎉 {game.message}")
    elif game.is_over:
        st.error(f"💀 {game.message}")

    # ---- Post-game AI Review ----
    if game.is_over:
        with st.expander("📝 AI Review"):
            col_a, col_b = st.columns(2)
            with col_a:
                if st.button("✨ Generate Review"):
                    with st.spinner("Analyzing your round..."):
                        st.session_state["review_text"] = generate_review(
                            history=game.guess_history,
                            secret=game.secret_number,
                            won=bool(game.won),
                        )
                    st.rerun()
            with col_b:
                if st.button("♻️ Clear Review"):
                    st.session_state["review_text"] = None
                    st.rerun()

            if st.session_state["review_text"]:
                st.write(st.session_state["review_text"])

        st.button("Play again", on_click=_start_new_game)


if __name__ == "__main__":
    main()

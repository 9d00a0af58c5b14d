import random
import unittest
from dataclasses import FrozenInstanceError

from src.core.engine import (
    ATTEMPTS_MAX,
    MAX,
    attempts_used_percent,
    evaluate_guess,
    generate_secret,
    is_valid_guess,
    new_game,
)
from src.core.state import GameState


class FixedSequenceRng:
    """Stand-in randomness source that replays a fixed list of values."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.values.pop(0)


class TestConstants(unittest.TestCase):

    def test_fixed_bounds(self):
        self.assertEqual(MAX, 100)
        self.assertEqual(ATTEMPTS_MAX, 10)


class TestGenerateSecret(unittest.TestCase):

    def test_uses_injected_rng_with_full_range(self):
        rng = FixedSequenceRng([42])
        self.assertEqual(generate_secret(rng), 42)
        self.assertEqual(rng.calls, [(1, 100)])

    def test_seeded_random_is_reproducible(self):
        self.assertEqual(generate_secret(random.Random(7)), generate_secret(random.Random(7)))

    def test_default_source_stays_in_range(self):
        for _ in range(500):
            self.assertTrue(1 <= generate_secret() <= 100)


class TestNewGame(unittest.TestCase):

    def test_fresh_state(self):
        state = new_game()
        self.assertTrue(1 <= state.secret_number <= 100)
        self.assertEqual(state.remaining_attempts, 10)
        self.assertIsNone(state.last_guess)
        self.assertEqual(state.message, "")
        self.assertFalse(state.is_over)
        self.assertIsNone(state.won)
        self.assertEqual(state.guess_history, ())
        self.assertEqual(state.status, "playing")

    def test_secret_comes_from_rng(self):
        self.assertEqual(new_game(FixedSequenceRng([13])).secret_number, 13)

    def test_each_game_draws_independently(self):
        rng = FixedSequenceRng([5, 77])
        self.assertEqual(new_game(rng).secret_number, 5)
        self.assertEqual(new_game(rng).secret_number, 77)


class TestIsValidGuess(unittest.TestCase):

    def test_boundaries(self):
        self.assertTrue(is_valid_guess(1))
        self.assertTrue(is_valid_guess(100))
        self.assertFalse(is_valid_guess(0))
        self.assertFalse(is_valid_guess(101))
        self.assertFalse(is_valid_guess(-5))

    def test_whole_range_is_valid(self):
        self.assertTrue(all(is_valid_guess(c) for c in range(1, 101)))


class TestEvaluateGuess(unittest.TestCase):

    def setUp(self):
        self.state = GameState(secret_number=42)

    def test_win(self):
        result = evaluate_guess(self.state, 42)
        self.assertTrue(result.is_over)
        self.assertTrue(result.won)
        self.assertEqual(result.remaining_attempts, 9)
        self.assertEqual(result.guess_history, (42,))
        self.assertEqual(result.last_guess, 42)
        self.assertIn("congratulations", result.message.lower())
        self.assertEqual(result.status, "won")

    def test_loss_on_last_attempt(self):
        state = GameState(secret_number=42, remaining_attempts=1, guess_history=range(9))
        result = evaluate_guess(state, 10)
        self.assertTrue(result.is_over)
        self.assertFalse(result.won)
        self.assertEqual(result.remaining_attempts, 0)
        self.assertIn("42", result.message)
        self.assertEqual(result.status, "lost")

    def test_match_on_last_attempt_wins(self):
        state = GameState(secret_number=42, remaining_attempts=1)
        result = evaluate_guess(state, 42)
        self.assertTrue(result.won)
        self.assertEqual(result.remaining_attempts, 0)

    def test_too_high_hint(self):
        result = evaluate_guess(self.state, 50)
        self.assertFalse(result.is_over)
        self.assertIsNone(result.won)
        self.assertIn("too high", result.message.lower())

    def test_too_low_hint(self):
        result = evaluate_guess(self.state, 30)
        self.assertFalse(result.is_over)
        self.assertIn("too low", result.message.lower())

    def test_input_state_is_not_mutated(self):
        before = GameState(secret_number=42)
        evaluate_guess(self.state, 50)
        self.assertEqual(self.state, before)
        with self.assertRaises(FrozenInstanceError):
            self.state.remaining_attempts = 3

    def test_each_guess_consumes_one_attempt(self):
        state = self.state
        for i, guess in enumerate([10, 90, 20, 80], start=1):
            nxt = evaluate_guess(state, guess)
            self.assertEqual(nxt.remaining_attempts, state.remaining_attempts - 1)
            self.assertEqual(len(nxt.guess_history), len(state.guess_history) + 1)
            self.assertEqual(len(nxt.guess_history), ATTEMPTS_MAX - nxt.remaining_attempts)
            state = nxt

    def test_ten_misses_always_lose(self):
        state = new_game(FixedSequenceRng([42]))
        guesses = [1, 100, 2, 99, 3, 98, 4, 97, 5, 96]
        for guess in guesses[:-1]:
            state = evaluate_guess(state, guess)
            self.assertFalse(state.is_over)
        state = evaluate_guess(state, guesses[-1])
        self.assertTrue(state.is_over)
        self.assertFalse(state.won)
        self.assertEqual(state.remaining_attempts, 0)

    def test_history_keeps_submission_order(self):
        state = self.state
        for guess in (70, 10, 55, 41):
            state = evaluate_guess(state, guess)
        self.assertEqual(state.guess_history, (70, 10, 55, 41))
        self.assertEqual(state.last_guess, 41)

    def test_out_of_range_candidate_is_still_evaluated(self):
        result = evaluate_guess(self.state, 500)
        self.assertEqual(result.guess_history, (500,))
        self.assertIn("too high", result.message.lower())


class TestAttemptsUsedPercent(unittest.TestCase):

    def test_percentage(self):
        state = GameState(secret_number=42)
        self.assertEqual(attempts_used_percent(state), 0.0)
        for guess in (1, 2, 3, 4, 5):
            state = evaluate_guess(state, guess)
        self.assertEqual(attempts_used_percent(state), 50.0)


if __name__ == "__main__":
    unittest.main()

"""
Tests for the round state machine.
"""

import random

import pytest

from warden.core.feedback import TileState
from warden.core.game import LENGTH_MESSAGE, WordleGame
from warden.core.state import GamePhase, RoundOutcome


def type_word(game: WordleGame, word: str):
    for letter in word:
        game.type_letter(letter)


class TestWordleGame:
    """Tests for WordleGame."""

    @pytest.fixture
    def game(self):
        """Started game with a single-word list so the solution is known."""
        game = WordleGame(["CRATE"], rng=random.Random(0))
        game.start()
        return game

    def test_starts_in_loading(self):
        """Test that a new game waits in LOADING until started."""
        game = WordleGame(["CRATE"])

        assert game.phase == GamePhase.LOADING
        assert game.outcome == RoundOutcome.IN_PROGRESS
        assert game.type_letter("A") is False

    def test_start_draws_solution(self, game):
        """Test that start() picks a solution and begins playing."""
        assert game.phase == GamePhase.PLAYING
        assert game.solution == "CRATE"

    def test_empty_word_list_rejected(self):
        """Test that an empty word list is invalid."""
        with pytest.raises(ValueError):
            WordleGame([])

    def test_typing_is_uppercased_and_capped(self, game):
        """Test that letters are uppercased and capped at five."""
        type_word(game, "abcdefg")

        assert game.current_guess == "ABCDE"

    def test_non_letters_ignored(self, game):
        """Test that digits, punctuation and multi-char strings are ignored."""
        for key in ("1", "!", " ", "AB", "é"):
            assert game.type_letter(key) is False

        assert game.current_guess == ""

    def test_backspace(self, game):
        """Test that backspace removes the last letter."""
        type_word(game, "CRA")
        game.backspace()

        assert game.current_guess == "CR"

    def test_backspace_on_empty(self, game):
        """Test that backspace on an empty guess is a no-op."""
        assert game.backspace() is False
        assert game.current_guess == ""

    @pytest.mark.parametrize("partial", ["", "C", "CRAT"])
    def test_short_submit_is_rejected(self, game, partial):
        """Test that submitting fewer than five letters changes nothing."""
        type_word(game, partial)
        result = game.submit()

        assert result.accepted is False
        assert result.message == LENGTH_MESSAGE
        assert game.message == LENGTH_MESSAGE
        assert game.guesses == []
        assert game.outcome == RoundOutcome.IN_PROGRESS
        assert game.current_guess == partial

    def test_clear_message(self, game):
        """Test that the transient message can be cleared."""
        game.submit()
        game.clear_message()

        assert game.message is None

    def test_correct_guess_wins(self, game):
        """Test that guessing the solution wins and records one guess."""
        type_word(game, "CRATE")
        result = game.submit()

        assert result.accepted is True
        assert result.outcome == RoundOutcome.WON
        assert game.phase == GamePhase.WON
        assert len(game.guesses) == 1
        assert result.feedback == [TileState.EXACT] * 5

    def test_wrong_guess_keeps_playing(self, game):
        """Test that a wrong guess clears the current guess and continues."""
        type_word(game, "CRANE")
        result = game.submit()

        assert result.accepted is True
        assert result.outcome == RoundOutcome.IN_PROGRESS
        assert game.current_guess == ""
        assert game.guesses == ["CRANE"]

    def test_five_misses_lose(self, game):
        """Test that five wrong guesses lose the round."""
        for word in ("CRANE", "SLATE", "BLAME", "GRAPE", "TRACE"):
            type_word(game, word)
            result = game.submit()

        assert result.outcome == RoundOutcome.LOST
        assert game.phase == GamePhase.LOST
        assert len(game.guesses) == 5

    def test_win_on_last_guess(self, game):
        """Test that a correct fifth guess wins rather than loses."""
        for word in ("CRANE", "SLATE", "BLAME", "GRAPE"):
            type_word(game, word)
            game.submit()

        type_word(game, "CRATE")
        result = game.submit()

        assert result.outcome == RoundOutcome.WON

    def test_no_input_after_round_ends(self, game):
        """Test that the game ignores keys once the round is over."""
        type_word(game, "CRATE")
        game.submit()

        assert game.type_letter("A") is False
        assert game.handle_key("ENTER") is None
        assert len(game.guesses) == 1

    def test_reset_after_win(self):
        """Test that reset draws a new solution and clears the round."""
        words = ["CRATE", "SLATE", "GRAPE"]
        game = WordleGame(words, rng=random.Random(1))
        game.start()
        type_word(game, game.solution)
        game.submit()

        game.reset()

        assert game.phase == GamePhase.PLAYING
        assert game.outcome == RoundOutcome.IN_PROGRESS
        assert game.solution in words
        assert game.guesses == []
        assert game.current_guess == ""
        assert game.message is None

    def test_reset_after_loss(self, game):
        """Test that reset also works after losing."""
        for word in ("CRANE", "SLATE", "BLAME", "GRAPE", "TRACE"):
            type_word(game, word)
            game.submit()

        game.reset()

        assert game.is_playing
        assert len(game.solution) == 5


class TestHandleKey:
    """Tests for key routing."""

    @pytest.fixture
    def game(self):
        game = WordleGame(["CRATE"])
        game.start()
        return game

    def test_letters_and_backspace(self, game):
        """Test that letter and backspace keys edit the guess."""
        for key in ("c", "r", "x", "Backspace", "a"):
            game.handle_key(key)

        assert game.current_guess == "CRA"

    def test_back_alias(self, game):
        """Test that BACK works like BACKSPACE."""
        game.handle_key("C")
        game.handle_key("Back")

        assert game.current_guess == ""

    def test_enter_submits(self, game):
        """Test that ENTER submits and returns the result."""
        for key in "CRATE":
            game.handle_key(key)

        result = game.handle_key("Enter")

        assert result is not None
        assert result.outcome == RoundOutcome.WON

    def test_other_keys_return_none(self, game):
        """Test that non-submit keys return None."""
        assert game.handle_key("A") is None
        assert game.handle_key("Shift") is None
        assert game.current_guess == "A"

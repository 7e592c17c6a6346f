"""
Round state for the word puzzle.

Owns the solution, the guess history and the current guess. All mutation
happens on the GUI thread; the window reads state back after every key.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from warden.core.feedback import TileState, classify_guess
from warden.core.state import GamePhase, RoundOutcome, StateMachine
from warden.core.words import pick_solution
from warden.utils.logger import get_logger

logger = get_logger(__name__)


LENGTH_MESSAGE = "5 letters. No more, no less."


@dataclass
class SubmitResult:
    """Result of submitting the current guess."""

    accepted: bool
    outcome: RoundOutcome
    guess: str = ""
    feedback: List[TileState] = field(default_factory=list)
    message: Optional[str] = None


class WordleGame:
    """
    Five-letter guessing round.

    Phases: LOADING -> PLAYING -> {WON, LOST} -> PLAYING (after reset).
    """

    def __init__(
        self,
        words: Sequence[str],
        rng: Optional[random.Random] = None,
        word_length: int = 5,
        max_guesses: int = 5,
    ):
        """
        Initialize the game.

        Args:
            words: Non-empty list of uppercase candidate words
            rng: Random source for solution draws
            word_length: Letters per guess
            max_guesses: Guesses allowed per round

        Raises:
            ValueError: If the word list is empty
        """
        if not words:
            raise ValueError("Word list must not be empty")

        self._words = tuple(words)
        self._rng = rng or random.Random()
        self._word_length = word_length
        self._max_guesses = max_guesses

        self._state_machine = StateMachine(initial_state=GamePhase.LOADING)
        self._solution = ""
        self._guesses: List[str] = []
        self._current_guess = ""
        self._message: Optional[str] = None

    def start(self):
        """Draw the first solution and begin playing."""
        if self._state_machine.current_state != GamePhase.LOADING:
            logger.warning("Game already started")
            return

        self._solution = pick_solution(self._words, self._rng)
        self._state_machine.transition_to(GamePhase.PLAYING)
        logger.debug(f"The Warden has chosen a word: {self._solution}")

    def type_letter(self, letter: str) -> bool:
        """
        Append a letter to the current guess.

        Returns:
            True if the letter was appended
        """
        if not self.is_playing:
            return False

        letter = letter.upper()
        if len(letter) != 1 or not ("A" <= letter <= "Z"):
            return False

        if len(self._current_guess) >= self._word_length:
            return False

        self._current_guess += letter
        return True

    def backspace(self) -> bool:
        """Remove the last letter of the current guess."""
        if not self.is_playing or not self._current_guess:
            return False

        self._current_guess = self._current_guess[:-1]
        return True

    def submit(self) -> SubmitResult:
        """
        Submit the current guess.

        Guesses of the wrong length are rejected with a validation message
        and leave the history and outcome untouched.
        """
        if not self.is_playing:
            return SubmitResult(accepted=False, outcome=self.outcome)

        if len(self._current_guess) != self._word_length:
            self._message = LENGTH_MESSAGE
            return SubmitResult(
                accepted=False,
                outcome=self.outcome,
                guess=self._current_guess,
                message=LENGTH_MESSAGE,
            )

        guess = self._current_guess
        self._guesses.append(guess)
        self._current_guess = ""
        self._message = None

        if guess == self._solution:
            self._state_machine.transition_to(GamePhase.WON)
            logger.info(f"Round won in {len(self._guesses)} guesses")
        elif len(self._guesses) >= self._max_guesses:
            self._state_machine.transition_to(GamePhase.LOST)
            logger.info("Round lost")

        return SubmitResult(
            accepted=True,
            outcome=self.outcome,
            guess=guess,
            feedback=classify_guess(guess, self._solution),
        )

    def handle_key(self, key: str) -> Optional[SubmitResult]:
        """
        Route a key name to the matching operation.

        Args:
            key: "ENTER", "BACKSPACE"/"BACK" or a single letter (any case)

        Returns:
            SubmitResult when the key submitted a guess, else None
        """
        if not self.is_playing:
            return None

        upper_key = key.upper()
        if upper_key == "ENTER":
            return self.submit()

        if upper_key in ("BACKSPACE", "BACK"):
            self.backspace()
        else:
            self.type_letter(upper_key)

        return None

    def clear_message(self):
        """Clear the transient validation message."""
        self._message = None

    def reset(self):
        """Start a new round with a freshly drawn solution."""
        self._solution = pick_solution(self._words, self._rng)
        self._guesses = []
        self._current_guess = ""
        self._message = None
        self._state_machine.transition_to(GamePhase.PLAYING)
        logger.debug(f"The Warden has chosen a new word: {self._solution}")

    def feedback_for(self, row: int) -> List[TileState]:
        """Feedback for a submitted row."""
        return classify_guess(self._guesses[row], self._solution)

    # Properties
    @property
    def phase(self) -> GamePhase:
        """Get current game phase."""
        return self._state_machine.current_state

    @property
    def outcome(self) -> RoundOutcome:
        """Get the round outcome."""
        return self._state_machine.outcome

    @property
    def is_playing(self) -> bool:
        """Check if key input is accepted."""
        return self._state_machine.current_state == GamePhase.PLAYING

    @property
    def is_over(self) -> bool:
        """Check if the round has ended."""
        return self.outcome != RoundOutcome.IN_PROGRESS

    @property
    def solution(self) -> str:
        """Get the current solution."""
        return self._solution

    @property
    def guesses(self) -> List[str]:
        """Get a copy of the guess history."""
        return list(self._guesses)

    @property
    def current_guess(self) -> str:
        """Get the guess being typed."""
        return self._current_guess

    @property
    def message(self) -> Optional[str]:
        """Get the transient validation message, if any."""
        return self._message

    @property
    def words(self) -> tuple:
        """Get the word list."""
        return self._words

    @property
    def word_length(self) -> int:
        return self._word_length

    @property
    def max_guesses(self) -> int:
        return self._max_guesses

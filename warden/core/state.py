"""
Game phase management.

Phases of a round and the table of allowed moves between them.
"""

from enum import Enum, auto
from typing import Optional, Set


class GamePhase(Enum):
    """
    Game phases.

    State transitions:
        LOADING -> PLAYING
        PLAYING -> WON
        PLAYING -> LOST
        WON -> PLAYING (after reset)
        LOST -> PLAYING (after reset)
    """

    LOADING = auto()    # Word list not ready yet
    PLAYING = auto()    # Accepting key input
    WON = auto()        # Solution guessed, judgment overlay
    LOST = auto()       # Out of guesses, loser overlay


class RoundOutcome(Enum):
    """Win/loss status of the current round."""

    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


_VALID_TRANSITIONS: dict[GamePhase, Set[GamePhase]] = {
    GamePhase.LOADING: {
        GamePhase.PLAYING,
    },
    GamePhase.PLAYING: {
        GamePhase.WON,
        GamePhase.LOST,
    },
    GamePhase.WON: {
        GamePhase.PLAYING,
    },
    GamePhase.LOST: {
        GamePhase.PLAYING,
    },
}


def is_valid_transition(from_state: GamePhase, to_state: GamePhase) -> bool:
    """Whether the table allows moving from one phase to another. Staying put is allowed."""
    if from_state == to_state:
        return True

    return to_state in _VALID_TRANSITIONS.get(from_state, set())


def outcome_for_phase(phase: GamePhase) -> RoundOutcome:
    """Map a game phase to the round outcome it implies."""
    if phase == GamePhase.WON:
        return RoundOutcome.WON
    if phase == GamePhase.LOST:
        return RoundOutcome.LOST
    return RoundOutcome.IN_PROGRESS


class StateMachine:
    """Tracks the current phase and refuses moves the table does not allow."""

    def __init__(self, initial_state: GamePhase = GamePhase.LOADING):
        """
        Initialize state machine.

        Args:
            initial_state: Starting phase (default: LOADING)
        """
        self._current_state = initial_state
        self._previous_state: Optional[GamePhase] = None

    @property
    def current_state(self) -> GamePhase:
        """Get current phase."""
        return self._current_state

    @property
    def previous_state(self) -> Optional[GamePhase]:
        """Get previous phase."""
        return self._previous_state

    @property
    def outcome(self) -> RoundOutcome:
        """Get the round outcome implied by the current phase."""
        return outcome_for_phase(self._current_state)

    def transition_to(self, new_state: GamePhase) -> bool:
        """
        Transition to a new phase.

        Args:
            new_state: Target phase

        Returns:
            True if transition succeeded, False if invalid
        """
        if not is_valid_transition(self._current_state, new_state):
            return False

        self._previous_state = self._current_state
        self._current_state = new_state
        return True

    def can_transition_to(self, new_state: GamePhase) -> bool:
        """Check if can transition to a phase without actually transitioning."""
        return is_valid_transition(self._current_state, new_state)

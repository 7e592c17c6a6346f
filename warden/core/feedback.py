"""
Letter feedback for submitted guesses.

Membership semantics: a letter that is not an exact match counts as
present whenever it occurs anywhere in the solution. Repeated letters are
not reconciled against the solution's letter counts.
"""

from enum import Enum
from typing import List


class TileState(Enum):
    """Display state of a single board tile."""

    EMPTY = "empty"        # Nothing typed
    PENDING = "pending"    # Typed but not submitted
    EXACT = "exact"        # Right letter, right position
    PRESENT = "present"    # Letter occurs elsewhere in the solution
    ABSENT = "absent"      # Letter not in the solution


def classify_letter(letter: str, index: int, solution: str) -> TileState:
    """Classify one letter of a submitted guess."""
    if index < len(solution) and letter == solution[index]:
        return TileState.EXACT
    if letter in solution:
        return TileState.PRESENT
    return TileState.ABSENT


def classify_guess(guess: str, solution: str) -> List[TileState]:
    """
    Classify every letter of a submitted guess against the solution.

    Args:
        guess: Submitted guess (uppercase)
        solution: Current solution (uppercase)

    Returns:
        One TileState per letter of the guess
    """
    return [classify_letter(letter, i, solution) for i, letter in enumerate(guess)]


def row_states(guess: str, solution: str, submitted: bool, width: int = 5) -> List[TileState]:
    """
    Tile states for one board row as it is drawn.

    Unsubmitted rows show typed letters as PENDING and the rest as EMPTY.
    """
    if submitted:
        states = classify_guess(guess[:width], solution)
    else:
        states = [TileState.PENDING for _ in guess[:width]]

    states.extend(TileState.EMPTY for _ in range(width - len(states)))
    return states

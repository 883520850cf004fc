"""
Domain adapter contract for the Monte Carlo Tree Search engine.

A domain owns the game state and mutates it in place. The engine walks the
search tree by replaying transitions with make_transition() and restores the
position with unmake_transition(), so both calls must be exact inverses and
may be nested arbitrarily deep (stack discipline).

Transitions are opaque to the engine: any hashable object with value
equality works (tuples, NamedTuples, frozen dataclasses, ints, enums...).
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Hashable, Collection, Sequence
import random


# Transitions only need value equality and a stable hash
Transition = Hashable


class Domain(ABC):
    """
    Base class for games searched by MonteCarloTreeSearch.

    Subclasses implement the game rules. The two policy hooks default to a
    uniform random choice using the random source handed in by the engine.
    """

    @abstractmethod
    def possible_transitions(self) -> Collection[Transition]:
        """
        Get the legal transitions from the current position.

        Returns:
            Unique transitions, including 'pass' like moves when the game has
            them. Empty if and only if is_over() is True.
        """

    @abstractmethod
    def make_transition(self, transition: Transition) -> None:
        """Apply a transition to the current position."""

    @abstractmethod
    def unmake_transition(self, transition: Transition) -> None:
        """Rewind the last transition applied with make_transition()."""

    @abstractmethod
    def is_over(self) -> bool:
        """Whether no transition is possible from the current position."""

    @abstractmethod
    def get_winner(self) -> int:
        """
        Get the winner of a finished game.

        Only defined when is_over() is True. Domains with draws return a
        reserved player id of their own choosing.
        """

    @abstractmethod
    def get_current_player(self) -> int:
        """Get the id of the player to move in the current position."""

    def expansion_transition(
        self,
        transitions: Sequence[Transition],
        rng: random.Random
    ) -> Transition:
        """
        Choose the transition to expand toward and simulate from.

        Args:
            transitions: Non-empty legal transitions of the frontier position
            rng: Random source owned by the engine

        Returns:
            One of the given transitions
        """
        return rng.choice(transitions)

    def simulation_transition(
        self,
        transitions: Sequence[Transition],
        rng: random.Random
    ) -> Transition:
        """
        Choose the next transition of a random playout.

        Args:
            transitions: Non-empty legal transitions of the current position
            rng: Random source owned by the engine

        Returns:
            One of the given transitions
        """
        return rng.choice(transitions)

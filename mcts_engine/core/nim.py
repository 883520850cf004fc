"""
Single heap Nim sample domain.

Players take turns removing between 1 and max_take objects from a heap; the
player who takes the last object wins. Any number of players may sit at the
table, which makes it handy for checking that the engine never assumes two.
"""
from __future__ import annotations
from typing import List, Set

from mcts_engine.core.domain import Domain


class Nim(Domain):
    """Stateful Nim game. Transitions are plain ints (objects taken)."""

    def __init__(self, heap: int = 10, max_take: int = 3, num_players: int = 2):
        if heap < 0:
            raise ValueError("heap must be non-negative")
        if max_take <= 0:
            raise ValueError("max_take must be positive")
        if num_players < 2:
            raise ValueError("num_players must be at least 2")

        self.initial_heap = heap
        self.heap = heap
        self.max_take = max_take
        self.num_players = num_players
        self.current_player = 0
        self.taken: List[int] = []

    def possible_transitions(self) -> Set[int]:
        return set(range(1, min(self.max_take, self.heap) + 1))

    def make_transition(self, transition: int) -> None:
        if not 1 <= transition <= min(self.max_take, self.heap):
            raise RuntimeError(f"Cannot take {transition} from a heap of {self.heap}")
        self.heap -= transition
        self.taken.append(transition)
        self.current_player = (self.current_player + 1) % self.num_players

    def unmake_transition(self, transition: int) -> None:
        if not self.taken or self.taken[-1] != transition:
            raise RuntimeError(f"{transition} is not the last transition made")
        self.taken.pop()
        self.heap += transition
        self.current_player = (self.current_player - 1) % self.num_players

    def is_over(self) -> bool:
        return self.heap == 0

    def get_winner(self) -> int:
        # The player who emptied the heap moved just before the current one
        return (self.current_player - 1) % self.num_players

    def get_current_player(self) -> int:
        return self.current_player

    def __str__(self) -> str:
        return f"Nim(heap={self.heap}, player={self.current_player})"

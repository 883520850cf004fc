"""
Tic-tac-toe sample domain.

A 3x3 grid stored in a NumPy array. X always starts. A finished game without
three in a row is reported with the DRAW player id.
"""
from __future__ import annotations
from typing import List, NamedTuple, Optional, Set
from enum import IntEnum

import numpy as np

from mcts_engine.core.domain import Domain


GRID_SIZE = 3


class Mark(IntEnum):
    """Content of a grid cell, doubling as player ids."""
    FREE = 0
    X = 1
    O = 2


# Reserved winner id for a full grid without a line
DRAW = int(Mark.FREE)

SYMBOLS = {Mark.FREE: " ", Mark.X: "X", Mark.O: "O"}


class TicTacToeMove(NamedTuple):
    """A move: who plays where."""
    x: int
    y: int
    player: int

    def __str__(self) -> str:
        return f"{SYMBOLS[Mark(self.player)]} ({self.x};{self.y})"


class TicTacToe(Domain):
    """
    Stateful tic-tac-toe game for the MCTS engine.

    The grid is mutated in place by make_transition/unmake_transition.
    """

    def __init__(self):
        self.grid = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.int8)
        self.current_player = int(Mark.X)
        self.turn = 0
        self.history: List[TicTacToeMove] = []

    def new_game(self) -> None:
        """Clear the grid and give the first move to X."""
        self.grid.fill(Mark.FREE)
        self.current_player = int(Mark.X)
        self.turn = 0
        self.history = []

    def has_won(self, player: int) -> bool:
        """
        Check whether a player owns a full row, column or diagonal.

        Args:
            player: Player id (Mark.X or Mark.O)

        Returns:
            True if the player has three in a row
        """
        owned = self.grid == player
        return bool(
            owned.all(axis=0).any()
            or owned.all(axis=1).any()
            or np.diagonal(owned).all()
            or np.diagonal(np.fliplr(owned)).all()
        )

    def possible_transitions(self) -> Set[TicTacToeMove]:
        if self.is_over():
            return set()
        free = np.argwhere(self.grid == Mark.FREE)
        return {TicTacToeMove(int(x), int(y), self.current_player) for x, y in free}

    def make_transition(self, transition: TicTacToeMove) -> None:
        if self.grid[transition.x, transition.y] != Mark.FREE:
            raise RuntimeError(f"Cell ({transition.x};{transition.y}) is not free")
        self.grid[transition.x, transition.y] = self.current_player
        self.turn += 1
        self.history.append(transition)
        self._next_player()

    def unmake_transition(self, transition: TicTacToeMove) -> None:
        if not self.history or self.history[-1] != transition:
            raise RuntimeError(f"{transition} is not the last move played")
        self.grid[transition.x, transition.y] = Mark.FREE
        self.turn -= 1
        self.history.pop()
        self._next_player()

    def is_over(self) -> bool:
        return (self.has_won(Mark.X) or self.has_won(Mark.O)
                or self.turn == GRID_SIZE * GRID_SIZE)

    def get_winner(self) -> int:
        if self.has_won(Mark.X):
            return int(Mark.X)
        if self.has_won(Mark.O):
            return int(Mark.O)
        return DRAW

    def get_current_player(self) -> int:
        return self.current_player

    def winner_name(self) -> Optional[str]:
        """Name of the winner, 'draw', or None while the game goes on."""
        if not self.is_over():
            return None
        winner = self.get_winner()
        return "draw" if winner == DRAW else SYMBOLS[Mark(winner)]

    def _next_player(self) -> None:
        # X=1 <-> O=2
        self.current_player = 3 - self.current_player

    def __str__(self) -> str:
        rows = []
        for y in range(GRID_SIZE):
            rows.append("".join(SYMBOLS[Mark(int(self.grid[x, y]))] for x in range(GRID_SIZE)))
        return "\n".join(rows) + "\n"

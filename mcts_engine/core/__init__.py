"""
MCTS Engine Core Package

This package contains the domain side of the engine:
- The Domain adapter contract every searched game implements
- Sample domains (tic-tac-toe, Nim) used to exercise the engine

All core components can be imported directly from this package.
"""

# Domain contract
from mcts_engine.core.domain import Domain, Transition

# Sample domains
from mcts_engine.core.tictactoe import (
    TicTacToe, TicTacToeMove, Mark, DRAW, GRID_SIZE
)
from mcts_engine.core.nim import Nim

__all__ = [
    # Contract
    'Domain', 'Transition',

    # Tic-tac-toe
    'TicTacToe', 'TicTacToeMove', 'Mark', 'DRAW', 'GRID_SIZE',

    # Nim
    'Nim'
]

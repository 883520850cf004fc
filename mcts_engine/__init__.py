"""
MCTS Engine - A reusable Monte Carlo Tree Search engine for turn based games.

This package provides a stateful UCT search that works on any game exposing
the Domain contract, keeps its tree across moves, and ships sample domains
(tic-tac-toe, Nim) with a game runner to exercise it.
"""

__version__ = "0.1.0"
__author__ = "MCTS Engine Team"

# Make key components available at package level
from mcts_engine.core.domain import Domain
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.node import Node
from mcts_engine.mcts.search import MonteCarloTreeSearch

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

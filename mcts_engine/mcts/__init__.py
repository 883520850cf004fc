"""
Monte Carlo Tree Search (MCTS) engine.

The engine searches any stateful Domain and keeps its tree across moves.
Each iteration works in four steps:

1. Selection: Starting from the root, walk down with the UCT policy until a leaf
   is reached, replaying each transition on the domain.
2. Expansion: Create every child of the leaf and step into one of them.
3. Simulation: From there, play random transitions until the game is over.
4. Backpropagation: Rewind the domain and record the winner on every node walked.

The search budget (iterations, time limit), the exploration constant and the
final move selection are set through MCTSConfig.
"""

from mcts_engine.mcts.node import Node, count_nodes, max_tree_depth
from mcts_engine.mcts.path import Path
from mcts_engine.mcts.policy import SelectionPolicy, UCT, VALUE_POLICIES, get_value_policy
from mcts_engine.mcts.search import MonteCarloTreeSearch
from mcts_engine.mcts.agent import MCTSAgent, RandomAgent
from mcts_engine.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=1000,              # Number of MCTS iterations per move
    exploration_weight=1.41,      # UCT exploration parameter (sqrt(2))
    time_limit=None,              # Optional time limit in seconds (None = no limit)
    final_selection="wins"        # Rank root children by raw win count
)

__all__ = [
    'MonteCarloTreeSearch',
    'MCTSAgent',
    'RandomAgent',
    'MCTSConfig',
    'Node',
    'Path',
    'SelectionPolicy',
    'UCT',
    'VALUE_POLICIES',
    'get_value_policy',
    'count_nodes',
    'max_tree_depth',
    'DEFAULT_CONFIG'
]

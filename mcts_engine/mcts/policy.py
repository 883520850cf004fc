"""
Selection and value policies for Monte Carlo Tree Search.

Selection policies pick the child to walk into during the selection phase.
Value policies rank the children of the root once the search is over.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Dict, Hashable, Iterable, Optional, Tuple
import math

from mcts_engine.mcts.node import Node


Selection = Tuple[Hashable, Optional[Node]]


class SelectionPolicy(ABC):
    """Strategy used to choose the next transition of the selection phase."""

    @abstractmethod
    def select(
        self,
        node: Node,
        player: int,
        transitions: Iterable[Hashable]
    ) -> Optional[Selection]:
        """
        Select a promising non-terminal child.

        Args:
            node: A node that has already been visited
            player: The player to move at this node
            transitions: Legal transitions of the position the node stands for

        Returns:
            (transition, child) where child is None if the transition has never
            been explored, or None when there is no child left to explore
        """


class UCT(SelectionPolicy):
    """
    Upper Confidence bound applied to Trees.

    UCT = wins / n + C * sqrt(ln(N) / n)

    where n is the number of simulations of the child and N the number of
    simulations of its parent. Terminal children are never selected.
    Unexplored transitions are returned before any score is computed.
    """

    def __init__(self, exploration_weight: float = math.sqrt(2)):
        self.exploration_weight = exploration_weight

    def select(
        self,
        node: Node,
        player: int,
        transitions: Iterable[Hashable]
    ) -> Optional[Selection]:
        best: Optional[Selection] = None
        best_score = float('-inf')

        for transition in transitions:
            child = node.get_child(transition)
            if child is not None and child.is_terminal():
                continue
            if child is None or child.simulations == 0:
                # Unexplored moves come first
                return transition, child
            score = self.score(node, child, player)
            if score > best_score:
                best_score = score
                best = (transition, child)

        return best

    def score(self, parent: Node, child: Node, player: int) -> float:
        """
        Calculate the UCT score of an explored child.

        Args:
            parent: The node being walked through
            child: One of its children with at least one simulation
            player: The player to move at the parent

        Returns:
            UCT score
        """
        exploitation = child.wins_for(player) / child.simulations
        exploration = math.sqrt(math.log(parent.simulations) / child.simulations)
        return exploitation + self.exploration_weight * exploration


ValuePolicy = Callable[[Node, int], float]

VALUE_POLICIES: Dict[str, ValuePolicy] = {
    "wins": lambda node, player: node.value(player),
    "ratio": lambda node, player: node.ratio(player),
    "visits": lambda node, player: node.simulations,
}


def get_value_policy(name: str) -> ValuePolicy:
    """
    Get a value policy by name.

    Args:
        name: One of "wins", "ratio" or "visits"

    Returns:
        Function scoring a child node for a player
    """
    try:
        return VALUE_POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown value policy: {name}") from None

"""
Monte Carlo Tree Search Node.

This module defines the Node class which represents a vertex of the search
tree. A node does not hold any game state: the domain owns the state and the
engine replays transitions to reach the position a node stands for. A node
only aggregates the outcomes of the simulations that went through it.
"""
from __future__ import annotations
from typing import Dict, Hashable, Iterator, Optional, Tuple
import weakref


class Node:
    """
    A node in the Monte Carlo Tree Search.

    Each node tracks how many simulations went through it and how many of
    them each player won. Children are keyed by the transition leading to
    them; the parent is only weakly referenced so that dropping a root
    releases the whole subtree that hangs from it.
    """

    def __init__(
        self,
        parent: Optional[Node] = None,
        transition: Optional[Hashable] = None,
        terminal: bool = False,
    ):
        """
        Initialize a node and attach it to its parent.

        Args:
            parent: The parent node (None for a root)
            transition: The transition from the parent to this node (ignored for a root)
            terminal: Whether the node has nothing left to explore
        """
        self.terminal = terminal
        self.simulations = 0
        self.wins: Dict[int, int] = {}
        self.children: Dict[Hashable, Node] = {}
        self.transition = transition if parent is not None else None
        self._parent: Optional[weakref.ReferenceType] = None

        if parent is not None:
            self._parent = weakref.ref(parent)
            parent.children[transition] = self

    @property
    def parent(self) -> Optional[Node]:
        """The parent node, or None for a root or a discarded parent."""
        return self._parent() if self._parent is not None else None

    def add_child(self, transition: Hashable, terminal: bool = False) -> Node:
        """
        Create the child reached by a transition.

        Args:
            transition: Transition from this node to the child
            terminal: Whether the position reached is over

        Returns:
            The new child node
        """
        return Node(parent=self, transition=transition, terminal=terminal)

    def is_leaf(self) -> bool:
        """
        A leaf node has no child, either because it was never expanded
        or because it stands for a finished game.
        """
        return not self.children

    def is_terminal(self) -> bool:
        """
        A node is terminal when there is nothing left to explore below it:
        either the game is over, or its whole subtree has been explored.
        """
        return self.terminal

    def set_terminal(self, terminal: bool) -> None:
        self.terminal = terminal

    def result(self, winner: int) -> None:
        """
        Record the outcome of one simulation that went through this node.

        Args:
            winner: Player id reported by the domain (draw sentinels included)
        """
        self.simulations += 1
        self.wins[winner] = self.wins.get(winner, 0) + 1

    def wins_for(self, player: int) -> int:
        """Number of simulations through this node won by a player."""
        return self.wins.get(player, 0)

    def value(self, player: int) -> float:
        """
        Get the value of the node for a player.

        The child with the greatest value is the best choice for the player.
        The raw win count favours well explored children.
        """
        return self.wins_for(player)

    def ratio(self, player: int) -> float:
        """
        Get the share of simulations won by a player.

        Returns:
            wins / simulations, or 0 when no simulation went through the node
        """
        if self.simulations == 0:
            return 0.0
        return self.wins_for(player) / self.simulations

    def make_root(self) -> None:
        """Forget the parent so this node becomes the root of its own tree."""
        self._parent = None
        self.transition = None

    def get_child(self, transition: Hashable) -> Optional[Node]:
        """
        Get the child reached by a transition.

        Returns:
            The child node, or None if the transition was never explored
        """
        return self.children.get(transition)

    # Same lookup, kept under both names
    get_node = get_child

    def items(self) -> Iterator[Tuple[Hashable, Node]]:
        """Iterate over (transition, child) pairs."""
        return iter(self.children.items())

    def __str__(self) -> str:
        return (f"Node(simulations={self.simulations}, "
                f"wins={self.wins}, "
                f"children={len(self.children)}, "
                f"terminal={self.terminal})")


def count_nodes(node: Node) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        node: Root node of the tree

    Returns:
        Total number of nodes
    """
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(current.children.values())
    return count


def max_tree_depth(node: Node) -> int:
    """Depth of the deepest node below the given root (0 for a lone root)."""
    deepest = 0
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in current.children.values())
    return deepest

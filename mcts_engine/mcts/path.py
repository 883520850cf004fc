"""
Search path recorded during one MCTS iteration.

The path lists the (transition, node) steps walked from the root to the
frontier. It is used to rewind the domain and to back-propagate the result
of the simulation, then thrown away.
"""
from __future__ import annotations
from typing import Hashable, Iterator, List, Tuple

from mcts_engine.mcts.node import Node


class Path:
    """Ordered (transition, node) steps starting below a root node."""

    def __init__(self, root: Node):
        if root is None:
            raise ValueError("The root node of a path must not be None")
        self.root = root
        self.steps: List[Tuple[Hashable, Node]] = []

    def append(self, transition: Hashable, node: Node) -> None:
        """
        Extend the path with a step.

        This does not attach the node to the end node; the caller links the
        tree, the path only records the walk.
        """
        self.steps.append((transition, node))

    def pop(self) -> Tuple[Hashable, Node]:
        """Remove and return the deepest step."""
        return self.steps.pop()

    @property
    def end_node(self) -> Node:
        """The deepest node of the path (the root when the path is empty)."""
        return self.steps[-1][1] if self.steps else self.root

    def is_empty(self) -> bool:
        return not self.steps

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Tuple[Hashable, Node]]:
        return iter(self.steps)

    def __str__(self) -> str:
        return "".join(f" -> {transition}" for transition, _ in self.steps)

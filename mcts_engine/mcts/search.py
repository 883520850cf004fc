"""
Monte Carlo Tree Search (MCTS) engine.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Walk the tree with the selection policy down to a leaf
2. Expansion: Create every missing child of the leaf and step into one of them
3. Simulation: Run a random playout to the end of the game
4. Backpropagation: Rewind the walk and update statistics up to the root

The search is stateful: every phase mutates the domain in place and restores
it before returning, so the domain is back at the root position between two
iterations. The tree is kept across moves: committing a move with
do_transition() re-roots the tree at the matching child so its statistics are
reused by the next search.
"""
from __future__ import annotations
from typing import Any, Dict, Hashable, List, Optional, Tuple
import random
import time

from mcts_engine.core.domain import Domain
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.node import Node, count_nodes
from mcts_engine.mcts.path import Path
from mcts_engine.mcts.policy import SelectionPolicy, UCT, get_value_policy


class MonteCarloTreeSearch:
    """
    Monte Carlo Tree Search over a stateful domain.

    Get the best choice for the current player with get_best_transition(),
    play it with do_transition() and roll it back with undo_transition().
    """

    def __init__(
        self,
        domain: Domain,
        config: Optional[MCTSConfig] = None,
        selection_policy: Optional[SelectionPolicy] = None
    ):
        """
        Initialize a search engine.

        Args:
            domain: The game to search, mutated in place during a search
            config: MCTS configuration parameters
            selection_policy: Selection phase strategy (UCT by default)
        """
        self.domain = domain
        self.config = config or MCTSConfig()
        self.selection_policy = selection_policy or UCT(self.config.exploration_weight)
        self.value_policy = get_value_policy(self.config.final_selection)
        self.rng = random.Random(self.config.seed)

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        self.reset()

    @property
    def root(self) -> Node:
        """The node standing for the current position of the domain."""
        return self._root

    def reset(self) -> None:
        """Start a new exploration tree."""
        self._root = Node(terminal=False)
        # Previous roots, so committed transitions can be rolled back
        self._history: List[Tuple[Node, Hashable]] = []

    # region API

    def get_best_transition(self) -> Optional[Hashable]:
        """
        Get the best transition for the current player.

        The transition must be played with do_transition() so that the next
        search starts from the right node.

        Returns:
            The best transition, or None if the current player has no possible move
        """
        if not self.domain.possible_transitions():
            # the game is over, nothing to search
            return None

        player = self.domain.get_current_player()
        start_time = time.time()
        stats = {
            "iterations": 0,
            "max_depth": 0,
            "total_simulation_steps": 0,
            "fully_explored": False,
            "stopped_early": False,
        }

        while self.config.iterations is None or stats["iterations"] < self.config.iterations:
            # at least one iteration, so the root has children to choose from
            if (stats["iterations"] > 0 and self.config.time_limit is not None
                    and time.time() - start_time > self.config.time_limit):
                stats["stopped_early"] = True
                break

            explored = self.run_iteration(stats)
            if not explored:
                stats["fully_explored"] = True
                break

        # state is restored
        self._check_player(player)

        best = self._best_child(player)

        stats["time_elapsed"] = time.time() - start_time
        stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
        stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])
        stats["node_count"] = count_nodes(self._root)
        self.last_stats = stats

        return best

    def do_transition(self, transition: Hashable) -> None:
        """
        Play a transition and move the root of the tree to the matching child.

        Should only be called with a transition returned by
        get_best_transition(). Any other legal transition starts a fresh tree
        below the current root.

        Args:
            transition: The transition to play
        """
        self.domain.make_transition(transition)
        child = self._root.get_child(transition)
        if child is None:
            child = Node(terminal=self.domain.is_over())
        self._history.append((self._root, transition))
        child.make_root()
        self._root = child

    def undo_transition(self, transition: Hashable) -> None:
        """
        Roll back the last transition played with do_transition() and move
        the root of the tree back to its previous node.

        Args:
            transition: The transition to roll back

        Raises:
            RuntimeError: If the previous root was discarded or the transition
                is not the last one played
        """
        if not self._history:
            raise RuntimeError(
                "Cannot undo transition: the previous root was discarded "
                "(simplify_tree() or reset() was called)")
        parent, played = self._history[-1]
        if played != transition:
            raise RuntimeError(f"Cannot undo {transition}: last transition played was {played}")

        self.domain.unmake_transition(transition)
        self._history.pop()
        self._root = parent

    def simplify_tree(self) -> None:
        """
        Discard every node that is not below the current root.

        Alternatives that were never played are released, which also means
        undo_transition() can no longer go back past this point.
        """
        self._history.clear()
        self._root.make_root()

    # endregion

    # region MCTS

    def run_iteration(self, stats: Optional[Dict[str, Any]] = None) -> bool:
        """
        Run one selection, expansion, simulation and backpropagation pass.

        Args:
            stats: Optional statistics dictionary to update

        Returns:
            False if the tree below the root is fully explored and nothing was run
        """
        player = self.domain.get_current_player()
        path = Path(self._root)

        leaf = self.selection(path)
        if leaf is None:
            return False

        self.expansion(leaf, path)
        winner, steps = self.simulation()
        depth = len(path)
        self.backpropagation(path, winner)

        if self.config.check_state:
            self._check_player(player)

        if stats is not None:
            stats["iterations"] += 1
            stats["total_simulation_steps"] += steps
            stats["max_depth"] = max(stats["max_depth"], depth)
        return True

    def selection(self, path: Path) -> Optional[Node]:
        """
        Walk down to a leaf node to expand.

        Transitions are replayed on the domain as the walk goes and recorded
        in the path. A node whose children are all explored terminal nodes is
        marked terminal and the walk resumes from its parent.

        Args:
            path: Empty path rooted at the current root

        Returns:
            The leaf node to expand or None if there's
            nothing left to explore
        """
        node = path.root
        while not node.is_leaf():
            selected = self.selection_policy.select(
                node, self.domain.get_current_player(), self.domain.possible_transitions())

            if selected is None:
                node.set_terminal(True)
                if path.is_empty():
                    return None
                # rewind to the parent
                transition, _ = path.pop()
                self.domain.unmake_transition(transition)
                node = path.end_node
                continue

            transition, child = selected
            self.domain.make_transition(transition)
            if child is None:
                # this transition has never been explored
                child = node.add_child(transition, terminal=self.domain.is_over())
            path.append(transition, child)
            node = child

        return node

    def expansion(self, leaf: Node, path: Path) -> Node:
        """
        Create every child of a leaf node and step into one of them.

        Args:
            leaf: Leaf node returned by the selection phase
            path: Path ending at the leaf, extended with the chosen child

        Returns:
            The node to simulate from. It is the leaf itself when the leaf is
            terminal, and it might be terminal itself.

        Raises:
            RuntimeError: If the leaf is not terminal but the domain has no move
        """
        if leaf.is_terminal():
            return leaf

        transitions = list(self.domain.possible_transitions())
        if not transitions:
            raise RuntimeError(f"Cannot expand a position without possible transitions (path:{path})")

        hero = self.domain.expansion_transition(transitions, self.rng)

        for transition in transitions:
            if leaf.get_child(transition) is None:
                self.domain.make_transition(transition)
                terminal = self.domain.is_over()
                self.domain.unmake_transition(transition)
                leaf.add_child(transition, terminal=terminal)

        child = leaf.get_child(hero)
        if child is None:
            raise RuntimeError(f"Expansion policy returned an impossible transition: {hero}")
        self.domain.make_transition(hero)
        path.append(hero, child)
        return child

    def simulation(self) -> Tuple[int, int]:
        """
        Run a random playout from the current position and rewind it.

        No node is created during this phase.

        Returns:
            Tuple of (winner, number of transitions played)
        """
        played = []
        while not self.domain.is_over():
            transitions = list(self.domain.possible_transitions())
            if not transitions:
                raise RuntimeError("Domain is not over but has no possible transition")
            transition = self.domain.simulation_transition(transitions, self.rng)
            self.domain.make_transition(transition)
            played.append(transition)

        winner = self.domain.get_winner()

        for transition in reversed(played):
            self.domain.unmake_transition(transition)

        return winner, len(played)

    def backpropagation(self, path: Path, winner: int) -> None:
        """
        Rewind the path and record the winner on each of its nodes.

        Args:
            path: Path from the root to the simulated node
            winner: The winner of the simulation
        """
        for transition, node in reversed(path.steps):
            self.domain.unmake_transition(transition)
            node.result(winner)
        path.root.result(winner)

    # endregion

    # region statistics

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Get statistics for all transitions from the root.

        Returns:
            Dictionary mapping transition strings to statistics
        """
        player = self.domain.get_current_player()
        result = {}
        for transition, child in self._root.items():
            result[str(transition)] = {
                "visits": child.simulations,
                "wins": child.wins_for(player),
                "ratio": child.ratio(player),
                "terminal": child.is_terminal(),
            }
        return result

    def get_principal_variation(self, max_depth: int = 10) -> List[Tuple[Hashable, float]]:
        """
        Get the principal variation (most visited path) from the root.

        Args:
            max_depth: Maximum depth to explore

        Returns:
            List of (transition, visits share) pairs
        """
        result = []
        current = self._root
        while current.children and len(result) < max_depth:
            transition, best_child = max(current.items(), key=lambda item: item[1].simulations)
            result.append((transition, best_child.simulations / max(1, current.simulations)))
            current = best_child
        return result

    # endregion

    def _best_child(self, player: int) -> Optional[Hashable]:
        best = None
        best_value = float('-inf')
        for transition, child in self._root.items():
            value = self.value_policy(child, player)
            if value > best_value:
                best_value = value
                best = transition
        return best

    def _check_player(self, player: int) -> None:
        current = self.domain.get_current_player()
        if current != player:
            raise RuntimeError(
                f"Domain state was not restored: player {current} to move instead of {player}")


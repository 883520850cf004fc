"""
Agents choosing transitions for a player.

An agent looks at a MonteCarloTreeSearch engine (and the domain it wraps)
and returns the transition its player should play. The MCTS agent asks the
engine for its best transition and keeps statistics about each search; the
random agent is the usual baseline opponent.
"""
from typing import Any, Dict, Hashable, List, Optional, Tuple
import json
import random

from mcts_engine.mcts.search import MonteCarloTreeSearch


class MCTSAgent:
    """
    Monte Carlo Tree Search agent.

    This agent asks the engine for its best transition and provides
    statistics about the search process.
    """

    def __init__(self, name: str = "MCTS Agent", verbose: bool = False):
        """
        Initialize an MCTS agent.

        Args:
            name: Name of the agent
            verbose: Whether to print detailed information after each search
        """
        self.name = name
        self.verbose = verbose

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all transitions and their statistics
        self.action_history: List[Tuple[Hashable, Dict[str, Any]]] = []

    def select_transition(self, engine: MonteCarloTreeSearch) -> Optional[Hashable]:
        """
        Select a transition using Monte Carlo Tree Search.

        Args:
            engine: Search engine positioned on the current state

        Returns:
            Selected transition, or None if there is no possible move
        """
        transition = engine.get_best_transition()
        stats = dict(engine.last_stats)

        self.last_stats = stats
        self.action_history.append((transition, stats))

        if self.verbose:
            self._print_search_info(engine, transition, stats)

        return transition

    def _print_search_info(
        self,
        engine: MonteCarloTreeSearch,
        transition: Optional[Hashable],
        stats: Dict[str, Any]
    ) -> None:
        """
        Print information about the search.

        Args:
            engine: Engine that ran the search
            transition: Selected transition
            stats: Search statistics
        """
        print(f"\n{self.name} selected: {transition}")
        if not stats:
            return
        print(f"Iterations: {stats['iterations']}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}")
        print(f"Max depth: {stats['max_depth']}")
        if stats["fully_explored"]:
            print("Tree fully explored")

        # Print top transitions by visit count
        action_stats = engine.get_action_statistics()
        if action_stats:
            print("\nTop transitions:")
            by_visits = sorted(action_stats.items(), key=lambda x: x[1]["visits"], reverse=True)
            for i, (transition_str, values) in enumerate(by_visits[:5]):
                print(f"{i+1}. {transition_str} - {values['visits']} visits, "
                      f"{values['wins']} wins, {values['ratio']:.3f} ratio")

    def get_last_statistics(self) -> Dict[str, Any]:
        """Get statistics from the most recent search."""
        return self.last_stats

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        # Transitions are written as strings
        history = []
        for transition, stats in self.action_history:
            history.append({
                "transition": str(transition),
                "stats": stats
            })

        data = {
            "agent_name": self.name,
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        return f"{self.name} (MCTS)"


class RandomAgent:
    """Agent playing a uniformly random legal transition."""

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        self.name = name
        self.rng = random.Random(seed)

    def select_transition(self, engine: MonteCarloTreeSearch) -> Optional[Hashable]:
        transitions = list(engine.domain.possible_transitions())
        if not transitions:
            return None
        return self.rng.choice(transitions)

    def __str__(self) -> str:
        return f"{self.name} (random)"

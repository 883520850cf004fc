#!/usr/bin/env python
"""
Tests for the Monte Carlo Tree Search engine.

This script checks the engine against small games:
1. The domain is restored after every search
2. Simulation counts and win counts add up on the root
3. Re-rooting, rollback and tree simplification
4. Full exploration of tiny games
5. Contract violations fail loudly
"""
import gc
import time
import unittest
import weakref

import numpy as np

from mcts_engine.core.domain import Domain
from mcts_engine.core.nim import Nim
from mcts_engine.core.tictactoe import TicTacToe, TicTacToeMove, Mark
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.node import count_nodes
from mcts_engine.mcts.path import Path
from mcts_engine.mcts.search import MonteCarloTreeSearch


class StuckDomain(Domain):
    """A game that is never over but offers no move."""

    def possible_transitions(self):
        return set()

    def make_transition(self, transition):
        pass

    def unmake_transition(self, transition):
        pass

    def is_over(self):
        return False

    def get_winner(self):
        raise RuntimeError("not over")

    def get_current_player(self):
        return 0


class LeakyNim(Nim):
    """Nim whose rewind forgets to give the turn back (seats enough players to notice)."""

    def unmake_transition(self, transition):
        self.taken.pop()
        self.heap += transition


def walk(node):
    """Yield every node of a tree."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(current.children.values())


class TestSearchOnTicTacToe(unittest.TestCase):
    """Test case for searches on tic-tac-toe."""

    def setUp(self):
        """Set up test fixtures."""
        self.game = TicTacToe()
        self.config = MCTSConfig(iterations=200, seed=42)
        self.engine = MonteCarloTreeSearch(self.game, self.config)

    def assertUnchanged(self, grid, player, turn):
        self.assertTrue(np.array_equal(self.game.grid, grid))
        self.assertEqual(self.game.get_current_player(), player)
        self.assertEqual(self.game.turn, turn)
        self.assertEqual(len(self.game.history), turn)

    def test_state_restored(self):
        """Repeated searches leave the game untouched."""
        grid = self.game.grid.copy()
        for _ in range(3):
            transition = self.engine.get_best_transition()
            self.assertIsNotNone(transition)
            self.assertUnchanged(grid, int(Mark.X), 0)

    def test_best_transition_is_legal(self):
        transition = self.engine.get_best_transition()
        self.assertIn(transition, self.game.possible_transitions())
        self.assertEqual(transition.player, Mark.X)

    def test_simulation_counts(self):
        """The root records one simulation per iteration."""
        self.engine.get_best_transition()
        root = self.engine.root

        self.assertEqual(self.engine.last_stats["iterations"], 200)
        self.assertEqual(root.simulations, 200)
        self.assertEqual(sum(root.wins.values()), root.simulations)

        # Children share the root simulations
        self.assertEqual(len(root.children), 9)
        self.assertEqual(sum(child.simulations for child in root.children.values()), 200)

        # A second search keeps accumulating on the same root
        self.engine.get_best_transition()
        self.assertEqual(self.engine.root.simulations, 400)

    def test_ratio_bounds(self):
        """Every ratio stays in [0, 1] and is 0 without simulation."""
        self.engine.get_best_transition()
        for node in walk(self.engine.root):
            for player in (0, 1, 2):
                ratio = node.ratio(player)
                self.assertGreaterEqual(ratio, 0)
                self.assertLessEqual(ratio, 1)
                if node.simulations == 0:
                    self.assertEqual(ratio, 0)

    def test_no_move_when_over(self):
        """None is returned once the game is over, never before."""
        for x, y in [(0, 0), (1, 0), (0, 1), (1, 1)]:
            self.assertIsNotNone(self.engine.get_best_transition())
            self.engine.do_transition(TicTacToeMove(x, y, self.game.current_player))
        # X completes the first column
        self.assertIsNotNone(self.engine.get_best_transition())
        self.engine.do_transition(TicTacToeMove(0, 2, self.game.current_player))

        self.assertTrue(self.game.is_over())
        self.assertEqual(self.game.get_winner(), Mark.X)
        self.assertIsNone(self.engine.get_best_transition())

    def test_do_transition_reuses_child(self):
        """Re-rooting keeps the statistics of the played child."""
        transition = self.engine.get_best_transition()
        child = self.engine.root.get_child(transition)
        simulations = child.simulations
        wins = dict(child.wins)

        self.engine.do_transition(transition)

        self.assertIs(self.engine.root, child)
        self.assertIsNone(self.engine.root.parent)
        self.assertEqual(self.engine.root.simulations, simulations)
        self.assertEqual(self.engine.root.wins, wins)
        self.assertEqual(self.game.turn, 1)
        self.assertEqual(self.game.get_current_player(), Mark.O)

        self.engine.get_best_transition()
        self.assertEqual(self.engine.root.simulations, simulations + 200)

    def test_do_transition_unknown_child(self):
        """A transition the tree never saw starts a fresh root."""
        transition = next(iter(self.game.possible_transitions()))
        self.engine.do_transition(transition)

        self.assertEqual(self.engine.root.simulations, 0)
        self.assertTrue(self.engine.root.is_leaf())
        self.assertIsNotNone(self.engine.get_best_transition())

    def test_undo_transition(self):
        """Rolling back restores the previous root and position."""
        root = self.engine.root
        transition = self.engine.get_best_transition()
        self.engine.do_transition(transition)
        self.engine.undo_transition(transition)

        self.assertIs(self.engine.root, root)
        self.assertUnchanged(np.zeros((3, 3), dtype=np.int8), int(Mark.X), 0)

    def test_undo_wrong_transition(self):
        """Undoing a transition that was not played last fails before any change."""
        transition = self.engine.get_best_transition()
        self.engine.do_transition(transition)
        other = next(t for t in self.game.possible_transitions())

        with self.assertRaises(RuntimeError):
            self.engine.undo_transition(other)
        self.assertEqual(self.game.turn, 1)

    def test_undo_after_simplify(self):
        """The previous root is gone after simplify_tree()."""
        transition = self.engine.get_best_transition()
        self.engine.do_transition(transition)
        self.engine.simplify_tree()

        with self.assertRaises(RuntimeError):
            self.engine.undo_transition(transition)
        self.assertEqual(self.game.turn, 1)

    def test_undo_without_history(self):
        with self.assertRaises(RuntimeError):
            self.engine.undo_transition(next(iter(self.game.possible_transitions())))

    def test_simplify_tree_releases_old_root(self):
        """Alternatives that were not played are discarded."""
        old_root = weakref.ref(self.engine.root)
        transition = self.engine.get_best_transition()
        kept = count_nodes(self.engine.root.get_child(transition))

        self.engine.do_transition(transition)
        self.engine.simplify_tree()
        gc.collect()

        self.assertIsNone(old_root())
        self.assertEqual(count_nodes(self.engine.root), kept)

    def test_reset(self):
        """reset() starts a new tree on the same position."""
        self.engine.get_best_transition()
        self.engine.reset()
        self.assertEqual(self.engine.root.simulations, 0)
        self.assertTrue(self.engine.root.is_leaf())

    def test_time_limit(self):
        """A time budget alone bounds the search."""
        engine = MonteCarloTreeSearch(self.game, MCTSConfig(iterations=None, time_limit=0.05, seed=1))
        start = time.time()
        transition = engine.get_best_transition()

        self.assertIsNotNone(transition)
        self.assertLess(time.time() - start, 5.0)
        self.assertTrue(engine.last_stats["stopped_early"])
        self.assertGreaterEqual(engine.last_stats["iterations"], 1)
        self.assertUnchanged(np.zeros((3, 3), dtype=np.int8), int(Mark.X), 0)

    def test_tiny_time_limit_still_answers(self):
        """An exhausted time budget still runs one iteration."""
        engine = MonteCarloTreeSearch(self.game, MCTSConfig(iterations=None, time_limit=1e-9, seed=0))
        transition = engine.get_best_transition()

        self.assertIn(transition, self.game.possible_transitions())
        self.assertEqual(engine.last_stats["iterations"], 1)
        self.assertTrue(engine.last_stats["stopped_early"])
        self.assertEqual(len(engine.root.children), 9)

    def test_statistics(self):
        """Search statistics are exposed after a search."""
        self.engine.get_best_transition()
        stats = self.engine.last_stats
        for key in ("iterations", "time_elapsed", "iterations_per_second", "node_count",
                    "max_depth", "average_simulation_steps", "fully_explored", "stopped_early"):
            self.assertIn(key, stats)
        self.assertEqual(stats["node_count"], count_nodes(self.engine.root))

        action_stats = self.engine.get_action_statistics()
        self.assertEqual(len(action_stats), 9)
        self.assertEqual(sum(v["visits"] for v in action_stats.values()), 200)

        variation = self.engine.get_principal_variation(max_depth=3)
        self.assertGreater(len(variation), 0)
        self.assertLessEqual(len(variation), 3)

    def test_seed_reproducibility(self):
        """Two engines with the same seed pick the same move."""
        other_game = TicTacToe()
        other = MonteCarloTreeSearch(other_game, MCTSConfig(iterations=200, seed=42))
        self.assertEqual(self.engine.get_best_transition(), other.get_best_transition())
        self.assertEqual(self.engine.root.wins, other.root.wins)


class TestSearchOnNim(unittest.TestCase):
    """Test case for searches on Nim."""

    def test_fully_explored(self):
        """The search stops once the tree is fully explored."""
        for seed in range(5):
            game = Nim(heap=2)
            engine = MonteCarloTreeSearch(game, MCTSConfig(iterations=1000, seed=seed))
            best = engine.get_best_transition()

            self.assertTrue(engine.last_stats["fully_explored"])
            self.assertLess(engine.last_stats["iterations"], 1000)
            self.assertTrue(engine.root.is_terminal())
            self.assertTrue(all(child.is_terminal() for child in engine.root.children.values()))
            self.assertEqual(game.heap, 2)
            self.assertEqual(game.get_current_player(), 0)

            # Taking both objects wins on the spot, but is only credited
            # when expansion stepped into it
            winning = engine.root.get_child(2)
            self.assertEqual(winning.wins_for(0), winning.simulations)
            if winning.simulations:
                self.assertEqual(best, 2)
            else:
                self.assertEqual(best, 1)

    def test_fully_explored_root_stops_at_once(self):
        """A fully explored root runs no further iteration."""
        game = Nim(heap=2)
        engine = MonteCarloTreeSearch(game, MCTSConfig(iterations=1000, seed=0))
        best = engine.get_best_transition()
        simulations = engine.root.simulations

        self.assertEqual(engine.get_best_transition(), best)
        self.assertEqual(engine.last_stats["iterations"], 0)
        self.assertTrue(engine.last_stats["fully_explored"])
        self.assertEqual(engine.root.simulations, simulations)

    def test_single_move(self):
        game = Nim(heap=1)
        engine = MonteCarloTreeSearch(game, MCTSConfig(iterations=10, seed=0))
        self.assertEqual(engine.get_best_transition(), 1)

    def test_three_players(self):
        """The engine does not assume two players."""
        game = Nim(heap=7, num_players=3)
        engine = MonteCarloTreeSearch(game, MCTSConfig(iterations=300, seed=5))

        transition = engine.get_best_transition()
        self.assertIn(transition, {1, 2, 3})
        root = engine.root
        self.assertEqual(sum(root.wins.values()), root.simulations)
        self.assertTrue(set(root.wins) <= {0, 1, 2})
        self.assertEqual(game.get_current_player(), 0)
        self.assertEqual(game.heap, 7)

    def test_phases(self):
        """One pass through the four phases by hand."""
        game = Nim(heap=3)
        engine = MonteCarloTreeSearch(game, MCTSConfig(seed=0))
        path = Path(engine.root)

        leaf = engine.selection(path)
        self.assertIs(leaf, engine.root)
        self.assertTrue(path.is_empty())

        expanded = engine.expansion(leaf, path)
        self.assertEqual(len(engine.root.children), 3)
        self.assertEqual(len(path), 1)
        self.assertIs(path.end_node, expanded)
        taken = path.steps[0][0]
        self.assertEqual(game.heap, 3 - taken)

        winner, steps = engine.simulation()
        self.assertIn(winner, (0, 1))
        self.assertEqual(game.heap, 3 - taken)

        engine.backpropagation(path, winner)
        self.assertEqual(game.heap, 3)
        self.assertEqual(engine.root.simulations, 1)
        self.assertEqual(expanded.simulations, 1)
        self.assertEqual(expanded.wins_for(winner), 1)

        # Children that were not chosen are created without statistics
        others = [child for t, child in engine.root.items() if t != taken]
        self.assertTrue(all(child.simulations == 0 for child in others))
        self.assertTrue(engine.root.get_child(3).is_terminal())


class TestContractViolations(unittest.TestCase):
    """Test case for programming errors."""

    def test_no_move_on_stuck_domain(self):
        """The guard returns None whenever no transition is possible."""
        engine = MonteCarloTreeSearch(StuckDomain())
        self.assertIsNone(engine.get_best_transition())

    def test_expansion_without_transitions(self):
        """Expanding a position without moves is a contract violation."""
        engine = MonteCarloTreeSearch(StuckDomain())
        with self.assertRaises(RuntimeError):
            engine.expansion(engine.root, Path(engine.root))

    def test_simulation_without_transitions(self):
        engine = MonteCarloTreeSearch(StuckDomain())
        with self.assertRaises(RuntimeError):
            engine.simulation()

    def test_unbalanced_domain_detected(self):
        """A domain that does not restore its player is reported."""
        engine = MonteCarloTreeSearch(LeakyNim(heap=5, num_players=1000), MCTSConfig(iterations=10, seed=0))
        with self.assertRaises(RuntimeError):
            engine.get_best_transition()


if __name__ == "__main__":
    unittest.main()

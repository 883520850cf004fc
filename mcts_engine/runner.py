"""
Game loop driving a search engine until the game is over.

GameRunner asks the agent of the player to move for a transition, commits it
with do_transition() and reports to an optional listener. evaluate() plays a
series of fresh games and counts the winners.
"""
from __future__ import annotations
from collections import Counter
from dataclasses import replace
from typing import Callable, Dict, Hashable, Optional, Union

from tqdm import tqdm

from mcts_engine.core.domain import Domain
from mcts_engine.mcts.agent import MCTSAgent, RandomAgent
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.search import MonteCarloTreeSearch


Agent = Union[MCTSAgent, RandomAgent]


class RunnerListener:
    """Receives the events of a game. Every hook does nothing by default."""

    def on_move(self, engine: MonteCarloTreeSearch, transition: Hashable, turn: int) -> None:
        pass

    def on_game_over(self, engine: MonteCarloTreeSearch) -> None:
        pass

    def on_no_possible_move(self, engine: MonteCarloTreeSearch) -> None:
        pass


class GameRunner:
    """
    Plays a game to the end with one shared search engine.

    Players without an agent are played by a default MCTS agent, so a runner
    without agents is a self-play game.
    """

    def __init__(
        self,
        engine: MonteCarloTreeSearch,
        agents: Optional[Dict[int, Agent]] = None,
        listener: Optional[RunnerListener] = None,
        simplify: bool = True
    ):
        """
        Initialize a game runner.

        Args:
            engine: Search engine wrapping the domain to play
            agents: Mapping from player id to the agent playing it
            listener: Optional listener notified of each move
            simplify: Whether to discard unplayed alternatives after each move
        """
        self.engine = engine
        self.agents = agents or {}
        self.default_agent = MCTSAgent()
        self.listener = listener or RunnerListener()
        self.simplify = simplify
        self.turn = 0

    def run(self) -> Optional[int]:
        """
        Play until the game is over.

        Returns:
            The winner reported by the domain, or None if the game stopped
            without being over
        """
        domain = self.engine.domain
        while not domain.is_over():
            player = domain.get_current_player()
            agent = self.agents.get(player, self.default_agent)
            transition = agent.select_transition(self.engine)
            if transition is None:
                self.listener.on_no_possible_move(self.engine)
                return None

            self.engine.do_transition(transition)
            if self.simplify:
                self.engine.simplify_tree()

            self.turn += 1
            self.listener.on_move(self.engine, transition, self.turn)

        self.listener.on_game_over(self.engine)
        return domain.get_winner()


def evaluate(
    domain_factory: Callable[[], Domain],
    agents: Optional[Dict[int, Agent]] = None,
    num_games: int = 10,
    config: Optional[MCTSConfig] = None,
    show_progress: bool = False
) -> Dict[Optional[int], int]:
    """
    Play a series of games and count the winners.

    Args:
        domain_factory: Creates the domain of each game
        agents: Mapping from player id to agent (missing players use MCTS)
        num_games: Number of games to play
        config: MCTS configuration; a seed is offset by the game index
        show_progress: Whether to display a progress bar

    Returns:
        Dictionary mapping winners to their number of wins
    """
    if num_games <= 0:
        raise ValueError("num_games must be positive")

    config = config or MCTSConfig()
    results: Counter = Counter()

    for game in tqdm(range(num_games), desc="Evaluating", disable=not show_progress):
        game_config = config if config.seed is None else replace(config, seed=config.seed + game)
        engine = MonteCarloTreeSearch(domain_factory(), game_config)
        winner = GameRunner(engine, agents).run()
        results[winner] += 1

    return dict(results)

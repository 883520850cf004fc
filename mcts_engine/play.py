#!/usr/bin/env python
"""
Command-line interface for playing sample games with the MCTS engine.

Example usage:
    # Watch the engine play tic-tac-toe against itself
    mcts-play --mode self --iterations 2000

    # Play tic-tac-toe against the engine
    mcts-play --mode human --human-first

    # Evaluate the engine against a random player over 50 games of Nim
    mcts-play --game nim --mode random --games 50
"""
import argparse
import sys
from typing import Dict, Hashable, Optional

from mcts_engine.core.domain import Domain
from mcts_engine.core.nim import Nim
from mcts_engine.core.tictactoe import TicTacToe, TicTacToeMove, Mark, DRAW
from mcts_engine.mcts.agent import MCTSAgent, RandomAgent
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.search import MonteCarloTreeSearch
from mcts_engine.runner import GameRunner, RunnerListener, evaluate


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    YELLOW = "\033[93m"

    @staticmethod
    def mark(value: int) -> str:
        """Colored symbol for a tic-tac-toe cell."""
        if value == Mark.X:
            return f"{Colors.RED}X{Colors.RESET}"
        elif value == Mark.O:
            return f"{Colors.BLUE}O{Colors.RESET}"
        else:
            return "."


def parse_args(argv=None):
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play sample games with the MCTS engine")

    # Game configuration
    parser.add_argument("--game", type=str, default="tictactoe",
                        choices=["tictactoe", "nim"],
                        help="Game to play")
    parser.add_argument("--heap", type=int, default=10,
                        help="Initial heap size (Nim)")
    parser.add_argument("--players", type=int, default=2,
                        help="Number of players (Nim)")
    parser.add_argument("--mode", type=str, default="self",
                        choices=["self", "random", "human"],
                        help="Engine against itself, a random player or you")
    parser.add_argument("--human-first", action="store_true",
                        help="Human (or random) player moves first")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to evaluate (self/random modes)")

    # MCTS configuration
    parser.add_argument("--iterations", type=int, default=1000,
                        help="Number of MCTS iterations per move")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Optional time limit per move in seconds")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducible games")
    parser.add_argument("--debug", action="store_true",
                        help="Show search information")

    return parser.parse_args(argv)


def create_domain(args) -> Domain:
    """Create the game selected on the command line."""
    if args.game == "nim":
        return Nim(heap=args.heap, num_players=args.players)
    return TicTacToe()


def display_board(domain: Domain) -> None:
    """Display the current position in a readable format."""
    if isinstance(domain, TicTacToe):
        print()
        for y in range(domain.grid.shape[1]):
            print(" ".join(Colors.mark(int(domain.grid[x, y])) for x in range(domain.grid.shape[0])))
        print()
    else:
        print(f"\n{Colors.YELLOW}{domain}{Colors.RESET}\n")


class HumanAgent:
    """Reads transitions from standard input."""

    def __init__(self, name: str = "Human"):
        self.name = name

    def select_transition(self, engine: MonteCarloTreeSearch) -> Optional[Hashable]:
        domain = engine.domain
        transitions = list(domain.possible_transitions())
        if not transitions:
            return None

        display_board(domain)
        while True:
            try:
                if isinstance(domain, TicTacToe):
                    raw = input("Your move (x y): ").split()
                    move = TicTacToeMove(int(raw[0]), int(raw[1]), domain.get_current_player())
                else:
                    move = int(input(f"Take how many (1-{max(transitions)}): "))
            except (ValueError, IndexError):
                print(f"{Colors.RED}Invalid input, try again.{Colors.RESET}")
                continue
            except EOFError:
                print("\nGoodbye!")
                sys.exit(0)

            if move in transitions:
                return move
            print(f"{Colors.RED}Illegal move, try again.{Colors.RESET}")


class ConsoleListener(RunnerListener):
    """Prints each move with the board."""

    def on_move(self, engine: MonteCarloTreeSearch, transition: Hashable, turn: int) -> None:
        print(f"{Colors.BOLD}Turn {turn}:{Colors.RESET} {transition}")
        display_board(engine.domain)

    def on_game_over(self, engine: MonteCarloTreeSearch) -> None:
        print(f"{Colors.BOLD}{Colors.GREEN}Game over! {describe_winner(engine.domain)}{Colors.RESET}")

    def on_no_possible_move(self, engine: MonteCarloTreeSearch) -> None:
        print(f"{Colors.YELLOW}No possible move{Colors.RESET}")


def describe_winner(domain: Domain) -> str:
    winner = domain.get_winner()
    if isinstance(domain, TicTacToe):
        return "Draw" if winner == DRAW else f"{Mark(winner).name} wins"
    return f"Player {winner} wins"


def create_agents(args, domain: Domain) -> Dict[int, object]:
    """Assign the non-engine player, if any."""
    if args.mode == "self":
        return {}

    starter = domain.get_current_player()
    if isinstance(domain, TicTacToe):
        other = 3 - starter
    else:
        other = (starter + 1) % domain.num_players
    seat = starter if args.human_first else other

    if args.mode == "human":
        return {seat: HumanAgent()}
    return {seat: RandomAgent(seed=args.seed)}


def main(argv=None):
    args = parse_args(argv)

    config = MCTSConfig(
        iterations=args.iterations,
        time_limit=args.time_limit,
        seed=args.seed
    )

    if args.games > 1 and args.mode != "human":
        domain = create_domain(args)
        agents = create_agents(args, domain)
        print(f"{Colors.BOLD}{Colors.CYAN}Evaluating over {args.games} games{Colors.RESET}")
        results = evaluate(lambda: create_domain(args), agents, args.games, config, show_progress=True)
        for winner, count in sorted(results.items(), key=lambda x: -x[1]):
            print(f"  Winner {winner}: {count} ({count / args.games:.0%})")
        return 0

    domain = create_domain(args)
    engine = MonteCarloTreeSearch(domain, config)
    agents = create_agents(args, domain)

    runner = GameRunner(engine, agents, listener=ConsoleListener())
    runner.default_agent = MCTSAgent(name="MCTS", verbose=args.debug)

    print(f"{Colors.BOLD}{Colors.CYAN}Starting {args.game} ({args.mode}){Colors.RESET}")
    display_board(domain)
    runner.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the search engine,
including the per-move search budget, the UCT exploration constant and the
policy used to pick the final move.
"""
from dataclasses import dataclass
from typing import Optional, Literal
import math


FINAL_SELECTIONS = ("wins", "ratio", "visits")


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters of the engine,
    with validation and sensible defaults.
    """
    # Search budget
    iterations: Optional[int] = 1000
    """Number of MCTS iterations per move decision (None = until time limit, which must then be set)"""

    time_limit: Optional[float] = None
    """Optional time limit in seconds per move decision (None = no limit)"""

    # Strategy parameters
    exploration_weight: float = math.sqrt(2)
    """UCT exploration parameter C (default is sqrt(2))"""

    final_selection: Literal["wins", "ratio", "visits"] = "wins"
    """How the root children are ranked once the search is done"""

    # Reproducibility
    seed: Optional[int] = None
    """Seed of the engine's random source (None = seeded from the OS)"""

    # Diagnostics
    check_state: bool = True
    """Whether to verify that each iteration restores the domain's current player"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations is not None and self.iterations <= 0:
            raise ValueError("iterations must be positive or None")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.iterations is None and self.time_limit is None:
            raise ValueError("iterations and time_limit cannot both be None")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must be non-negative")

        if self.final_selection not in FINAL_SELECTIONS:
            raise ValueError(f"final_selection must be one of {', '.join(FINAL_SELECTIONS)}")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=100)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            iterations=5000,
            final_selection="visits"
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {name: getattr(self, name) for name in self.__dataclass_fields__}

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"

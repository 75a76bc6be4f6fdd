"""
Configuration for game setup, table sessions and random-play simulation.

Each configuration is a dataclass validated on construction, with named
presets for the common cases.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from splendor_engine.core.constants import MIN_PLAYERS, MAX_PLAYERS


class _ConfigMixin:
    """Dictionary round-tripping shared by all configurations."""

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]):
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            Configuration object
        """
        # Filter out any keys that aren't valid parameters
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
        return f"{type(self).__name__}({params})"


def _check_players(num_players: int) -> None:
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise ValueError(f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")


@dataclass
class GameConfig(_ConfigMixin):
    """
    Parameters for setting up a board of the original game.
    """
    num_players: int = 2
    """Number of players (2-4)"""

    seed: Optional[int] = None
    """Random seed for shuffling decks and drawing nobles (None = unseeded)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        _check_players(self.num_players)

    @classmethod
    def default(cls) -> 'GameConfig':
        return cls()

    @classmethod
    def four_players(cls) -> 'GameConfig':
        return cls(num_players=4)


@dataclass
class SessionConfig(_ConfigMixin):
    """
    Parameters for a table session.
    """
    max_seats: int = MAX_PLAYERS
    """Maximum number of seats at the table"""

    min_seats_to_start: int = MIN_PLAYERS
    """Seats that must be taken before the game can start"""

    seed: Optional[int] = None
    """Random seed passed to the board setup"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not MIN_PLAYERS <= self.max_seats <= MAX_PLAYERS:
            raise ValueError(f"max_seats must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

        if not MIN_PLAYERS <= self.min_seats_to_start <= self.max_seats:
            raise ValueError(f"min_seats_to_start must be between {MIN_PLAYERS} and max_seats")

    @classmethod
    def default(cls) -> 'SessionConfig':
        return cls()

    @classmethod
    def heads_up(cls) -> 'SessionConfig':
        """A two-seat table."""
        return cls(max_seats=2, min_seats_to_start=2)


@dataclass
class SimulationConfig(_ConfigMixin):
    """
    Parameters for random-play simulation.
    """
    num_players: int = 2
    """Number of players (2-4)"""

    max_turns: int = 500
    """Maximum number of actions before a game is abandoned"""

    num_games: int = 1
    """Number of games to play in a batch"""

    seed: Optional[int] = None
    """Random seed for setup and action choice (None = unseeded)"""

    show_progress: bool = True
    """Whether batch simulation shows a progress bar"""

    def __post_init__(self):
        """Validate configuration parameters."""
        _check_players(self.num_players)

        if self.max_turns <= 0:
            raise ValueError("max_turns must be positive")

        if self.num_games <= 0:
            raise ValueError("num_games must be positive")

    @classmethod
    def default(cls) -> 'SimulationConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'SimulationConfig':
        """A short batch for smoke checks."""
        return cls(max_turns=200, num_games=10, show_progress=False)

    @classmethod
    def batch(cls) -> 'SimulationConfig':
        return cls(num_games=100)

"""
Configuration objects for evolution and DQN runs.

Both dataclasses are owned by the caller (a UI, a script, a test) and
passed by reference into the engines. The engines read them on every
call and never write to them, so a caller may change a value between
ticks and the next call picks it up.

Defaults match the parameter panel of the simulations.
"""
from dataclasses import dataclass
from typing import Tuple

from .exceptions import ConfigurationError

BATCH_UPDATE_MODES = ('sequential', 'averaged')


def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be in [0, 1], got {value}")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")


@dataclass
class EvolutionConfig:
    """Configuration for the genetic evolution engine."""

    # Population
    population_size: int = 400
    layer_sizes: Tuple[int, ...] = (4, 6, 1)
    activation: str = 'sigmoid'
    init_range: Tuple[float, float] = (-1.0, 1.0)

    # Mutation (rate is the half-width of the uniform perturbation)
    mutation_rate: float = 0.125
    mutation_probability: float = 0.5
    mutation_decay_interval: int = 10
    mutation_decay_factor: float = 0.9
    # Flip one coin per weight instead of one per network
    per_weight_mutation: bool = False

    # Parents scoring at or below this are replaced by random networks
    degenerate_score_floor: float = 0.01

    # Output above this means "jump"
    jump_threshold: float = 0.5

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigurationError: If any value is out of range.
        """
        _check_non_negative('population_size', self.population_size)
        _check_probability('mutation_probability', self.mutation_probability)
        _check_non_negative('mutation_decay_interval', self.mutation_decay_interval)
        _check_probability('mutation_decay_factor', self.mutation_decay_factor)
        if len(self.init_range) != 2 or self.init_range[0] > self.init_range[1]:
            raise ConfigurationError(
                f"init_range must be a (low, high) pair, got {self.init_range}"
            )

    def mutation_probability_at(self, generation: int) -> float:
        """
        Effective mutation probability after periodic decay.

        The probability shrinks by ``mutation_decay_factor`` once every
        ``mutation_decay_interval`` generations. An interval of 0
        disables the decay.
        """
        if self.mutation_decay_interval <= 0:
            return self.mutation_probability
        steps = generation // self.mutation_decay_interval
        return self.mutation_probability * (self.mutation_decay_factor ** steps)


@dataclass
class DQNConfig:
    """Configuration for a DQN agent and its training driver."""

    # Replay
    replay_buffer_size: int = 10000
    batch_size: int = 32

    # Q-learning
    gamma: float = 0.99
    learning_rate: float = 0.01
    num_actions: int = 4

    # Exploration, decayed by replay buffer length
    epsilon_start: float = 1.0
    epsilon_end: float = 0.9
    epsilon_decay: float = 0.995

    # Training steps between target network syncs
    episode_size: int = 100

    # 'sequential' applies one SGD step per sampled example,
    # 'averaged' applies the mean gradient of the batch once
    batch_update: str = 'sequential'

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigurationError: If any value is out of range.
        """
        _check_non_negative('replay_buffer_size', self.replay_buffer_size)
        _check_non_negative('batch_size', self.batch_size)
        _check_non_negative('episode_size', self.episode_size)
        _check_non_negative('learning_rate', self.learning_rate)
        if self.num_actions < 1:
            raise ConfigurationError(
                f"num_actions must be at least 1, got {self.num_actions}"
            )
        _check_probability('gamma', self.gamma)
        _check_probability('epsilon_start', self.epsilon_start)
        _check_probability('epsilon_end', self.epsilon_end)
        _check_probability('epsilon_decay', self.epsilon_decay)
        if self.batch_update not in BATCH_UPDATE_MODES:
            raise ConfigurationError(
                f"batch_update must be one of {BATCH_UPDATE_MODES}, "
                f"got {self.batch_update!r}"
            )

"""
Adaptive-control core: evolved and Q-learned feed-forward policies.

Two ways of learning a policy from raw state vectors supplied by an
external simulation:

- ``neurocontrol.evolution``: generational genetic algorithm over
  fixed-topology networks (averaging crossover, random mutation).
- ``neurocontrol.training``: DQN agent with experience replay and a
  caller-synced target network.

Both share the hand-trained network in ``neurocontrol.networks`` and
read their settings from the dataclasses in ``neurocontrol.config``.
"""
from .config import DQNConfig, EvolutionConfig
from .exceptions import (
    ConfigurationError,
    InsufficientExperience,
    InvalidTopology,
    NeuroControlError,
    NoFiniteOutput,
    TopologyMismatch,
)
from .networks import NeuralNetwork
from .evolution import Population, crossover_average, mutate, select_best
from .training import DQNAgent, DQNTrainer, Experience, ReplayBuffer

__version__ = '0.1.0'

__all__ = [
    # Configuration
    'DQNConfig',
    'EvolutionConfig',

    # Errors
    'NeuroControlError',
    'InvalidTopology',
    'TopologyMismatch',
    'InsufficientExperience',
    'NoFiniteOutput',
    'ConfigurationError',

    # Core
    'NeuralNetwork',
    'Population',
    'crossover_average',
    'mutate',
    'select_best',
    'DQNAgent',
    'DQNTrainer',
    'Experience',
    'ReplayBuffer',
]

"""
Pytest configuration and shared fixtures for the neurocontrol project.

This module provides fixtures for:
- Deterministic random number generators
- Default configuration objects
"""
import random

import numpy as np
import pytest
import torch

from neurocontrol.config import DQNConfig, EvolutionConfig


@pytest.fixture(autouse=True)
def seeded_rng():
    """Seed every RNG the core draws from so tests are repeatable."""
    random.seed(1234)
    np.random.seed(1234)
    torch.manual_seed(1234)


@pytest.fixture
def evolution_config():
    """Return a small evolution config."""
    return EvolutionConfig(population_size=10, layer_sizes=(4, 6, 1))


@pytest.fixture
def dqn_config():
    """Return a small DQN config."""
    return DQNConfig(
        replay_buffer_size=50,
        batch_size=4,
        episode_size=5,
        num_actions=4,
    )

"""
Pytest fixtures for neurocontrol tests.

Provides fixtures for:
- Small networks with random and hand-set weights
- Sample state vectors
"""
from typing import List

import pytest
import torch

from neurocontrol.networks import NeuralNetwork


@pytest.fixture
def small_network() -> NeuralNetwork:
    """Return a 2-4-1 sigmoid network."""
    return NeuralNetwork([2, 4, 1])


@pytest.fixture
def q_network() -> NeuralNetwork:
    """Return a 6-8-4 network, one output per action."""
    return NeuralNetwork([6, 8, 4])


@pytest.fixture
def fixed_output_network() -> NeuralNetwork:
    """
    Return a 6-4 identity network whose output is [0.1, 0.9, 0.2, 0.05]
    for any input.
    """
    network = NeuralNetwork([6, 4], activation='identity')
    with torch.no_grad():
        network.layers[0].weight.zero_()
        network.layers[0].bias.copy_(torch.tensor([0.1, 0.9, 0.2, 0.05]))
    return network


@pytest.fixture
def sample_state() -> List[float]:
    """Return a sensor reading for three obstacles (distance, direction)."""
    return [0.5, -1.0, 0.25, 0.3, 0.9, 1.0]


@pytest.fixture
def flappy_state() -> List[float]:
    """Return a (height, velocity, obstacle distance, gap height) state."""
    return [0.4, -0.2, 0.7, 0.5]

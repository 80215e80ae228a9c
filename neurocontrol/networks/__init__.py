"""
Neural network substrate for the control core.

This module provides:
- NeuralNetwork: dense feed-forward stack with manual backpropagation
- Layer: one affine transform with uniformly initialised weights
- Activation strategies (sigmoid, tanh, identity) and their derivatives
- Preset topologies for the evolved and DQN agents
"""
from .activations import (
    ACTIVATIONS,
    Activation,
    SIGMOID,
    get_activation,
    sigmoid,
    sigmoid_derivative,
)
from .feedforward import Layer, NeuralNetwork
from .architectures import (
    flappy_topology,
    dodger_topology,
    create_topology,
)

__all__ = [
    # Network
    'NeuralNetwork',
    'Layer',

    # Activations
    'ACTIVATIONS',
    'Activation',
    'SIGMOID',
    'get_activation',
    'sigmoid',
    'sigmoid_derivative',

    # Topologies
    'flappy_topology',
    'dodger_topology',
    'create_topology',
]

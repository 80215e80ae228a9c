"""
Scalar activation functions and their derivatives.

A network holds one Activation strategy and applies it elementwise
to every layer. Functions operate on tensors and use torch's
saturating implementations, so very large inputs give 0 or 1 rather
than NaN.
"""
from typing import Callable, NamedTuple, Union

import torch

TensorFn = Callable[[torch.Tensor], torch.Tensor]


def sigmoid(x: torch.Tensor) -> torch.Tensor:
    """Logistic sigmoid, 1 / (1 + e^-x)."""
    return torch.sigmoid(x)


def sigmoid_derivative(x: torch.Tensor) -> torch.Tensor:
    """Derivative of the sigmoid at x, s(x) * (1 - s(x))."""
    s = torch.sigmoid(x)
    return s * (1.0 - s)


def tanh_derivative(x: torch.Tensor) -> torch.Tensor:
    return 1.0 - torch.tanh(x) ** 2


def identity(x: torch.Tensor) -> torch.Tensor:
    return x


def identity_derivative(x: torch.Tensor) -> torch.Tensor:
    return torch.ones_like(x)


class Activation(NamedTuple):
    """An activation function paired with its derivative."""
    name: str
    fn: TensorFn
    derivative: TensorFn

    def __call__(self, x: torch.Tensor) -> torch.Tensor:
        return self.fn(x)


SIGMOID = Activation('sigmoid', sigmoid, sigmoid_derivative)
TANH = Activation('tanh', torch.tanh, tanh_derivative)
IDENTITY = Activation('identity', identity, identity_derivative)

# Supported activation functions
ACTIVATIONS = {
    'sigmoid': SIGMOID,
    'tanh': TANH,
    'identity': IDENTITY,
}


def get_activation(activation: Union[str, Activation]) -> Activation:
    """
    Resolve an activation by name, or pass an Activation through.

    Raises:
        ValueError: If the name is not registered.
    """
    if isinstance(activation, Activation):
        return activation
    if activation not in ACTIVATIONS:
        raise ValueError(f"Unknown activation function: {activation}")
    return ACTIVATIONS[activation]

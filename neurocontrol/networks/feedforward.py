"""
Dense feed-forward network with hand-written backpropagation.

The network is a plain stack of affine layers, each followed by the
same activation. Weights are torch tensors that do not track
autograd: training goes through ``backward``, which applies one
step of stochastic gradient descent from a caller-supplied loss
gradient, and evolution edits the tensors directly.

Example:
    network = NeuralNetwork([2, 4, 1])
    output = network.forward([1.0, 1.0])

    output, activations, sums = network.forward_with_intermediates(state)
    network.backward(activations, sums, output - target, learning_rate=0.01)
"""
import copy
from typing import List, Sequence, Tuple, Union

import torch
import torch.nn as nn

from ..exceptions import InvalidTopology
from .activations import Activation, get_activation

VectorLike = Union[torch.Tensor, Sequence[float]]
Gradients = List[Tuple[torch.Tensor, torch.Tensor]]


class Layer(nn.Linear):
    """
    One affine transform, weights shaped (out_features, in_features).

    Weights and biases are drawn uniformly from ``init_range`` and
    never resized afterwards.
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        init_range: Tuple[float, float] = (-1.0, 1.0),
    ):
        super().__init__(in_features, out_features)
        self.requires_grad_(False)
        low, high = init_range
        nn.init.uniform_(self.weight, low, high)
        nn.init.uniform_(self.bias, low, high)


class NeuralNetwork(nn.Module):
    """
    Ordered stack of dense layers sharing one activation.

    Attributes:
        layers: The Layer modules, input side first.
        activation: Activation strategy applied after every layer.
        init_range: Range the initial weights were drawn from.
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        activation: Union[str, Activation] = 'sigmoid',
        init_range: Tuple[float, float] = (-1.0, 1.0),
    ):
        """
        Build a network with ``len(layer_sizes) - 1`` layers.

        Args:
            layer_sizes: Width of the input followed by each layer's width.
            activation: Activation name or strategy object.
            init_range: (low, high) for the uniform weight initialisation.

        Raises:
            InvalidTopology: If fewer than two sizes are given or a size
                is not a positive integer.
        """
        super().__init__()
        sizes = self._validate_sizes(layer_sizes)

        self.activation = get_activation(activation)
        self.init_range = tuple(init_range)
        self.layers = nn.ModuleList(
            Layer(in_size, out_size, self.init_range)
            for in_size, out_size in zip(sizes[:-1], sizes[1:])
        )

    @staticmethod
    def _validate_sizes(layer_sizes: Sequence[int]) -> List[int]:
        sizes = list(layer_sizes)
        if len(sizes) < 2:
            raise InvalidTopology(
                f"Need at least 2 layer sizes, got {len(sizes)}"
            )
        for i, size in enumerate(sizes):
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                raise InvalidTopology(
                    f"Layer size {i} must be a positive integer, got {size!r}"
                )
        return sizes

    @property
    def topology(self) -> List[int]:
        """Layer sizes this network was built from."""
        return [self.layers[0].in_features] + [
            layer.out_features for layer in self.layers
        ]

    @property
    def input_size(self) -> int:
        return self.layers[0].in_features

    @property
    def output_size(self) -> int:
        return self.layers[-1].out_features

    def _as_vector(self, values: VectorLike, size: int, name: str) -> torch.Tensor:
        vector = torch.as_tensor(values, dtype=torch.float32)
        if vector.shape[-1:] != (size,):
            raise ValueError(
                f"{name} must have length {size}, got shape {tuple(vector.shape)}"
            )
        return vector

    @torch.no_grad()
    def forward(self, inputs: VectorLike) -> torch.Tensor:
        """
        Map an input vector to the output vector.

        Each layer computes ``activation(W @ x + b)``. Also accepts a
        (batch, input_size) tensor.
        """
        x = self._as_vector(inputs, self.input_size, 'Input')
        for layer in self.layers:
            x = self.activation(layer(x))
        return x

    @torch.no_grad()
    def forward_with_intermediates(
        self,
        inputs: VectorLike,
    ) -> Tuple[torch.Tensor, List[torch.Tensor], List[torch.Tensor]]:
        """
        Forward pass keeping what backpropagation needs.

        Returns:
            Tuple of (output, activations, weighted_sums). ``activations[0]``
            is the input and ``activations[i + 1]`` the output of layer i;
            ``weighted_sums[i]`` is layer i's pre-activation sum.
        """
        x = self._as_vector(inputs, self.input_size, 'Input')
        activations = [x]
        weighted_sums = []

        for layer in self.layers:
            z = layer(activations[-1])
            weighted_sums.append(z)
            activations.append(self.activation(z))

        return activations[-1], activations, weighted_sums

    @torch.no_grad()
    def compute_gradients(
        self,
        activations: List[torch.Tensor],
        weighted_sums: List[torch.Tensor],
        d_loss: VectorLike,
    ) -> Gradients:
        """
        Backpropagate a loss gradient without touching the weights.

        Args:
            activations: From ``forward_with_intermediates``.
            weighted_sums: From ``forward_with_intermediates``.
            d_loss: Gradient of the loss w.r.t. the network output.

        Returns:
            (weight_gradient, bias_gradient) per layer, input side first.
        """
        if len(activations) != len(self.layers) + 1 or len(weighted_sums) != len(self.layers):
            raise ValueError(
                f"Expected {len(self.layers) + 1} activations and "
                f"{len(self.layers)} weighted sums, got "
                f"{len(activations)} and {len(weighted_sums)}"
            )

        delta = self._as_vector(d_loss, self.output_size, 'Loss gradient')
        gradients: Gradients = [None] * len(self.layers)

        for i in reversed(range(len(self.layers))):
            local = delta * self.activation.derivative(weighted_sums[i])
            gradients[i] = (torch.outer(local, activations[i]), local)
            delta = self.layers[i].weight.t() @ local

        return gradients

    @torch.no_grad()
    def apply_gradients(self, gradients: Gradients, learning_rate: float) -> None:
        """Subtract ``learning_rate * gradient`` from every weight and bias."""
        for layer, (weight_grad, bias_grad) in zip(self.layers, gradients):
            layer.weight.sub_(learning_rate * weight_grad)
            layer.bias.sub_(learning_rate * bias_grad)

    def backward(
        self,
        activations: List[torch.Tensor],
        weighted_sums: List[torch.Tensor],
        d_loss: VectorLike,
        learning_rate: float,
    ) -> None:
        """
        One step of plain SGD for a single example, updating in place.

        For layer i, ``local = d_loss * act'(weighted_sums[i])``; weights
        move by ``-lr * outer(local, activations[i])``, biases by
        ``-lr * local``, and ``W.T @ local`` (pre-update W) becomes the
        loss gradient of the layer below.
        """
        gradients = self.compute_gradients(activations, weighted_sums, d_loss)
        self.apply_gradients(gradients, learning_rate)

    def backward_batch(
        self,
        examples: Sequence[Tuple[List[torch.Tensor], List[torch.Tensor], VectorLike]],
        learning_rate: float,
    ) -> None:
        """
        Batch-averaged alternative to calling ``backward`` per example.

        Gradients of every (activations, weighted_sums, d_loss) example
        are computed against the same weights, averaged, and applied
        once.
        """
        if not examples:
            return

        total = None
        for activations, weighted_sums, d_loss in examples:
            grads = self.compute_gradients(activations, weighted_sums, d_loss)
            if total is None:
                total = grads
            else:
                total = [
                    (tw + gw, tb + gb)
                    for (tw, tb), (gw, gb) in zip(total, grads)
                ]

        n = len(examples)
        self.apply_gradients([(w / n, b / n) for w, b in total], learning_rate)

    def clone(self) -> 'NeuralNetwork':
        """Create a deep copy with identical weights."""
        return copy.deepcopy(self)

    def has_same_topology(self, other: 'NeuralNetwork') -> bool:
        return self.topology == other.topology

    def parameter_count(self) -> int:
        """Total number of weights and biases."""
        return sum(p.numel() for p in self.parameters())

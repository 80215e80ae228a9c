"""
Weight mutation operators for neuroevolution.

Both operators add uniform noise from [-rate, rate] to weights and
biases in place; they differ in how the coin is flipped:

1. WeightMutator: one flip per call. If it succeeds, every weight
   and bias of the network is perturbed.
2. PerWeightMutator: one flip per weight. Each weight is perturbed
   independently with the given probability.

The whole-network flip is the default used by the population.
"""
import random
from typing import Optional

import torch

from ..networks import NeuralNetwork


class WeightMutator:
    """
    Whole-network weight perturbation.

    Attributes:
        probability: Chance that a call mutates the network (0-1).
        rate: Half-width of the uniform perturbation. The sign is
            ignored, so a negative rate behaves like its magnitude.

    Example:
        mutator = WeightMutator(probability=0.5, rate=0.125)
        mutated = mutator.mutate(network)
    """

    def __init__(
        self,
        probability: float = 0.5,
        rate: float = 0.125,
    ):
        self.probability = probability
        self.rate = rate

    def mutate(
        self,
        network: NeuralNetwork,
        probability: Optional[float] = None,
        rate: Optional[float] = None,
    ) -> bool:
        """
        Flip once and, on success, perturb every parameter in place.

        Args:
            network: Network to mutate.
            probability: Overrides ``self.probability`` for this call.
            rate: Overrides ``self.rate`` for this call.

        Returns:
            True if the network was perturbed.
        """
        probability = self.probability if probability is None else probability
        rate = self.rate if rate is None else rate

        if random.random() >= probability:
            return False

        half_width = abs(rate)
        with torch.no_grad():
            for param in network.parameters():
                noise = torch.empty_like(param).uniform_(-half_width, half_width)
                param.add_(noise)
        return True


class PerWeightMutator(WeightMutator):
    """
    Per-weight perturbation: each weight flips its own coin.

    Alternate to WeightMutator for callers that want independent
    mutation of every weight.
    """

    def mutate(
        self,
        network: NeuralNetwork,
        probability: Optional[float] = None,
        rate: Optional[float] = None,
    ) -> bool:
        """
        Perturb each weight and bias independently with ``probability``.

        Returns:
            True if at least one parameter was perturbed.
        """
        probability = self.probability if probability is None else probability
        rate = self.rate if rate is None else rate

        half_width = abs(rate)
        mutated = False
        with torch.no_grad():
            for param in network.parameters():
                mask = torch.rand_like(param) < probability
                noise = torch.empty_like(param).uniform_(-half_width, half_width)
                param.add_(noise * mask.float())
                mutated = mutated or bool(mask.any())
        return mutated


def mutate(network: NeuralNetwork, probability: float, rate: float) -> bool:
    """
    Mutate a network in place with a single coin flip.

    Shorthand for ``WeightMutator(probability, rate).mutate(network)``.
    """
    return WeightMutator(probability, rate).mutate(network)

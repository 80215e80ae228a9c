"""
Crossover operators for network evolution.

Combines two parent networks of identical topology into a child by
interpolating every weight and bias. With the default alpha of 0.5
the child is the arithmetic mean of its parents.

The child is always a new network: parents are cloned, never aliased,
so mutating the child later cannot reach back into a parent.
"""
import torch

from ..exceptions import TopologyMismatch
from ..networks import NeuralNetwork


class WeightCrossover:
    """
    Weight-level crossover for networks with identical topology.

    ``child = alpha * parent_a + (1 - alpha) * parent_b`` for every
    parameter.
    """

    def __init__(self, alpha: float = 0.5):
        """
        Initialize the crossover operator.

        Args:
            alpha: Interpolation weight (0.5 = equal contribution).
        """
        self.alpha = alpha

    def crossover(
        self,
        parent_a: NeuralNetwork,
        parent_b: NeuralNetwork,
    ) -> NeuralNetwork:
        """
        Create offspring from two parent networks.

        Args:
            parent_a: First parent network.
            parent_b: Second parent network.

        Returns:
            Child network combining both parents.

        Raises:
            TopologyMismatch: If parents have different layer sizes.
        """
        if not parent_a.has_same_topology(parent_b):
            raise TopologyMismatch(
                "Parents must have identical topologies, got "
                f"{parent_a.topology} and {parent_b.topology}"
            )

        # Clone parent A as base
        child = parent_a.clone()

        state_a = parent_a.state_dict()
        state_b = parent_b.state_dict()
        child_state = child.state_dict()

        with torch.no_grad():
            for name in child_state:
                child_state[name] = (
                    self.alpha * state_a[name] +
                    (1 - self.alpha) * state_b[name]
                )

        child.load_state_dict(child_state)
        return child


def crossover_average(
    parent_a: NeuralNetwork,
    parent_b: NeuralNetwork,
) -> NeuralNetwork:
    """
    Child whose every weight is the mean of the parents' weights.

    Raises:
        TopologyMismatch: If parents have different layer sizes.
    """
    return WeightCrossover(alpha=0.5).crossover(parent_a, parent_b)

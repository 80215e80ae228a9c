"""
Preset network topologies.

A topology is the list of layer sizes handed to NeuralNetwork:
input width first, output width last.
"""
from typing import List, Sequence


def flappy_topology(
    input_size: int = 4,
    hidden_size: int = 6,
) -> List[int]:
    """
    Topology for the evolved jumping agent.

    The input is the agent's height and velocity plus the horizontal
    distance to the next obstacle and the vertical position of its
    gap. A single sigmoid output above the jump threshold means jump.

    Architecture:
        Input (4) -> Hidden (6, sigmoid) -> Output (1, sigmoid)
    """
    return [input_size, hidden_size, 1]


def dodger_topology(
    sensor_count: int = 3,
    hidden_sizes: Sequence[int] = (16,),
    num_actions: int = 4,
) -> List[int]:
    """
    Topology for the DQN agent that moves among obstacles.

    Every sensor reports the distance and direction of one of the
    nearest obstacles, so the input is ``2 * sensor_count`` wide. One
    output per directional action.
    """
    return [2 * sensor_count, *hidden_sizes, num_actions]


def create_topology(
    input_size: int,
    output_size: int,
    hidden_sizes: Sequence[int] = (),
) -> List[int]:
    """
    Generic topology from explicit widths.

    Example:
        create_topology(2, 1, hidden_sizes=[4])  # [2, 4, 1]
    """
    return [input_size, *hidden_sizes, output_size]

"""
Experience replay for the DQN agent.

Transitions are kept in insertion order in a bounded buffer. When the
buffer is full the oldest transition (index 0) is evicted before the
new one is appended. Sampling is uniform WITH replacement, so a batch
may contain the same transition more than once.
"""
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence

from ..exceptions import InsufficientExperience


@dataclass(frozen=True)
class Experience:
    """
    One environment step: (state, action, reward, next_state, done).

    The state vectors are copied into tuples on creation, so a caller
    reusing one sensor list between steps never rewrites stored history.
    """
    state: Sequence[float]
    action: int
    reward: float
    next_state: Sequence[float]
    done: bool

    def __post_init__(self):
        object.__setattr__(self, 'state', tuple(float(x) for x in self.state))
        object.__setattr__(self, 'next_state', tuple(float(x) for x in self.next_state))


class ReplayBuffer:
    """
    Bounded FIFO store of Experience.

    Example:
        buffer = ReplayBuffer(capacity=10000)
        buffer.push(Experience(state, action, reward, next_state, done))
        batch = buffer.sample(32)
    """

    def __init__(self, capacity: int = 10000):
        """
        Initialize the replay buffer.

        Args:
            capacity: Maximum number of transitions to store.
        """
        self.capacity = 0
        self.buffer: Deque[Experience] = deque()
        self.resize(capacity)

    def resize(self, capacity: int) -> None:
        """Change the capacity, evicting the oldest transitions that no longer fit."""
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        while len(self.buffer) > capacity:
            self.buffer.popleft()

    def push(self, experience: Experience, capacity: Optional[int] = None) -> None:
        """
        Append a transition, evicting the oldest ones when full.

        Args:
            experience: Transition to store.
            capacity: If given, the buffer is resized to it first.
        """
        if capacity is not None and capacity != self.capacity:
            self.resize(capacity)
        if self.capacity == 0:
            return
        while len(self.buffer) >= self.capacity:
            self.buffer.popleft()
        self.buffer.append(experience)

    def sample(self, batch_size: int) -> List[Experience]:
        """
        Draw ``batch_size`` transitions uniformly with replacement.

        Raises:
            InsufficientExperience: If fewer than ``batch_size``
                transitions are stored.
        """
        if len(self.buffer) < batch_size:
            raise InsufficientExperience(
                f"Need {batch_size} experiences to sample, have {len(self.buffer)}"
            )
        size = len(self.buffer)
        return [self.buffer[random.randrange(size)] for _ in range(batch_size)]

    def clear(self) -> None:
        self.buffer.clear()

    def __len__(self) -> int:
        return len(self.buffer)

    def __iter__(self):
        return iter(self.buffer)

"""
Deep Q-learning agent built on the hand-trained feed-forward network.

The agent owns a live Q-network and a target network. Targets are
bootstrapped from the target network, which only changes when the
caller invokes ``update_target_network``; the agent never syncs it on
its own.

Exploration decays with the amount of stored experience rather than
with elapsed episodes:

    epsilon = epsilon_end + (epsilon_start - epsilon_end) * decay ** len(buffer)

Once the buffer is full its length stops growing, so epsilon settles
at a fixed floor above ``epsilon_end``.
"""
import logging
import random
from typing import Any, Dict, List, Optional, Sequence

import torch

from ..config import DQNConfig
from ..exceptions import ConfigurationError, InsufficientExperience, NoFiniteOutput
from ..networks import NeuralNetwork, dodger_topology
from .replay_buffer import Experience, ReplayBuffer

logger = logging.getLogger(__name__)


def finite_argmax(values: Sequence[float]) -> int:
    """
    Index of the largest finite value. Ties resolve to the last maximal
    index.

    Raises:
        NoFiniteOutput: If ``values`` is empty or has no finite entry.
    """
    values = torch.as_tensor(values, dtype=torch.float32).flatten()
    finite = torch.isfinite(values)
    if not bool(finite.any()):
        raise NoFiniteOutput(f"No finite value among {values.tolist()}")
    masked = torch.where(finite, values, torch.full_like(values, float('-inf')))
    last = torch.argmax(torch.flip(masked, dims=(0,)))
    return values.numel() - 1 - int(last)


def finite_max(values: Sequence[float], default: float = 0.0) -> float:
    """Largest finite value, or ``default`` when there is none."""
    values = torch.as_tensor(values, dtype=torch.float32).flatten()
    finite = values[torch.isfinite(values)]
    if finite.numel() == 0:
        return default
    return float(finite.max())


class DQNAgent:
    """
    Epsilon-greedy DQN agent with experience replay.

    Attributes:
        q_network: Live network, trained in place.
        target_network: Copy of the live network used for targets.
        replay_buffer: Stored transitions.
        epsilon: Current exploration rate.
        training_counter: Number of completed training steps.

    Example:
        agent = DQNAgent.build(DQNConfig())

        action = agent.choose_action(state)
        agent.store_experience(state, action, reward, next_state, done)
        agent.train()
        agent.update_epsilon()
        if agent.training_counter % config.episode_size == 0:
            agent.update_target_network()
    """

    def __init__(
        self,
        q_network: NeuralNetwork,
        config: DQNConfig,
        target_network: Optional[NeuralNetwork] = None,
    ):
        """
        Initialize the agent.

        Args:
            q_network: Live Q-network, one output per action.
            config: DQN configuration, read on every call.
            target_network: Initial target network. Defaults to a clone
                of ``q_network``.

        Raises:
            ConfigurationError: If the config is invalid or the network
                output width differs from ``config.num_actions``.
        """
        config.validate()
        if q_network.output_size != config.num_actions:
            raise ConfigurationError(
                f"Network has {q_network.output_size} outputs but "
                f"num_actions is {config.num_actions}"
            )

        self.config = config
        self.q_network = q_network
        self.target_network = target_network if target_network is not None else q_network.clone()
        self.replay_buffer = ReplayBuffer(config.replay_buffer_size)

        self.epsilon = config.epsilon_start
        self.training_counter = 0

    @classmethod
    def build(
        cls,
        config: DQNConfig,
        sensor_count: int = 3,
        hidden_sizes: Sequence[int] = (16,),
    ) -> 'DQNAgent':
        """Agent with a fresh network sized for ``sensor_count`` obstacle sensors."""
        network = NeuralNetwork(dodger_topology(
            sensor_count=sensor_count,
            hidden_sizes=hidden_sizes,
            num_actions=config.num_actions,
        ))
        return cls(network, config)

    def choose_action(self, state: Sequence[float]) -> int:
        """
        Epsilon-greedy action selection.

        With probability ``epsilon`` returns a uniformly random action.
        Otherwise returns the index of the largest finite output of the
        live network, or 0 if no output is finite.
        """
        if random.random() < self.epsilon:
            return random.randrange(self.config.num_actions)

        q_values = self.q_network.forward(state)
        try:
            return finite_argmax(q_values)
        except NoFiniteOutput as e:
            logger.debug(f"Falling back to action 0: {e}")
            return 0

    def store_experience(
        self,
        state: Sequence[float],
        action: int,
        reward: float,
        next_state: Sequence[float],
        done: bool,
    ) -> None:
        """
        Push a transition into the replay buffer.

        The buffer is resized to ``config.replay_buffer_size`` first, so a
        smaller capacity set by the caller evicts the oldest transitions.
        """
        self.replay_buffer.push(
            Experience(
                state=state,
                action=action,
                reward=reward,
                next_state=next_state,
                done=done,
            ),
            capacity=self.config.replay_buffer_size,
        )

    def update_epsilon(self) -> float:
        """Recompute epsilon from the replay buffer length."""
        config = self.config
        self.epsilon = config.epsilon_end + (
            (config.epsilon_start - config.epsilon_end)
            * config.epsilon_decay ** len(self.replay_buffer)
        )
        return self.epsilon

    def _target_value(self, experience: Experience) -> float:
        if experience.done:
            return experience.reward
        next_q = self.target_network.forward(experience.next_state)
        return experience.reward + self.config.gamma * finite_max(next_q)

    def train(self, learning_rate: Optional[float] = None) -> Optional[float]:
        """
        One training step on a sampled mini-batch.

        Target vectors for the whole batch are built first from the
        live network's current outputs, with the taken action's entry
        replaced by the bootstrapped target. The live network is then
        updated one example at a time (or once with the averaged
        gradient when ``config.batch_update == 'averaged'``).

        Args:
            learning_rate: Overrides ``config.learning_rate``.

        Returns:
            Mean squared TD error of the batch, or None if fewer than
            ``batch_size`` experiences are stored. An empty batch
            (``batch_size`` of 0) is skipped the same way.

        Raises:
            ConfigurationError: If the config was changed to an invalid value.
        """
        self.config.validate()
        if self.config.batch_size == 0:
            logger.debug("Skipping training step: batch_size is 0")
            return None

        lr = self.config.learning_rate if learning_rate is None else learning_rate

        try:
            batch = self.replay_buffer.sample(self.config.batch_size)
        except InsufficientExperience as e:
            logger.debug(f"Skipping training step: {e}")
            return None

        targets: List[torch.Tensor] = []
        for experience in batch:
            target = self.q_network.forward(experience.state).clone()
            target[experience.action] = self._target_value(experience)
            targets.append(target)

        averaged = self.config.batch_update == 'averaged'
        pending = []
        squared_errors = []

        for experience, target in zip(batch, targets):
            current, activations, weighted_sums = (
                self.q_network.forward_with_intermediates(experience.state)
            )
            d_loss = current - target
            squared_errors.append(float((d_loss ** 2).sum()))

            if averaged:
                pending.append((activations, weighted_sums, d_loss))
            else:
                self.q_network.backward(activations, weighted_sums, d_loss, lr)

        if averaged:
            self.q_network.backward_batch(pending, lr)

        self.training_counter += 1
        loss = sum(squared_errors) / len(squared_errors)
        logger.debug(f"Training step {self.training_counter}: loss={loss:.6f}")
        return loss

    def update_target_network(self) -> None:
        """Replace the target network with a copy of the live network."""
        self.target_network = self.q_network.clone()

    def get_config(self) -> Dict[str, Any]:
        """Get agent configuration and state."""
        return {
            'topology': self.q_network.topology,
            'activation': self.q_network.activation.name,
            'num_actions': self.config.num_actions,
            'learning_rate': self.config.learning_rate,
            'gamma': self.config.gamma,
            'epsilon': self.epsilon,
            'epsilon_start': self.config.epsilon_start,
            'epsilon_end': self.config.epsilon_end,
            'epsilon_decay': self.config.epsilon_decay,
            'batch_size': self.config.batch_size,
            'buffer_size': self.config.replay_buffer_size,
            'buffer_length': len(self.replay_buffer),
            'batch_update': self.config.batch_update,
            'training_counter': self.training_counter,
        }

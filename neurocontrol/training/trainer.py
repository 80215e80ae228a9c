"""
Training orchestration for the DQN agent.

The agent itself only stores, trains and syncs when told to. This
module is the caller-side loop that ties those calls together on
every environment step:

1. store the transition
2. run one training step
3. recompute epsilon from the buffer length
4. sync the target network every ``episode_size`` training steps

Any environment exposing ``reset() -> state`` and
``step(action) -> (next_state, reward, done)`` can be driven.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from ..config import DQNConfig
from .dqn import DQNAgent

logger = logging.getLogger(__name__)


class Environment(Protocol):
    """Minimal simulation interface consumed by DQNTrainer."""

    def reset(self) -> Sequence[float]:
        ...

    def step(self, action: int) -> Tuple[Sequence[float], float, bool]:
        ...


@dataclass
class TrainingResult:
    """Results from a training run."""
    episodes: int = 0
    steps: int = 0
    target_syncs: int = 0
    episode_rewards: List[float] = field(default_factory=list)
    episode_lengths: List[int] = field(default_factory=list)
    losses: List[float] = field(default_factory=list)
    epsilon_history: List[float] = field(default_factory=list)

    @property
    def best_reward(self) -> float:
        return max(self.episode_rewards) if self.episode_rewards else 0.0


class DQNTrainer:
    """
    Step-by-step training driver for a DQNAgent.

    Example:
        config = DQNConfig(batch_size=32, episode_size=100)
        trainer = DQNTrainer(DQNAgent.build(config))
        result = trainer.run(env, episodes=500)

        print(f"Best reward: {result.best_reward:.1f}")
    """

    def __init__(self, agent: DQNAgent, config: Optional[DQNConfig] = None):
        """
        Initialize the trainer.

        Args:
            agent: Agent to train.
            config: Configuration for the sync cadence. Defaults to the
                agent's own config.
        """
        self.agent = agent
        self.config = config or agent.config
        self.result = TrainingResult()

    def observe(
        self,
        state: Sequence[float],
        action: int,
        reward: float,
        next_state: Sequence[float],
        done: bool,
    ) -> Optional[float]:
        """
        Feed one transition to the agent and run its training step.

        Returns:
            The training loss, or None if the agent skipped training.
        """
        agent = self.agent
        agent.store_experience(state, action, reward, next_state, done)
        loss = agent.train(self.config.learning_rate)
        agent.update_epsilon()

        self.result.steps += 1
        self.result.epsilon_history.append(agent.epsilon)

        if loss is not None:
            self.result.losses.append(loss)
            episode_size = self.config.episode_size
            if episode_size > 0 and agent.training_counter % episode_size == 0:
                agent.update_target_network()
                self.result.target_syncs += 1
                logger.info(
                    f"Target network synced at training step "
                    f"{agent.training_counter} (epsilon={agent.epsilon:.3f})"
                )

        return loss

    def run_episode(self, env: Environment, max_steps: int = 1000) -> float:
        """
        Play one episode, training after every step.

        Args:
            env: Environment to drive.
            max_steps: Step limit if the environment never reports done.

        Returns:
            Total reward of the episode.
        """
        state = env.reset()
        total_reward = 0.0
        steps = 0

        for steps in range(1, max_steps + 1):
            action = self.agent.choose_action(state)
            next_state, reward, done = env.step(action)
            self.observe(state, action, reward, next_state, done)

            total_reward += reward
            state = next_state
            if done:
                break

        self.result.episodes += 1
        self.result.episode_rewards.append(total_reward)
        self.result.episode_lengths.append(steps)
        return total_reward

    def run(
        self,
        env: Environment,
        episodes: int,
        max_steps: int = 1000,
        progress_callback: Optional[Callable[[int, Any], None]] = None,
    ) -> TrainingResult:
        """
        Run several episodes.

        Args:
            env: Environment to drive.
            episodes: Number of episodes.
            max_steps: Step limit per episode.
            progress_callback: Called with (episode, reward) each episode.

        Returns:
            Accumulated training result.
        """
        for episode in range(episodes):
            reward = self.run_episode(env, max_steps)
            logger.debug(
                f"Episode {episode}: reward={reward:.2f}, "
                f"epsilon={self.agent.epsilon:.3f}"
            )
            if progress_callback:
                progress_callback(episode, reward)

        logger.info(
            f"Training finished: {self.result.episodes} episodes, "
            f"{self.result.steps} steps, {self.result.target_syncs} target syncs"
        )
        return self.result

"""
Reinforcement learning for the control core.

This module provides:
- ReplayBuffer: bounded FIFO of transitions, sampled with replacement
- DQNAgent: epsilon-greedy agent with a live and a target network
- DQNTrainer: per-step loop that stores, trains, decays epsilon and
  syncs the target network

Example usage:
    from neurocontrol.config import DQNConfig
    from neurocontrol.training import DQNAgent, DQNTrainer

    config = DQNConfig(replay_buffer_size=10000, batch_size=32)
    trainer = DQNTrainer(DQNAgent.build(config))
    result = trainer.run(env, episodes=200)
"""
from .replay_buffer import Experience, ReplayBuffer
from .dqn import DQNAgent, finite_argmax, finite_max
from .trainer import DQNTrainer, Environment, TrainingResult

__all__ = [
    # Replay
    'Experience',
    'ReplayBuffer',

    # Agent
    'DQNAgent',
    'finite_argmax',
    'finite_max',

    # Orchestration
    'DQNTrainer',
    'Environment',
    'TrainingResult',
]

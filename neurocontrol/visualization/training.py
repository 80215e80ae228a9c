"""
Training visualization utilities.

Plots and summaries for DQN runs: episode rewards, TD loss and the
exploration rate.
"""
from typing import List, Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from ..training import TrainingResult


def moving_average(values: Sequence[float], window: int) -> np.ndarray:
    """Trailing mean over ``window`` values; shorter at the start."""
    values = np.asarray(values, dtype=float)
    if window <= 1 or len(values) == 0:
        return values
    cumsum = np.cumsum(np.insert(values, 0, 0.0))
    counts = np.minimum(np.arange(1, len(values) + 1), window)
    starts = np.arange(1, len(values) + 1) - counts
    return (cumsum[1:] - cumsum[starts]) / counts


def plot_training_curves(
    result: TrainingResult,
    smoothing: int = 10,
    save_path: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 10),
) -> Optional[str]:
    """
    Plot episode rewards, TD loss and epsilon of a training run.

    Args:
        result: Result from ``DQNTrainer.run``.
        smoothing: Moving-average window for rewards and loss.
        save_path: Path to save figure (None = don't save).
        figsize: Figure size in inches.

    Returns:
        Path to saved figure if save_path provided.
    """
    fig, (reward_ax, loss_ax, eps_ax) = plt.subplots(3, 1, figsize=figsize, sharex=False)

    _plot_series(reward_ax, result.episode_rewards, smoothing, 'green', 'Episode', 'Reward')
    reward_ax.set_title('Episode Reward')

    _plot_series(loss_ax, result.losses, smoothing, 'red', 'Training step', 'TD loss')
    loss_ax.set_title('Training Loss')

    eps_ax.plot(result.epsilon_history, color='purple', linewidth=1.5)
    eps_ax.set_xlabel('Step')
    eps_ax.set_ylabel('Epsilon')
    eps_ax.set_title('Exploration Rate')
    eps_ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        plt.close()
        return save_path

    plt.close()
    return None


def _plot_series(ax, values: List[float], smoothing: int, color: str, xlabel: str, ylabel: str):
    if values:
        ax.plot(values, color=color, alpha=0.3, label='Raw')
        ax.plot(moving_average(values, smoothing), color=color, linewidth=2,
                label=f'Moving avg ({smoothing})')
        ax.legend()
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)


def format_training_summary(result: TrainingResult) -> str:
    """
    Generate a text summary of training.

    Args:
        result: Result from ``DQNTrainer.run``.

    Returns:
        Formatted text summary.
    """
    lines = [
        "=" * 50,
        "TRAINING SUMMARY",
        "=" * 50,
        "",
        f"Episodes: {result.episodes:,}",
        f"Steps: {result.steps:,}",
        f"Target syncs: {result.target_syncs}",
        "",
    ]

    if result.episode_rewards:
        rewards = np.asarray(result.episode_rewards, dtype=float)
        lines.extend([
            "Performance:",
            f"  Final reward: {rewards[-1]:.2f}",
            f"  Best reward: {rewards.max():.2f} (episode {int(rewards.argmax()):,})",
            f"  Mean reward: {rewards.mean():.2f}",
            "",
        ])

    final_loss = f"{result.losses[-1]:.6f}" if result.losses else 'N/A'
    final_epsilon = f"{result.epsilon_history[-1]:.4f}" if result.epsilon_history else 'N/A'
    lines.extend([
        f"Final TD loss: {final_loss}",
        f"Final epsilon: {final_epsilon}",
        "",
        "=" * 50,
    ])

    return "\n".join(lines)

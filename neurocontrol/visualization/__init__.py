"""
Visualization and monitoring for evolution and DQN runs.

All visualizations use matplotlib (Agg backend) for static plots that
can be saved to files. Text summaries are plain strings suitable for
logs or a status panel.

Example usage:
    from neurocontrol.visualization import (
        plot_fitness_over_generations,
        plot_training_curves,
    )

    plot_fitness_over_generations(population.stats_history, save_path='evolution.png')
    plot_training_curves(result, save_path='dqn.png')
"""
from .evolution import (
    plot_fitness_over_generations,
    plot_mutation_counts,
    format_evolution_summary,
)
from .training import (
    moving_average,
    plot_training_curves,
    format_training_summary,
)

__all__ = [
    # Evolution
    'plot_fitness_over_generations',
    'plot_mutation_counts',
    'format_evolution_summary',

    # Training
    'moving_average',
    'plot_training_curves',
    'format_training_summary',
]

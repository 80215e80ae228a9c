"""
Evolution visualization utilities.

Generate views of a genetic evolution run:
- Fitness over generations
- Best score and mutation counts per generation
- Text summaries of the live population
"""
from typing import List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from ..evolution import GenerationStats, Population


def plot_fitness_over_generations(
    stats_history: List[GenerationStats],
    save_path: Optional[str] = None,
    show_range: bool = True,
    figsize: Tuple[int, int] = (12, 6),
) -> Optional[str]:
    """
    Plot fitness progression over generations.

    Shows best, average, and optionally min fitness per generation,
    with the best score on a secondary axis.

    Args:
        stats_history: GenerationStats from ``Population.stats_history``.
        save_path: Path to save figure.
        show_range: If True, show min-max range as shaded area.
        figsize: Figure size.

    Returns:
        Path to saved figure.
    """
    if not stats_history:
        return None

    generations = np.array([s.generation for s in stats_history])
    best = np.array([s.best_fitness for s in stats_history])
    avg = np.array([s.avg_fitness for s in stats_history])
    min_fit = np.array([s.min_fitness for s in stats_history])
    scores = np.array([s.best_score for s in stats_history])

    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(generations, best, 'g-', linewidth=2, label='Best fitness')
    ax.plot(generations, avg, 'b-', linewidth=2, label='Average fitness')

    if show_range:
        ax.fill_between(
            generations, min_fit, best,
            alpha=0.2, color='gray',
            label='Range'
        )

    score_ax = ax.twinx()
    score_ax.plot(generations, scores, 'r--', linewidth=1.5, label='Best score')
    score_ax.set_ylabel('Score')

    ax.set_xlabel('Generation')
    ax.set_ylabel('Fitness (time alive)')
    ax.set_title('Fitness Over Generations')

    lines, labels = ax.get_legend_handles_labels()
    score_lines, score_labels = score_ax.get_legend_handles_labels()
    ax.legend(lines + score_lines, labels + score_labels, loc='upper left')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        plt.close()
        return save_path

    plt.close()
    return None


def plot_mutation_counts(
    stats_history: List[GenerationStats],
    save_path: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 6),
) -> Optional[str]:
    """
    Plot mutated children and random-parent substitutions per generation.

    Args:
        stats_history: GenerationStats from ``Population.stats_history``.
        save_path: Path to save figure.
        figsize: Figure size.

    Returns:
        Path to saved figure.
    """
    if not stats_history:
        return None

    generations = np.array([s.generation for s in stats_history])
    mutations = np.array([s.num_mutations for s in stats_history])
    random_parents = np.array([s.num_random_parents for s in stats_history])

    fig, ax = plt.subplots(figsize=figsize)

    ax.bar(generations, mutations, color='steelblue', edgecolor='black', label='Mutated children')
    ax.plot(generations, random_parents, 'ko-', label='Random parents')

    ax.set_xlabel('Generation')
    ax.set_ylabel('Count')
    ax.set_title('Mutation Activity')
    ax.legend()
    ax.grid(True, alpha=0.3, axis='y')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        plt.close()
        return save_path

    plt.close()
    return None


def format_evolution_summary(population: Population) -> str:
    """
    Generate a text summary of a population.

    Reports the current generation's counters alongside the best pair
    and the fitness progression across finished generations.
    """
    best_pair = population.best_pair
    lines = [
        "=" * 50,
        "EVOLUTION SUMMARY",
        "=" * 50,
        "",
        f"Generation: {population.generation}",
        f"Dead: {population.dead_count}/{len(population.individuals)}",
        f"Current score: {population.generation_score:.0f}",
        f"Current fitness: {population.generation_fitness:.2f}",
        f"Mutation probability: {population.mutation_probability:.4f}",
        "",
        "Best individual:",
        f"  ID: {best_pair.best_id or 'N/A'}",
        f"  Score: {best_pair.best_score:.0f}",
        f"  Fitness: {best_pair.best_fitness:.2f}",
        "",
        "Second best:",
        f"  ID: {best_pair.second_best_id or 'N/A'}",
        f"  Score: {best_pair.second_best_score:.0f}",
        f"  Fitness: {best_pair.second_best_fitness:.2f}",
    ]

    history = population.stats_history
    if history:
        first = history[0]
        last = history[-1]
        lines.extend([
            "",
            "Fitness progression:",
            f"  Initial best: {first.best_fitness:.3f}",
            f"  Final best: {last.best_fitness:.3f}",
            f"  Final average: {last.avg_fitness:.3f}",
            f"  Improvement: {last.best_fitness - first.best_fitness:.3f}",
        ])

    lines.extend(["", "=" * 50])

    return "\n".join(lines)

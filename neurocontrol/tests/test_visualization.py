"""
Tests for plots and text summaries.
"""
import numpy as np
import pytest

from neurocontrol.evolution import GenerationStats, Population
from neurocontrol.training import TrainingResult
from neurocontrol.visualization import (
    format_evolution_summary,
    format_training_summary,
    moving_average,
    plot_fitness_over_generations,
    plot_mutation_counts,
    plot_training_curves,
)


@pytest.fixture
def stats_history():
    return [
        GenerationStats(
            generation=g,
            best_fitness=1.0 + g,
            avg_fitness=0.5 + g / 2,
            min_fitness=0.1,
            best_score=float(g),
            num_mutations=5,
            num_random_parents=2 if g == 0 else 0,
        )
        for g in range(5)
    ]


@pytest.fixture
def training_result():
    return TrainingResult(
        episodes=3,
        steps=30,
        target_syncs=1,
        episode_rewards=[1.0, 3.0, 2.0],
        episode_lengths=[10, 10, 10],
        losses=[0.5, 0.4, 0.3, 0.2],
        epsilon_history=[1.0, 0.99, 0.98],
    )


class TestEvolutionPlots:
    """Tests for evolution plots."""

    def test_fitness_plot_saved(self, stats_history, tmp_path):
        path = str(tmp_path / 'fitness.png')
        assert plot_fitness_over_generations(stats_history, save_path=path) == path
        assert (tmp_path / 'fitness.png').exists()

    def test_fitness_plot_empty(self):
        assert plot_fitness_over_generations([]) is None

    def test_fitness_plot_without_path(self, stats_history):
        assert plot_fitness_over_generations(stats_history) is None

    def test_mutation_plot_saved(self, stats_history, tmp_path):
        path = str(tmp_path / 'mutations.png')
        assert plot_mutation_counts(stats_history, save_path=path) == path
        assert (tmp_path / 'mutations.png').exists()


class TestEvolutionSummary:
    """Tests for format_evolution_summary."""

    def test_summary_fields(self, evolution_config):
        pop = Population(evolution_config)
        pop.initialize_random()
        pop.tick(1.5)
        pop.pass_milestone(pop.individuals[0])
        pop.kill(pop.individuals[0])

        summary = format_evolution_summary(pop)

        assert "EVOLUTION SUMMARY" in summary
        assert "Generation: 0" in summary
        assert "Dead: 1/10" in summary
        assert "Current score: 1" in summary
        assert "Best individual:" in summary

    def test_summary_with_history(self, evolution_config):
        pop = Population(evolution_config)
        pop.initialize_random()
        pop.tick(2.0)
        for individual in list(pop.individuals):
            pop.kill(individual)
        pop.evolve_generation()

        summary = format_evolution_summary(pop)

        assert "Generation: 1" in summary
        assert "Fitness progression:" in summary
        assert "Final best: 2.000" in summary


class TestTrainingPlots:
    """Tests for training plots and summaries."""

    def test_moving_average(self):
        assert np.allclose(moving_average([1, 2, 3], 2), [1.0, 1.5, 2.5])
        assert np.allclose(moving_average([4, 5], 1), [4, 5])
        assert len(moving_average([], 5)) == 0

    def test_curves_saved(self, training_result, tmp_path):
        path = str(tmp_path / 'training.png')
        assert plot_training_curves(training_result, smoothing=2, save_path=path) == path
        assert (tmp_path / 'training.png').exists()

    def test_curves_empty_result(self, tmp_path):
        path = str(tmp_path / 'empty.png')
        assert plot_training_curves(TrainingResult(), save_path=path) == path

    def test_summary(self, training_result):
        summary = format_training_summary(training_result)

        assert "TRAINING SUMMARY" in summary
        assert "Episodes: 3" in summary
        assert "Best reward: 3.00 (episode 1)" in summary
        assert "Final TD loss: 0.200000" in summary
        assert "Final epsilon: 0.9800" in summary

    def test_summary_empty(self):
        summary = format_training_summary(TrainingResult())
        assert "Final TD loss: N/A" in summary
        assert "Performance:" not in summary

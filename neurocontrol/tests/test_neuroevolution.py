"""
Tests for neuroevolution operators.

Tests the mutation, crossover, and selection operators for:
- Single-flip and per-weight mutation semantics
- Averaging crossover correctness and parent isolation
- Best-pair selection with the fitness AND score rule
"""
import pytest
import torch

from neurocontrol.evolution import (
    BestPair,
    PerWeightMutator,
    WeightCrossover,
    WeightMutator,
    crossover_average,
    mutate,
    select_best,
)
from neurocontrol.exceptions import TopologyMismatch
from neurocontrol.networks import NeuralNetwork

from .factories import DeadIndividualFactory, IndividualFactory


def snapshot(network):
    return [p.clone() for p in network.parameters()]


def unchanged(before, network):
    return all(torch.equal(a, b) for a, b in zip(before, network.parameters()))


class TestWeightMutator:
    """Tests for the single-flip WeightMutator."""

    @pytest.fixture
    def network(self):
        return NeuralNetwork([4, 6, 1])

    def test_init(self):
        mutator = WeightMutator(probability=0.3, rate=0.2)
        assert mutator.probability == 0.3
        assert mutator.rate == 0.2

    def test_zero_probability_never_mutates(self, network):
        """Test 100 calls with probability 0 leave every weight alone."""
        before = snapshot(network)
        for _ in range(100):
            assert mutate(network, probability=0.0, rate=1.0) is False
        assert unchanged(before, network)

    def test_full_probability_perturbs_every_parameter(self, network):
        before = snapshot(network)
        assert mutate(network, probability=1.0, rate=0.5) is True
        for orig, current in zip(before, network.parameters()):
            assert not torch.equal(orig, current)

    def test_perturbation_within_rate(self, network):
        before = snapshot(network)
        mutate(network, probability=1.0, rate=0.125)
        for orig, current in zip(before, network.parameters()):
            assert (current - orig).abs().max().item() <= 0.125 + 1e-6

    def test_negative_rate_uses_magnitude(self, network):
        before = snapshot(network)
        assert mutate(network, probability=1.0, rate=-0.1) is True
        for orig, current in zip(before, network.parameters()):
            delta = (current - orig).abs()
            assert delta.max().item() <= 0.1 + 1e-6
            assert delta.max().item() > 0.0

    def test_zero_rate_changes_nothing(self, network):
        before = snapshot(network)
        mutate(network, probability=1.0, rate=0.0)
        assert unchanged(before, network)

    def test_mutation_is_all_or_nothing(self, network):
        """Test that one coin flip decides for the whole network."""
        outcomes = set()
        for _ in range(50):
            before = snapshot(network)
            mutated = mutate(network, probability=0.5, rate=0.1)
            changed = [
                bool((orig != current).any())
                for orig, current in zip(before, network.parameters())
            ]
            if mutated:
                assert all(changed)
            else:
                assert not any(changed)
            outcomes.add(mutated)
        assert outcomes == {True, False}

    def test_call_overrides(self, network):
        mutator = WeightMutator(probability=1.0, rate=1.0)
        before = snapshot(network)
        assert mutator.mutate(network, probability=0.0) is False
        assert unchanged(before, network)


class TestPerWeightMutator:
    """Tests for the per-weight alternate."""

    @pytest.fixture
    def network(self):
        return NeuralNetwork([10, 10, 2])

    def test_zero_probability(self, network):
        before = snapshot(network)
        for _ in range(20):
            assert PerWeightMutator().mutate(network, probability=0.0, rate=1.0) is False
        assert unchanged(before, network)

    def test_full_probability(self, network):
        before = snapshot(network)
        assert PerWeightMutator().mutate(network, probability=1.0, rate=0.5) is True
        for orig, current in zip(before, network.parameters()):
            assert bool((orig != current).all())

    def test_partial_probability_mutates_some_weights(self, network):
        before = snapshot(network)
        PerWeightMutator(probability=0.5, rate=0.5).mutate(network)

        changed = sum(
            int((orig != current).sum())
            for orig, current in zip(before, network.parameters())
        )
        total = network.parameter_count()
        assert 0 < changed < total


class TestCrossover:
    """Tests for averaging crossover."""

    @pytest.fixture
    def parents(self):
        return NeuralNetwork([4, 6, 1]), NeuralNetwork([4, 6, 1])

    def test_self_crossover_is_identity(self, parents):
        a, _ = parents
        child = crossover_average(a, a)
        for pa, pc in zip(a.parameters(), child.parameters()):
            assert torch.allclose(pa, pc)

    def test_identical_weights_reproduced_exactly(self, parents):
        a, _ = parents
        b = a.clone()
        child = crossover_average(a, b)
        for pa, pc in zip(a.parameters(), child.parameters()):
            assert torch.equal(pa, pc)

    def test_child_is_mean_of_parents(self, parents):
        a, b = parents
        child = crossover_average(a, b)
        for pa, pb, pc in zip(a.parameters(), b.parameters(), child.parameters()):
            assert torch.allclose(pc, (pa + pb) / 2)

    def test_parents_unmodified(self, parents):
        a, b = parents
        before_a, before_b = snapshot(a), snapshot(b)
        crossover_average(a, b)
        assert unchanged(before_a, a)
        assert unchanged(before_b, b)

    def test_child_not_aliased(self, parents):
        """Test that mutating the child never reaches a parent."""
        a, b = parents
        before_a, before_b = snapshot(a), snapshot(b)
        child = crossover_average(a, b)

        assert child is not a and child is not b
        mutate(child, probability=1.0, rate=1.0)
        assert unchanged(before_a, a)
        assert unchanged(before_b, b)

    def test_topology_mismatch(self):
        with pytest.raises(TopologyMismatch):
            crossover_average(NeuralNetwork([4, 6, 1]), NeuralNetwork([4, 5, 1]))

    def test_alpha_weighting(self, parents):
        a, b = parents
        child = WeightCrossover(alpha=1.0).crossover(a, b)
        for pa, pc in zip(a.parameters(), child.parameters()):
            assert torch.allclose(pa, pc)

    def test_child_keeps_activation(self):
        a = NeuralNetwork([2, 2], activation='tanh')
        b = NeuralNetwork([2, 2], activation='tanh')
        assert crossover_average(a, b).activation.name == 'tanh'


class TestSelectBest:
    """Tests for best-pair selection."""

    def individuals(self, pairs):
        """Build individuals from (fitness, score) pairs."""
        return [IndividualFactory(fitness=f, score=s) for f, s in pairs]

    def key(self, best_pair):
        return (
            (best_pair.best_fitness, best_pair.best_score),
            (best_pair.second_best_fitness, best_pair.second_best_score),
        )

    def test_reference_sequence(self):
        best = select_best(self.individuals([(5, 1), (10, 2), (3, 5)]))
        assert self.key(best) == ((10, 2), (5, 1))

    def test_stores_clones(self):
        individuals = self.individuals([(5, 1), (10, 2)])
        best = select_best(individuals)

        assert best.best_network is not individuals[1].network
        for pa, pb in zip(best.best_network.parameters(), individuals[1].network.parameters()):
            assert torch.equal(pa, pb)

        mutate(individuals[1].network, probability=1.0, rate=1.0)
        assert not torch.equal(
            best.best_network.layers[0].weight,
            individuals[1].network.layers[0].weight,
        )

    def test_higher_fitness_lower_score_goes_to_second(self):
        best = select_best(self.individuals([(5, 5), (10, 1)]))
        assert self.key(best) == ((5, 5), (10, 1))

    def test_higher_score_lower_fitness_goes_to_second(self):
        best = select_best(self.individuals([(10, 1), (5, 5)]))
        assert self.key(best) == ((10, 1), (5, 5))

    def test_equal_fitness_does_not_replace_best(self):
        best = select_best(self.individuals([(5, 1), (5, 2)]))
        assert self.key(best) == ((5, 1), (5, 2))

    def test_equal_score_with_higher_fitness_replaces_best(self):
        best = select_best(self.individuals([(5, 2), (6, 2)]))
        assert self.key(best) == ((6, 2), (5, 2))

    def test_new_best_demotes_previous(self):
        individuals = self.individuals([(1, 0), (2, 0), (3, 0)])
        best = select_best(individuals)
        assert best.best_id == individuals[2].id
        assert best.second_best_id == individuals[1].id

    def test_order_matters(self):
        forward = select_best(self.individuals([(3, 0), (2, 0), (1, 0)]))
        assert self.key(forward) == ((3, 0), (2, 0))

        backward = select_best(self.individuals([(1, 0), (2, 0), (3, 0)]))
        assert self.key(backward) == ((3, 0), (2, 0))

        mixed = select_best(self.individuals([(2, 3), (3, 0), (1, 3)]))
        # (3, 0) loses on score to best; (1, 3) loses on fitness to second
        assert self.key(mixed) == ((2, 3), (3, 0))

    def test_zero_fitness_never_recorded(self):
        best = select_best(self.individuals([(0, 0), (0, 3)]))
        assert best.best_network is None
        assert best.second_best_network is None

    def test_running_pair_across_calls(self):
        running = BestPair()
        select_best(self.individuals([(5, 1)]), running)
        select_best(self.individuals([(4, 1)]), running)
        assert self.key(running) == ((5, 1), (4, 1))

    def test_same_individual_refreshes_best(self):
        """Test that re-offering a growing best never demotes itself."""
        individual = IndividualFactory(fitness=5, score=1)
        running = select_best([individual])
        individual.fitness = 8
        select_best([individual], running)

        assert (running.best_fitness, running.best_score) == (8, 1)
        assert running.second_best_network is None

    def test_dead_individuals_are_eligible(self):
        best = select_best([DeadIndividualFactory(fitness=4, score=2)])
        assert (best.best_fitness, best.best_score) == (4, 2)

    def test_offer_returns_change(self):
        running = BestPair()
        assert running.offer(IndividualFactory(fitness=3, score=1)) is True
        assert running.offer(IndividualFactory(fitness=0, score=5)) is False

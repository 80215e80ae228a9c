"""
Genetic evolution of fixed-topology networks.

Each generation is scored by a simulation: fitness is time alive and
score counts milestones passed. When every individual has died the
best and second-best are averaged into each child of the next
generation, and every child is mutated with a single coin flip.

This module provides:
- Mutation operators (whole-network and per-weight)
- Averaging crossover
- Best-pair selection requiring higher fitness AND at least equal score
- Population management driving the generation lifecycle

Example usage:
    from neurocontrol.evolution import Population
    from neurocontrol.config import EvolutionConfig

    config = EvolutionConfig(population_size=400, mutation_rate=0.125)
    pop = Population(config)
    pop.initialize_random()

    while running:
        for individual in pop.alive_individuals:
            if pop.decide(individual, sensors_for(individual)):
                jump(individual)
        pop.tick(dt)
        for individual in collided():
            pop.kill(individual)
        pop.evolve_if_dead()

    print(f"Best score: {pop.best_pair.best_score:.0f}")
"""
from .mutations import (
    WeightMutator,
    PerWeightMutator,
    mutate,
)
from .crossover import (
    WeightCrossover,
    crossover_average,
)
from .selection import (
    Individual,
    BestPair,
    select_best,
)
from .population import (
    Population,
    GenerationStats,
)

__all__ = [
    # Mutations
    'WeightMutator',
    'PerWeightMutator',
    'mutate',

    # Crossover
    'WeightCrossover',
    'crossover_average',

    # Selection
    'Individual',
    'BestPair',
    'select_best',

    # Population management
    'Population',
    'GenerationStats',
]

"""
Population management for generational evolution.

Handles the lifecycle of one cohort of evolved agents:
- Initialization with random networks
- Per-tick bookkeeping (decisions, time alive, milestones, deaths)
- Selection of the best pair once every individual has died
- Regeneration: averaged crossover of the best pair plus mutation

The simulation drives the population; the population never steps
the simulation itself.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..config import EvolutionConfig
from ..networks import NeuralNetwork
from .crossover import WeightCrossover
from .mutations import PerWeightMutator, WeightMutator
from .selection import BestPair, Individual, select_best

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    """Statistics for a finished generation."""
    generation: int = 0
    best_fitness: float = 0.0
    avg_fitness: float = 0.0
    min_fitness: float = 0.0
    fitness_std: float = 0.0
    best_score: float = 0.0
    mutation_probability: float = 0.0
    num_mutations: int = 0
    num_random_parents: int = 0


class Population:
    """
    Manages a generation of evolving networks.

    Handles the complete evolutionary cycle:
    1. Initialize population with random networks
    2. Each tick: ``decide`` per alive individual, ``tick`` time
       forward, ``pass_milestone`` and ``kill`` as the simulation reports
    3. When ``generation_dead``, ``evolve_generation`` picks the best
       pair and breeds the next generation
    4. Repeat

    The config is read on every call, so changes made by the caller
    between ticks take effect at the next call.

    Example:
        config = EvolutionConfig(population_size=50)
        pop = Population(config)
        pop.initialize_random()

        for individual in pop.alive_individuals:
            if pop.decide(individual, state):
                jump(individual)
        pop.tick(dt)
        ...
        if pop.generation_dead:
            pop.evolve_generation()
    """

    def __init__(
        self,
        config: EvolutionConfig,
        mutator: Optional[WeightMutator] = None,
        crossover: Optional[WeightCrossover] = None,
    ):
        """
        Initialize the population manager.

        Args:
            config: Evolution configuration.
            mutator: Mutation operator. Defaults to WeightMutator, or
                PerWeightMutator when config.per_weight_mutation is set.
            crossover: Crossover operator. Defaults to averaging.
        """
        config.validate()
        self.config = config
        if mutator is None:
            mutator = PerWeightMutator() if config.per_weight_mutation else WeightMutator()
        self.mutator = mutator
        self.crossover = crossover or WeightCrossover(alpha=0.5)

        # Population state
        self.individuals: List[Individual] = []
        self.best_pair = BestPair()
        self.generation = 0

        # Per-generation counters
        self.dead_count = 0
        self.generation_score = 0.0
        self.generation_fitness = 0.0

        # Statistics
        self.stats_history: List[GenerationStats] = []

    def new_network(self) -> NeuralNetwork:
        """A freshly initialised network with the configured topology."""
        return NeuralNetwork(
            self.config.layer_sizes,
            activation=self.config.activation,
            init_range=self.config.init_range,
        )

    def initialize_random(self) -> None:
        """Fill the population with random networks."""
        self.individuals = [
            Individual(
                network=self.new_network(),
                generation=self.generation,
                id=f"ind_{i:04d}",
            )
            for i in range(self.config.population_size)
        ]
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.dead_count = 0
        self.generation_score = 0.0
        self.generation_fitness = 0.0

    @property
    def alive_individuals(self) -> List[Individual]:
        return [ind for ind in self.individuals if ind.alive]

    @property
    def generation_dead(self) -> bool:
        """True once every individual of the generation has died."""
        return bool(self.individuals) and self.dead_count >= len(self.individuals)

    @property
    def mutation_probability(self) -> float:
        """Mutation probability after decay for the current generation."""
        return self.config.mutation_probability_at(self.generation)

    def decide(self, individual: Individual, state: Sequence[float]) -> bool:
        """
        Jump decision of a one-output network.

        Returns:
            True if the network output exceeds the jump threshold.
        """
        output = individual.network.forward(state)
        return bool(output[0] > self.config.jump_threshold)

    def tick(self, dt: float) -> None:
        """Advance the generation clock and every alive individual's fitness."""
        self.generation_fitness += dt
        for individual in self.individuals:
            individual.survive(dt)

    def pass_milestone(self, individual: Individual, count: float = 1.0) -> None:
        """Credit a milestone (e.g. an obstacle passed) to an individual."""
        individual.pass_milestone(count)
        self.generation_score = max(self.generation_score, individual.score)

    def kill(self, individual: Individual) -> None:
        """Mark an individual dead. Repeated calls are ignored."""
        if not individual.alive:
            return
        individual.kill()
        self.dead_count += 1

    def update_best(self) -> BestPair:
        """Offer every individual, in order, to the running best pair."""
        return select_best(self.individuals, self.best_pair)

    def _parent(
        self,
        network: Optional[NeuralNetwork],
        score: float,
        stats: GenerationStats,
    ) -> NeuralNetwork:
        if network is None or score <= self.config.degenerate_score_floor:
            stats.num_random_parents += 1
            return self.new_network()
        return network

    def evolve_generation(self) -> GenerationStats:
        """
        Breed the next generation from the best pair.

        A best-pair parent scoring at or below ``degenerate_score_floor``
        (or missing) is replaced by a freshly initialised network. Produces
        ``population_size`` children, each the average of the two parents
        followed by an independent mutation, then resets the per-generation
        counters and increments the generation.

        Returns:
            Statistics for the generation that just ended.

        Raises:
            ConfigurationError: If the config was changed to an invalid value.
        """
        self.config.validate()
        self.update_best()
        stats = self._generation_stats()

        parent_a = self._parent(
            self.best_pair.best_network, self.best_pair.best_score, stats,
        )
        parent_b = self._parent(
            self.best_pair.second_best_network, self.best_pair.second_best_score, stats,
        )
        if stats.num_random_parents:
            logger.debug(
                f"Generation {self.generation}: {stats.num_random_parents} "
                f"parent(s) replaced by random networks"
            )

        probability = self.mutation_probability
        rate = self.config.mutation_rate
        stats.mutation_probability = probability

        children = []
        for i in range(self.config.population_size):
            child = self.crossover.crossover(parent_a, parent_b)
            if self.mutator.mutate(child, probability=probability, rate=rate):
                stats.num_mutations += 1
            children.append(Individual(
                network=child,
                generation=self.generation + 1,
                id=f"gen{self.generation + 1}_ind_{i:03d}",
            ))

        self.individuals = children
        self.generation += 1
        self._reset_counters()
        self.stats_history.append(stats)

        logger.info(
            f"Generation {stats.generation} finished: "
            f"best fitness {stats.best_fitness:.2f}, "
            f"best score {stats.best_score:.0f}, "
            f"{stats.num_mutations}/{len(children)} children mutated"
        )
        return stats

    def evolve_if_dead(self) -> Optional[GenerationStats]:
        """Call ``evolve_generation`` only when the whole generation is dead."""
        if self.generation_dead:
            return self.evolve_generation()
        return None

    def evolve(
        self,
        run_generation: Callable[['Population'], None],
        generations: int,
        progress_callback: Optional[Callable[[int, GenerationStats], None]] = None,
    ) -> List[GenerationStats]:
        """
        Run several generations with a caller-supplied simulation.

        Args:
            run_generation: Drives the current individuals until the
                simulation ends the round. Survivors are killed
                afterwards so the generation can be closed.
            generations: Number of generations to run.
            progress_callback: Called with (generation, stats) each gen.

        Returns:
            List of generation statistics.
        """
        if not self.individuals:
            self.initialize_random()

        all_stats = []
        for gen in range(generations):
            run_generation(self)

            for individual in self.alive_individuals:
                self.kill(individual)

            stats = self.evolve_generation()
            all_stats.append(stats)

            if progress_callback:
                progress_callback(gen, stats)

        return all_stats

    def _generation_stats(self) -> GenerationStats:
        fitnesses = [ind.fitness for ind in self.individuals]
        scores = [ind.score for ind in self.individuals]
        if not fitnesses:
            return GenerationStats(generation=self.generation)

        return GenerationStats(
            generation=self.generation,
            best_fitness=max(fitnesses),
            avg_fitness=sum(fitnesses) / len(fitnesses),
            min_fitness=min(fitnesses),
            fitness_std=self._std(fitnesses),
            best_score=max(scores),
        )

    def _std(self, values: List[float]) -> float:
        """Calculate standard deviation."""
        if len(values) < 2:
            return 0.0
        mean = sum(values) / len(values)
        variance = sum((x - mean) ** 2 for x in values) / len(values)
        return variance ** 0.5

"""
Parent selection for generational evolution.

Tracks the best and second-best individuals seen so far. An
individual must beat the incumbent on BOTH criteria to take its
place: strictly higher fitness (time alive) and at least equal score
(milestones passed).
"""
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from ..networks import NeuralNetwork


@dataclass
class Individual:
    """
    One member of a generation.

    ``score`` counts milestones reached and ``fitness`` accumulates
    time alive. Both only grow while the individual is alive and are
    frozen once it dies.
    """
    network: NeuralNetwork
    score: float = 0.0
    fitness: float = 0.0
    alive: bool = True
    generation: int = 0
    id: str = ''

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())[:8]

    def survive(self, dt: float) -> None:
        """Add ``dt`` of time alive."""
        if self.alive:
            self.fitness += dt

    def pass_milestone(self, count: float = 1.0) -> None:
        if self.alive:
            self.score += count

    def kill(self) -> None:
        self.alive = False


@dataclass
class BestPair:
    """
    Best and second-best (network, score, fitness) triples.

    Networks are stored as clones so later mutation of the live
    individual cannot change the record.
    """
    best_network: Optional[NeuralNetwork] = None
    best_score: float = 0.0
    best_fitness: float = 0.0
    best_id: Optional[str] = None

    second_best_network: Optional[NeuralNetwork] = None
    second_best_score: float = 0.0
    second_best_fitness: float = 0.0
    second_best_id: Optional[str] = None

    def offer(self, individual: Individual) -> bool:
        """
        Consider one individual for the best or second-best slot.

        A new best pushes the previous best down to second-best. An
        individual already holding the best slot is refreshed in place
        so it never displaces its own earlier record.

        Returns:
            True if either slot changed.
        """
        score, fitness = individual.score, individual.fitness

        if fitness > self.best_fitness and score >= self.best_score:
            if individual.id != self.best_id:
                self.second_best_network = self.best_network
                self.second_best_score = self.best_score
                self.second_best_fitness = self.best_fitness
                self.second_best_id = self.best_id
            self.best_network = individual.network.clone()
            self.best_score = score
            self.best_fitness = fitness
            self.best_id = individual.id
            return True

        if individual.id == self.best_id:
            return False

        if fitness > self.second_best_fitness and score >= self.second_best_score:
            self.second_best_network = individual.network.clone()
            self.second_best_score = score
            self.second_best_fitness = fitness
            self.second_best_id = individual.id
            return True

        return False


def select_best(
    individuals: Iterable[Individual],
    best_pair: Optional[BestPair] = None,
) -> BestPair:
    """
    Update a running best pair from individuals, in iteration order.

    Args:
        individuals: Individuals to consider. Alive and dead ones are
            both eligible; a dead individual's values are frozen.
        best_pair: Running record to update. A fresh one is created
            if None.

    Returns:
        The updated best pair.
    """
    if best_pair is None:
        best_pair = BestPair()

    for individual in individuals:
        best_pair.offer(individual)

    return best_pair

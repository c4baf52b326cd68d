"""
genetic.py

Generational genetic algorithm with elitism.

Individuals are complete partitions. Each generation applies binary
tournament selection, uniform crossover on a fixed share of parent pairs,
single-gene uniform mutation, and finally re-inserts the previous best
individual if it was lost.
"""

import numpy as np

from parclust.core_types import SearchResult
from parclust.partition import Partition
from parclust.problem import Problem
from parclust.registry import register_optimizer
from parclust.utils.logging import ParclustLogger

logger = ParclustLogger.get_logger(__name__)

# Generational schema
CROSSOVER_RATE = 0.7
MUTATION_RATE = 0.1
DEFAULT_POPULATION_SIZE = 50
DEFAULT_GENERATIONS = 100


def binary_tournament(
    population: list[Partition], problem: Problem, rng: np.random.Generator
) -> Partition:
    """Fitter of two randomly drawn individuals; ties keep the first draw."""
    first, second = rng.integers(0, len(population), size=2)
    a, b = population[first], population[second]
    return a if a.fitness(problem) <= b.fitness(problem) else b


def uniform_crossover(
    p1: Partition, p2: Partition, problem: Problem, rng: np.random.Generator
) -> Partition:
    """Child of ``p1`` with a random half of its genes taken from ``p2``."""
    total_elements = p1.size
    genes_to_cross = rng.permutation(total_elements)[: total_elements // 2]

    child = p1.copy()
    for element in genes_to_cross:
        element = int(element)
        child.insert(element, p2.cluster_of(element))

    _restore(child, problem, rng)
    return child


def uniform_mutation(
    partition: Partition, problem: Problem, rng: np.random.Generator
) -> None:
    """Move one random element to a different random cluster, in place."""
    element = int(rng.integers(partition.size))
    current = partition.cluster_of(element)
    cluster = current
    while cluster == current:
        cluster = int(rng.integers(partition.k))

    partition.insert(element, cluster)
    _restore(partition, problem, rng)


def _restore(partition: Partition, problem: Problem, rng: np.random.Generator) -> None:
    # Operators may empty a cluster; fix it and bring centroids up to date
    if not partition.is_valid():
        partition.repair(rng)
    partition.refresh_centroids(problem)


@register_optimizer("genetic")
class GeneticOptimizer:
    """Generational GA over a population of random valid partitions.

    Args:
        population_size: Individuals per generation.
        generations: Number of generations to run (the stopping rule).

    After ``run``, ``history`` holds the best fitness of the initial
    population followed by the best fitness after every generation.
    """

    def __init__(
        self,
        population_size: int = DEFAULT_POPULATION_SIZE,
        generations: int = DEFAULT_GENERATIONS,
    ):
        if population_size < 2:
            raise ValueError(f"population_size must be at least 2. Got: {population_size}")
        if generations < 0:
            raise ValueError(f"generations must be non-negative. Got: {generations}")
        self.population_size = population_size
        self.generations = generations
        self.history: list[float] = []

    def run(self, problem: Problem, rng: np.random.Generator) -> SearchResult:
        crossovers_per_generation = int(CROSSOVER_RATE * (self.population_size / 2))
        mutations_per_generation = round(MUTATION_RATE * problem.n)

        population = Partition.random_population(problem, self.population_size, rng)
        self.history = [min(p.fitness(problem) for p in population)]

        for generation in range(1, self.generations + 1):
            population = self._next_generation(
                population,
                problem,
                rng,
                crossovers_per_generation,
                mutations_per_generation,
            )
            self.history.append(min(p.fitness(problem) for p in population))
            logger.debug(f"Generation {generation}: best fitness {self.history[-1]:.6f}")

        population.sort(key=lambda p: p.fitness(problem))
        return SearchResult.from_partition(population[0], problem)

    def _next_generation(
        self,
        population: list[Partition],
        problem: Problem,
        rng: np.random.Generator,
        crossovers: int,
        mutations: int,
    ) -> list[Partition]:
        parents = [
            binary_tournament(population, problem, rng)
            for _ in range(self.population_size)
        ]

        offspring: list[Partition] = []
        for pair, i in enumerate(range(0, self.population_size - 1, 2)):
            p1, p2 = parents[i], parents[i + 1]
            if pair < crossovers:
                offspring.append(uniform_crossover(p1, p2, problem, rng))
                offspring.append(uniform_crossover(p2, p1, problem, rng))
            else:
                offspring.append(p1.copy())
                offspring.append(p2.copy())
        if self.population_size % 2:
            offspring.append(parents[-1].copy())

        # A single cluster leaves no other cluster to mutate towards
        if problem.k > 1:
            for index in rng.integers(0, self.population_size, size=mutations):
                uniform_mutation(offspring[int(index)], problem, rng)

        # Elitism
        elite = min(population, key=lambda p: p.fitness(problem))
        if elite not in offspring:
            worst = max(
                range(len(offspring)), key=lambda i: offspring[i].fitness(problem)
            )
            offspring[worst] = elite.copy()

        return offspring

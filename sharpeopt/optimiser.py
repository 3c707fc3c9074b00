"""Genetic-algorithm search for weights that maximise the Sharpe ratio."""

from __future__ import annotations

import logging
import math
import random
import sys
from typing import Sequence

from sharpeopt.constraints import EPSILON, NO_TARGET
from sharpeopt.portfolio import Portfolio
from sharpeopt.weights import clip_weights, normalize, random_weights

logger = logging.getLogger(__name__)

_TOURNAMENT_SIZE = 3
_MUTATION_SIGMA = 0.05


class GeneticOptimiser:
    """Optimises portfolio weights by evolving a population of candidates.

    Fitness is the negative Sharpe ratio plus weighted constraint
    penalties; lower is better.
    """

    def __init__(
        self,
        portfolio: Portfolio,
        population_size: int = 100,
        generations: int = 1000,
        mutation_rate: float = 0.05,
        crossover_rate: float = 0.7,
        lower: float = 0.0,
        upper: float = 1.0,
        target_return: float = NO_TARGET,
        sum_penalty_multiplier: float = 100.0,
        bounds_penalty_multiplier: float = 100.0,
        return_penalty_multiplier: float = 1000.0,
        risk_free_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self.portfolio = portfolio
        self.population_size = population_size
        self.generations = generations
        self.mutation_rate = mutation_rate
        self.crossover_rate = crossover_rate
        self.lower = lower
        self.upper = upper
        self.target_return = target_return
        self.sum_penalty_multiplier = sum_penalty_multiplier
        self.bounds_penalty_multiplier = bounds_penalty_multiplier
        self.return_penalty_multiplier = return_penalty_multiplier
        self.risk_free_rate = risk_free_rate
        self._rng = rng if rng is not None else random.Random()

    def fitness(self, weights: Sequence[float]) -> float:
        """Penalised negative Sharpe ratio of the weights."""
        sharpe = self.portfolio.sharpe_ratio(weights, self.risk_free_rate)
        sum_penalty = abs(sum(weights) - 1.0)

        bounds_penalty = 0.0
        for w in weights:
            if w < self.lower:
                bounds_penalty += self.lower - w
            if w > self.upper:
                bounds_penalty += w - self.upper

        return_penalty = 0.0
        if self.target_return > NO_TARGET + EPSILON:
            current = self.portfolio.portfolio_return(weights)
            if current + EPSILON < self.target_return:
                return_penalty = self.target_return - current

        total_penalty = (
            sum_penalty * self.sum_penalty_multiplier
            + bounds_penalty * self.bounds_penalty_multiplier
            + return_penalty * self.return_penalty_multiplier
        )

        if sharpe == math.inf:
            return -math.inf
        if math.isnan(sharpe):
            return sys.float_info.max
        return -sharpe + total_penalty

    def _select_parent(
        self, population: list[list[float]], fitnesses: list[float]
    ) -> list[float]:
        last = len(population) - 1
        best = self._rng.randint(0, last)
        for _ in range(1, _TOURNAMENT_SIZE):
            challenger = self._rng.randint(0, last)
            if fitnesses[challenger] < fitnesses[best]:
                best = challenger
        return population[best]

    def _crossover(
        self, parent1: Sequence[float], parent2: Sequence[float]
    ) -> tuple[list[float], list[float]]:
        child1, child2 = list(parent1), list(parent2)
        for i in range(len(child1)):
            if self._rng.random() < self.crossover_rate:
                child1[i], child2[i] = child2[i], child1[i]
        return normalize(child1), normalize(child2)

    def _mutate(self, individual: list[float]) -> list[float]:
        mutated = False
        result = []
        for w in individual:
            if self._rng.random() < self.mutation_rate:
                w += self._rng.gauss(0.0, _MUTATION_SIGMA)
                mutated = True
            result.append(w)
        if not mutated:
            return result
        return normalize(clip_weights(result, self.lower, self.upper))

    def _initial_population(self) -> list[list[float]]:
        n = self.portfolio.num_assets
        return [
            normalize(
                clip_weights(random_weights(n, self._rng), self.lower, self.upper)
            )
            for _ in range(self.population_size)
        ]

    def optimise(self) -> list[float]:
        """Run the genetic algorithm and return the best weights found."""
        population = self._initial_population()
        best_weights: list[float] = []
        best_fitness = sys.float_info.max
        log_interval = max(1, self.generations // 10)

        for gen in range(self.generations):
            fitnesses = [self.fitness(ind) for ind in population]
            gen_best = min(fitnesses)
            if gen_best < best_fitness:
                best_fitness = gen_best
                best_weights = list(population[fitnesses.index(gen_best)])

            ranked = sorted(zip(fitnesses, population))
            elite_count = self.population_size // 20
            new_population = [list(ind) for _, ind in ranked[:elite_count]]

            while len(new_population) < self.population_size:
                parent1 = self._select_parent(population, fitnesses)
                parent2 = self._select_parent(population, fitnesses)
                child1, child2 = self._crossover(parent1, parent2)
                new_population.append(self._mutate(child1))
                child2 = self._mutate(child2)
                if len(new_population) < self.population_size:
                    new_population.append(child2)

            population = new_population

            if (gen + 1) % log_interval == 0 or gen == 0 or gen == self.generations - 1:
                logger.info(
                    "Generation %d/%d | Best Fitness: %.6f | Current Gen Best Fitness: %.6f",
                    gen + 1,
                    self.generations,
                    best_fitness,
                    gen_best,
                )

        best_fitness = min(best_fitness, self.fitness(best_weights))
        logger.info("Optimization complete. Best overall fitness: %.6f", best_fitness)
        return best_weights
"""Helpers for generating and adjusting portfolio weight vectors."""

from __future__ import annotations

import random
from typing import Sequence


def random_weights(n: int, rng: random.Random | None = None) -> list[float]:
    """Return n uniformly drawn weights scaled to sum to one."""
    if n <= 0:
        raise ValueError("Weight vector size must be > 0.")
    rng = rng if rng is not None else random.Random()
    weights = [rng.random() for _ in range(n)]
    total = sum(weights)
    if total < 1e-12:
        return [1.0 / n] * n
    return [w / total for w in weights]


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Inner product of two equally long vectors."""
    if len(a) != len(b):
        raise ValueError("Vector sizes must match.")
    return sum(x * y for x, y in zip(a, b))


def clip_weights(
    weights: Sequence[float], lower: float = 0.0, upper: float = 1.0
) -> list[float]:
    """Return the weights clamped to [lower, upper]."""
    return [min(max(w, lower), upper) for w in weights]


def normalize(weights: Sequence[float]) -> list[float]:
    """Return the weights scaled to sum to one."""
    total = sum(weights)
    if total < 1e-12:
        raise ValueError("Cannot normalize: sum is approximately zero.")
    return [w / total for w in weights]


def almost_equal(a: float, b: float, eps: float = 1e-8) -> bool:
    """True when a and b differ by less than eps."""
    return abs(a - b) < eps
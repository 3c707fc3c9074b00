"""Feasibility checks and penalties for portfolio weight vectors."""

from __future__ import annotations

import sys
from typing import Sequence

EPSILON = 1e-8
NO_TARGET = -sys.float_info.max
"""Target return meaning that no return target applies."""


class ConstraintViolation(ValueError):
    """Raised when weights break a portfolio constraint."""


def _has_target(target_return: float) -> bool:
    return target_return > NO_TARGET + EPSILON


def _expected_return(weights: Sequence[float], mean_returns: Sequence[float]) -> float:
    return sum(w * m for w, m in zip(weights, mean_returns))


def validate_weights_sum_to_one(weights: Sequence[float]) -> None:
    """Raise unless the weights sum to one within EPSILON."""
    total = sum(weights)
    if abs(total - 1.0) > EPSILON:
        raise ConstraintViolation(f"Weights must sum to 1.0. Got sum = {total:f}")


def validate_bounds(
    weights: Sequence[float], lower: float = 0.0, upper: float = 1.0
) -> None:
    """Raise unless every weight lies in [lower, upper] within EPSILON."""
    for w in weights:
        if w < lower - EPSILON or w > upper + EPSILON:
            raise ConstraintViolation(
                f"Weight {w:f} violates bounds [{lower:f}, {upper:f}]"
            )


def validate_target_return(
    weights: Sequence[float], mean_returns: Sequence[float], target_return: float
) -> None:
    """Raise unless the expected return reaches the target."""
    if len(weights) != len(mean_returns):
        raise ConstraintViolation("Weight and return vectors must match in size.")
    expected = _expected_return(weights, mean_returns)
    if expected + EPSILON < target_return:
        raise ConstraintViolation(
            f"Expected return ({expected:f}) is below target ({target_return:f})."
        )


def validate_weights(
    weights: Sequence[float],
    mean_returns: Sequence[float],
    lower: float = 0.0,
    upper: float = 1.0,
    target_return: float = NO_TARGET,
) -> None:
    """Run every weight check, raising ConstraintViolation on the first failure."""
    validate_weights_sum_to_one(weights)
    validate_bounds(weights, lower, upper)
    if _has_target(target_return):
        validate_target_return(weights, mean_returns, target_return)


def is_feasible(
    weights: Sequence[float],
    mean_returns: Sequence[float],
    lower: float = 0.0,
    upper: float = 1.0,
    target_return: float = NO_TARGET,
) -> bool:
    """True when the weights satisfy every constraint."""
    try:
        validate_weights(weights, mean_returns, lower, upper, target_return)
    except (ValueError, ArithmeticError):
        return False
    return True


def constraint_penalty(
    weights: Sequence[float],
    mean_returns: Sequence[float],
    lower: float = 0.0,
    upper: float = 1.0,
    target_return: float = NO_TARGET,
) -> float:
    """Total size of all constraint violations; zero for feasible weights."""
    penalty = abs(sum(weights) - 1.0)

    for w in weights:
        if w < lower - EPSILON:
            penalty += lower - w
        if w > upper + EPSILON:
            penalty += w - upper

    if _has_target(target_return):
        if len(weights) != len(mean_returns):
            penalty += 1000.0
        else:
            expected = _expected_return(weights, mean_returns)
            if expected + EPSILON < target_return:
                penalty += target_return - expected

    return penalty
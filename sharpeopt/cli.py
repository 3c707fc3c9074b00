"""Command-line driver: optimise a portfolio and trace its efficient frontier."""

from __future__ import annotations

import argparse
import logging
import math
import random
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Sequence

from sharpeopt.constraints import NO_TARGET
from sharpeopt.matrix import Matrix
from sharpeopt.optimiser import GeneticOptimiser
from sharpeopt.portfolio import Portfolio

TRADING_DAYS_PER_YEAR = 252.0
ANNUAL_RISK_FREE_RATE = 0.02
DAILY_RISK_FREE_RATE = ANNUAL_RISK_FREE_RATE / TRADING_DAYS_PER_YEAR

POPULATION_SIZE = 500
GENERATIONS = 1500
MUTATION_RATE = 0.05
CROSSOVER_RATE = 0.7
FRONTIER_POINTS = 20

_USER_PENALTIES = (1000.0, 1000.0, 5000.0)
_FRONTIER_PENALTIES = (1000.0, 1000.0, 25000.0)
_MAX_FRONTIER_DAILY_RETURN = 0.005

_LEADING_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


@dataclass
class Frontier:
    """Efficient-frontier points (annual risk, annual return), sorted, and the
    weights with the highest annualised Sharpe ratio among them."""

    points: list[tuple[float, float]] = field(default_factory=list)
    best_weights: list[float] = field(default_factory=list)
    best_sharpe: float = -math.inf


def _leading_float(text: str) -> float | None:
    """Parse the longest numeric prefix of text, or None if there is none."""
    match = _LEADING_FLOAT.match(text.lstrip())
    if match is None:
        return None
    literal = match.group(0)
    value = float(literal)
    if math.isinf(value) and "inf" not in literal.lower():
        return None  # out of range
    return value


def _parse_cell(cell: str) -> float:
    value = _leading_float(cell.strip(" \t\r\n"))
    return 0.0 if value is None else value


def load_returns_csv(path: str | Path) -> Matrix:
    """Read a returns CSV (header row, date column first) into a Matrix.

    Cells that cannot be read as numbers become 0.0; rows whose width differs
    from the first data row are dropped.
    """
    with open(path, encoding="utf-8", newline="") as handle:
        lines = handle.read().split("\n")

    data: list[list[float]] = []
    for line in lines[1:]:
        cells = line.split(",")[1:]
        if cells and cells[-1] == "":
            cells.pop()
        row = [_parse_cell(cell) for cell in cells]
        if row and (not data or len(row) == len(data[0])):
            data.append(row)

    if not data:
        raise ValueError(f"No valid data in: {path}")
    return Matrix(data)


def save_weights(weights: Iterable[float], path: str | Path) -> None:
    """Write one weight per line with eight decimals."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.writelines(f"{w:.8f}\n" for w in weights)


def save_frontier(points: Iterable[tuple[float, float]], path: str | Path) -> None:
    """Write frontier points as a Risk,Return CSV."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write("Risk,Return\n")
        handle.writelines(f"{risk:.8f},{ret:.8f}\n" for risk, ret in points)


def save_portfolio_details(
    weights: Sequence[float],
    path: str | Path,
    annual_return: float,
    annual_risk: float,
    annual_sharpe: float,
) -> None:
    """Write the portfolio's annualised metrics and weights as a Metric,Value CSV."""
    joined = ";".join(f"{w:g}" for w in weights)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(
            "Metric,Value\n"
            f"Expected Return,{annual_return:g}\n"
            f"Portfolio Std Dev,{annual_risk:g}\n"
            f"Sharpe Ratio,{annual_sharpe:g}\n"
            f"Optimal Weights,{joined}\n"
        )


def _annualised(
    portfolio: Portfolio, weights: Sequence[float], risk_free_rate: float
) -> tuple[float, float, float]:
    root_days = math.sqrt(TRADING_DAYS_PER_YEAR)
    return (
        portfolio.portfolio_return(weights) * TRADING_DAYS_PER_YEAR,
        portfolio.portfolio_risk(weights) * root_days,
        portfolio.sharpe_ratio(weights, risk_free_rate) * root_days,
    )


def efficient_frontier(
    portfolio: Portfolio,
    points: int = FRONTIER_POINTS,
    population_size: int = POPULATION_SIZE,
    generations: int = GENERATIONS,
    mutation_rate: float = MUTATION_RATE,
    crossover_rate: float = CROSSOVER_RATE,
    risk_free_rate: float = DAILY_RISK_FREE_RATE,
    rng: random.Random | None = None,
) -> Frontier:
    """Optimise for a ladder of target returns and collect the frontier.

    The first point has no return target; the others target evenly spaced
    daily returns up to the frontier's maximum.
    """
    rng = rng if rng is not None else random.Random()
    min_ret = 0.0
    max_ret = _MAX_FRONTIER_DAILY_RETURN * TRADING_DAYS_PER_YEAR
    step = (max_ret - min_ret) / (points - 1) if points > 1 else 0.0

    frontier = Frontier()
    for i in range(points):
        target = NO_TARGET if i == 0 else min_ret + i * step / TRADING_DAYS_PER_YEAR
        optimiser = GeneticOptimiser(
            portfolio,
            population_size,
            generations,
            mutation_rate,
            crossover_rate,
            0.0,
            1.0,
            target,
            *_FRONTIER_PENALTIES,
            risk_free_rate,
            rng,
        )
        weights = optimiser.optimise()
        ret, risk, sharpe = _annualised(portfolio, weights, risk_free_rate)
        frontier.points.append((risk, ret))
        if sharpe > frontier.best_sharpe:
            frontier.best_sharpe = sharpe
            frontier.best_weights = list(weights)

    frontier.points.sort()
    return frontier


def _prompt_target() -> float:
    print("Enter target annual return (e.g., 0.10 for 10%): ", end="", flush=True)
    while True:
        line = sys.stdin.readline()
        if not line:
            raise ValueError("No target return given.")
        tokens = line.split()
        if not tokens:
            continue
        value = _leading_float(tokens[0])
        if value is not None and value >= -1.0:
            return value
        print("Invalid input. Enter a value (e.g., 0.05): ", end="", flush=True)


def _report_save(
    what: str, path: Path, save: Callable[..., None], *args: object
) -> None:
    try:
        save(*args)
    except OSError:
        print(f"Failed to open: {path}", file=sys.stderr)
        return
    print(f"{what} saved to: {path}")


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def _target_return(text: str) -> float:
    value = float(text)
    if math.isnan(value) or value < -1.0:
        raise argparse.ArgumentTypeError("must be a number not below -1.0")
    return value


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sharpeopt",
        description="Optimise portfolio weights for the Sharpe ratio and "
        "trace the efficient frontier.",
    )
    parser.add_argument("--data-dir", default="Data")
    parser.add_argument("--results-dir", default="Results")
    parser.add_argument(
        "--target",
        type=_target_return,
        help="target annual return; prompted for when omitted",
    )
    parser.add_argument("--population-size", type=_positive_int, default=POPULATION_SIZE)
    parser.add_argument("--generations", type=_positive_int, default=GENERATIONS)
    parser.add_argument("--frontier-points", type=_positive_int, default=FRONTIER_POINTS)
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the optimisation and write the results; return the exit status."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)

    results_dir = Path(args.results_dir)
    try:
        results_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        print("Failed to create results directory", file=sys.stderr)
        return 1

    rng = random.Random(args.seed)
    risk_free = DAILY_RISK_FREE_RATE
    try:
        returns_path = Path(args.data_dir) / "Daily Returns.csv"
        if not returns_path.exists():
            raise FileNotFoundError(f"Returns file not found: {returns_path}")
        portfolio = Portfolio(load_returns_csv(returns_path))

        target_annual = args.target if args.target is not None else _prompt_target()

        user_optimiser = GeneticOptimiser(
            portfolio,
            args.population_size,
            args.generations,
            MUTATION_RATE,
            CROSSOVER_RATE,
            0.0,
            1.0,
            target_annual / TRADING_DAYS_PER_YEAR,
            *_USER_PENALTIES,
            risk_free,
            rng,
        )
        user_weights = user_optimiser.optimise()
        user_ret, user_risk, user_sharpe = _annualised(portfolio, user_weights, risk_free)

        weights_path = results_dir / "User Weights.txt"
        _report_save("Weights", weights_path, save_weights, user_weights, weights_path)
        details_path = results_dir / "User Portfolio.csv"
        _report_save(
            "Portfolio details",
            details_path,
            save_portfolio_details,
            user_weights,
            details_path,
            user_ret,
            user_risk,
            user_sharpe,
        )

        frontier = efficient_frontier(
            portfolio,
            args.frontier_points,
            args.population_size,
            args.generations,
            MUTATION_RATE,
            CROSSOVER_RATE,
            risk_free,
            rng,
        )
        frontier_path = results_dir / "Efficient Frontier.csv"
        _report_save(
            "Frontier data", frontier_path, save_frontier, frontier.points, frontier_path
        )

        if frontier.best_weights:
            best = frontier.best_weights
            best_ret, best_risk, _ = _annualised(portfolio, best, risk_free)
            best_weights_path = results_dir / "Best Sharpe Weights.txt"
            _report_save("Weights", best_weights_path, save_weights, best, best_weights_path)
            best_details_path = results_dir / "Best Sharpe Portfolio.csv"
            _report_save(
                "Portfolio details",
                best_details_path,
                save_portfolio_details,
                best,
                best_details_path,
                best_ret,
                best_risk,
                frontier.best_sharpe,
            )
    except (OSError, ValueError, ArithmeticError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("Optimization complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
# sharpeopt

Finds portfolio weights that maximise the Sharpe ratio, using a genetic
algorithm whose fitness is the negative Sharpe ratio plus penalties for
weights that do not sum to one, weights outside their bounds, and expected
returns below a target. It also traces an efficient frontier of risk/return
points. It has no dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
sharpeopt
```

By default the command reads `Data/Daily Returns.csv`: a CSV file with a
header row, a date in the first column and one column of daily returns per
asset. Cells that cannot be read as numbers count as 0; rows whose width
differs from the first data row are skipped.

Without `--target` the command asks for a target annual return (for example
`0.10` for 10 %; values below -1.0 are refused), optimises a portfolio for
it, then builds an efficient frontier. Progress of each run is printed every
tenth of the generations. The results go to `Results/`:

- `User Weights.txt` and `User Portfolio.csv`: the portfolio for your target
- `Efficient Frontier.csv`: `Risk,Return` pairs, sorted by risk
- `Best Sharpe Weights.txt` and `Best Sharpe Portfolio.csv`: the frontier
  portfolio with the highest Sharpe ratio

Returns, risk and Sharpe ratios in the output are annualised over 252
trading days, with a 2 % annual risk-free rate. The first frontier point has
no return target; the others target evenly spaced annual returns up to
0.005 × 252.

Options:

| Option | Default | Meaning |
| --- | --- | --- |
| `--data-dir DIR` | `Data` | directory holding `Daily Returns.csv` |
| `--results-dir DIR` | `Results` | directory for the output files (created if missing) |
| `--target R` | prompted | target annual return, not below -1.0 |
| `--population-size N` | 500 | candidates per generation |
| `--generations N` | 1500 | generations per optimisation |
| `--frontier-points N` | 20 | number of frontier points |
| `--seed N` | random | seed for reproducible runs |

The exit status is 0 on success and 1 if the returns file is missing or
unreadable, the data are unusable, or the results directory cannot be made.

With the defaults a full run performs 21 optimisations of 1500 generations
each and takes a long time; smaller `--population-size` and `--generations`
give quicker, rougher results.

## What it does not do

The package does not derive daily returns from price data: the returns CSV
must already exist, and the command stops with an error if it does not.

## Library use

```python
import random

from sharpeopt.matrix import Matrix
from sharpeopt.portfolio import Portfolio
from sharpeopt.optimiser import GeneticOptimiser

returns = Matrix([
    [0.010, 0.002, -0.004],
    [-0.003, 0.001, 0.006],
    [0.007, 0.003, 0.001],
    [0.002, -0.001, 0.004],
])
portfolio = Portfolio(returns)

optimiser = GeneticOptimiser(
    portfolio,
    population_size=100,
    generations=200,
    rng=random.Random(42),
)
weights = optimiser.optimise()

print(portfolio.portfolio_return(weights))
print(portfolio.portfolio_risk(weights))
print(portfolio.sharpe_ratio(weights, 0.0))
```

`GeneticOptimiser.fitness(weights)` gives the penalised negative Sharpe
ratio of any weight vector (lower is better). The optimiser reports its
progress through the `sharpeopt.optimiser` logger.

The building blocks are available on their own as well:

- `sharpeopt.matrix.Matrix`: `zeros`, `num_rows`, `num_cols`, `m[i, j]`
  indexing, `to_lists`, `transpose`, `dot`, scalar `*`, `+`, `-`,
  `inverse` of a positive-definite matrix (via Cholesky),
  `mean_per_column` and the unbiased sample `covariance_matrix`
- `sharpeopt.portfolio.Portfolio`: `num_assets`, `means`, `covariance`,
  `portfolio_return`, `excess_return`, `portfolio_variance`,
  `portfolio_risk` and `sharpe_ratio` (infinite for near-zero risk with a
  positive excess return, zero for near-zero risk otherwise)
- `sharpeopt.weights`: `random_weights`, `dot_product`, `clip_weights`,
  `normalize`, `almost_equal`; the functions return new lists
- `sharpeopt.constraints`: `validate_weights_sum_to_one`,
  `validate_bounds`, `validate_target_return`, `validate_weights`,
  `is_feasible` and `constraint_penalty`; `NO_TARGET` means no return
  target applies
- `sharpeopt.cli`: `load_returns_csv`, `save_weights`, `save_frontier`,
  `save_portfolio_details` and `efficient_frontier`, which returns a
  `Frontier` with `points`, `best_weights` and `best_sharpe`

Constraint violations raise `sharpeopt.constraints.ConstraintViolation`, a
subclass of `ValueError`; size mismatches and other bad input raise
`ValueError`.
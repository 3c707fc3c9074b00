"""Return, risk and Sharpe-ratio calculations for a portfolio of assets."""

from __future__ import annotations

import math
from typing import Sequence

from sharpeopt.matrix import Matrix

_ZERO_TOLERANCE = 1e-12


class Portfolio:
    """Asset statistics derived from a matrix of historical returns.

    Rows of the returns matrix are time periods, columns are assets.
    """

    def __init__(self, returns: Matrix) -> None:
        if returns.num_rows < 2:
            raise ValueError(
                "Portfolio requires a returns matrix with at least 2 rows of data."
            )
        if returns.num_cols == 0:
            raise ValueError(
                "Portfolio requires a returns matrix with at least 1 asset column."
            )
        self._returns = returns
        self._num_assets = returns.num_cols
        self._means = returns.mean_per_column()
        self._covariance = returns.covariance_matrix()

    @property
    def num_assets(self) -> int:
        """Number of assets (columns of the returns matrix)."""
        return self._num_assets

    @property
    def means(self) -> list[float]:
        """Mean return of each asset."""
        return list(self._means)

    @property
    def covariance(self) -> Matrix:
        """Sample covariance matrix of the asset returns."""
        return self._covariance

    def _check_size(self, weights: Sequence[float], what: str) -> None:
        if len(weights) != self._num_assets:
            raise ValueError(
                f"Weight vector size mismatch for portfolio {what} calculation. "
                f"Expected {self._num_assets}, got {len(weights)}."
            )

    def portfolio_return(self, weights: Sequence[float]) -> float:
        """Expected return of the weighted portfolio."""
        self._check_size(weights, "return")
        return sum(w * m for w, m in zip(weights, self._means))

    def excess_return(self, weights: Sequence[float], risk_free: float) -> float:
        """Expected return above the risk-free rate."""
        return self.portfolio_return(weights) - risk_free

    def portfolio_variance(self, weights: Sequence[float]) -> float:
        """Variance w^T * Cov * w of the weighted portfolio."""
        self._check_size(weights, "variance")
        cov = self._covariance
        return sum(
            wi * wj * cov[i, j]
            for i, wi in enumerate(weights)
            for j, wj in enumerate(weights)
        )

    def portfolio_risk(self, weights: Sequence[float]) -> float:
        """Standard deviation of the portfolio return."""
        return math.sqrt(max(0.0, self.portfolio_variance(weights)))

    def sharpe_ratio(self, weights: Sequence[float], risk_free: float = 0.0) -> float:
        """(return - risk_free) / risk.

        With near-zero risk this is infinity for a positive excess return
        and zero otherwise.
        """
        excess = self.portfolio_return(weights) - risk_free
        risk = self.portfolio_risk(weights)
        if risk < _ZERO_TOLERANCE:
            return math.inf if excess > _ZERO_TOLERANCE else 0.0
        return excess / risk
"""Sharpe-ratio portfolio optimisation with a genetic algorithm, with matrix,
constraint and efficient-frontier helpers."""

__version__ = "0.1.0"
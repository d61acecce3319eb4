"""Linear-regression price projection"""

from .regression import RegressionPredictor, fit_linear_regression, z_score_for

__all__ = ["RegressionPredictor", "fit_linear_regression", "z_score_for"]

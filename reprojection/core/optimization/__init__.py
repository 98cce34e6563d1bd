"""Residual functors and their differentiation wrappers."""

from .residuals import (
    ReprojectionResidual,
    PinholeResidual,
    PinholeRadialK1Residual,
    PinholeRadialK3Residual,
    PinholeRigResidual,
    ResidualRegistry,
)
from .cost_function import AutoDiffCostFunction
from .gradient_checker import GradientCheckResult, check_gradients

__all__ = [
    "ReprojectionResidual",
    "PinholeResidual",
    "PinholeRadialK1Residual",
    "PinholeRadialK3Residual",
    "PinholeRigResidual",
    "ResidualRegistry",
    "AutoDiffCostFunction",
    "GradientCheckResult",
    "check_gradients",
]

"""Compare autodiff Jacobians of a cost function against finite differences."""

import logging
from typing import List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field

from ..math.jacobians import compare_jacobians, finite_difference_jacobian
from ..models.settings import GradientCheckSettings
from .cost_function import AutoDiffCostFunction

logger = logging.getLogger(__name__)


class GradientCheckResult(BaseModel):
    """Outcome of a gradient check."""

    is_correct: bool = Field(description="Whether every block is within tolerance")
    max_abs_error: float = Field(description="Largest absolute Jacobian error")
    max_rel_error: float = Field(description="Largest relative Jacobian error")
    block_errors: List[List[List[float]]] = Field(
        default_factory=list,
        description="Per-block absolute error matrices"
    )


def check_gradients(
    cost_function: AutoDiffCostFunction,
    parameter_blocks: Sequence[Sequence[float]],
    settings: Optional[GradientCheckSettings] = None
) -> GradientCheckResult:
    """Check the Jacobians of a cost function at the given parameters.

    Args:
        cost_function: Cost function to check
        parameter_blocks: Parameter blocks to evaluate at
        settings: Finite difference step, scheme and tolerances

    Returns:
        Gradient check result
    """
    settings = settings or GradientCheckSettings()
    sizes = cost_function.parameter_block_sizes

    _, jacobians = cost_function.evaluate(parameter_blocks)
    J_analytic = np.hstack(jacobians)

    def residual_func(params):
        blocks = np.split(params, np.cumsum(sizes)[:-1])
        residuals, _ = cost_function.evaluate(blocks, compute_jacobians=False)
        return residuals

    x = np.concatenate([np.asarray(block, dtype=float).ravel() for block in parameter_blocks])
    J_numeric = finite_difference_jacobian(
        residual_func, x, h=settings.step, method=settings.method
    )

    is_correct, max_abs_error, max_rel_error, error = compare_jacobians(
        J_analytic, J_numeric, atol=settings.atol, rtol=settings.rtol
    )

    block_errors = [
        block.tolist() for block in np.split(error, np.cumsum(sizes)[:-1], axis=1)
    ]

    if not is_correct:
        logger.warning(
            f"Gradient check failed for {cost_function.functor!r}: "
            f"max abs error {max_abs_error:.2e}, max rel error {max_rel_error:.2e}"
        )

    return GradientCheckResult(
        is_correct=is_correct,
        max_abs_error=max_abs_error,
        max_rel_error=max_rel_error,
        block_errors=block_errors
    )

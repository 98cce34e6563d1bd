"""Automatic differentiation wrapper around residual functors."""

import numpy as np
from typing import List, Optional, Sequence, Tuple

from ..math.dual import gradient_of, make_variables
from ..math.generic import value_of
from .residuals import ReprojectionResidual


class AutoDiffCostFunction:
    """Evaluate a residual functor and its Jacobians with dual numbers.

    Each parameter is seeded as an independent dual over the concatenation of
    all parameter blocks; one pass of the functor then yields the residuals
    and the full 2 x N Jacobian, which is split per block.
    """

    def __init__(self, functor: ReprojectionResidual):
        """Initialize cost function.

        Args:
            functor: Residual functor declaring NUM_RESIDUALS and PARAMETER_BLOCK_SIZES
        """
        self.functor = functor

    @property
    def num_residuals(self) -> int:
        return self.functor.NUM_RESIDUALS

    @property
    def parameter_block_sizes(self) -> Tuple[int, ...]:
        return tuple(self.functor.PARAMETER_BLOCK_SIZES)

    @property
    def num_parameters(self) -> int:
        return sum(self.parameter_block_sizes)

    def _validate_blocks(self, parameter_blocks: Sequence[Sequence[float]]) -> List[np.ndarray]:
        sizes = self.parameter_block_sizes
        if len(parameter_blocks) != len(sizes):
            raise ValueError(
                f"Expected {len(sizes)} parameter blocks, got {len(parameter_blocks)}"
            )

        blocks = []
        for i, (block, size) in enumerate(zip(parameter_blocks, sizes)):
            block = np.asarray(block, dtype=float).ravel()
            if block.shape != (size,):
                raise ValueError(
                    f"Parameter block {i} must have {size} elements, got {block.shape[0]}"
                )
            blocks.append(block)
        return blocks

    def evaluate(
        self,
        parameter_blocks: Sequence[Sequence[float]],
        compute_jacobians: bool = True
    ) -> Tuple[np.ndarray, Optional[List[np.ndarray]]]:
        """Evaluate residuals and, optionally, per-block Jacobians.

        Args:
            parameter_blocks: Intrinsics, extrinsics and point blocks
            compute_jacobians: Whether to propagate derivatives

        Returns:
            Tuple of (residuals, jacobians) where jacobians[i] has shape
            (num_residuals, parameter_block_sizes[i]), or None
        """
        blocks = self._validate_blocks(parameter_blocks)

        if not compute_jacobians:
            residuals = np.zeros(self.num_residuals)
            self.functor(*blocks, residuals)
            return residuals, None

        n = self.num_parameters
        variables = make_variables(np.concatenate(blocks))

        dual_blocks = []
        offset = 0
        for size in self.parameter_block_sizes:
            dual_blocks.append(variables[offset:offset + size])
            offset += size

        out = [None] * self.num_residuals
        self.functor(*dual_blocks, out)

        residuals = np.array([value_of(r) for r in out], dtype=float)
        J_full = np.vstack([gradient_of(r, n) for r in out])

        jacobians = []
        offset = 0
        for size in self.parameter_block_sizes:
            jacobians.append(J_full[:, offset:offset + size])
            offset += size

        return residuals, jacobians

    def stacked_jacobian(self, parameter_blocks: Sequence[Sequence[float]]) -> np.ndarray:
        """Jacobian with respect to all parameters, blocks side by side."""
        _, jacobians = self.evaluate(parameter_blocks)
        return np.hstack(jacobians)

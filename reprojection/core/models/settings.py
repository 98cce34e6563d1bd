"""Settings models.

GradientCheckSettings configures check_gradients: the finite difference
scheme and step, and the tolerances of the Jacobian comparison.
"""

from typing import Literal
from pydantic import BaseModel, Field


class GradientCheckSettings(BaseModel):
    """Settings for comparing autodiff Jacobians against finite differences."""

    step: float = Field(default=1e-6, gt=0, description="Finite difference step size")
    method: Literal["forward", "backward", "central"] = Field(
        default="central",
        description="Finite difference scheme"
    )
    atol: float = Field(default=1e-4, ge=0, description="Absolute tolerance")
    rtol: float = Field(default=1e-5, ge=0, description="Relative tolerance")

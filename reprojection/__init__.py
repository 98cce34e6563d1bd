"""Reprojection residuals for bundle adjustment.

Camera models whose residuals are written once over a generic scalar type,
so the same code evaluates on floats and on dual numbers for exact Jacobians.
"""

__version__ = "0.1.0"

# Models
from .core.models.camera import (
    CameraModel,
    Observation,
    Pose,
    PinholeIntrinsics,
    RadialK1Intrinsics,
    RadialK3Intrinsics,
    RigIntrinsics,
)
from .core.models.settings import GradientCheckSettings

# Math
from .core.math.dual import Dual
from .core.math.rotation import angle_axis_rotate_point

# Residuals
from .core.optimization.residuals import (
    ReprojectionResidual,
    PinholeResidual,
    PinholeRadialK1Residual,
    PinholeRadialK3Residual,
    PinholeRigResidual,
    ResidualRegistry,
)
from .core.optimization.cost_function import AutoDiffCostFunction
from .core.optimization.gradient_checker import GradientCheckResult, check_gradients

__all__ = [
    # Version
    "__version__",
    # Models
    "CameraModel",
    "Observation",
    "Pose",
    "PinholeIntrinsics",
    "RadialK1Intrinsics",
    "RadialK3Intrinsics",
    "RigIntrinsics",
    "GradientCheckSettings",
    # Math
    "Dual",
    "angle_axis_rotate_point",
    # Residuals
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

"""Data models for reprojection residuals."""

from .camera import (
    CameraModel,
    Observation,
    Pose,
    PinholeIntrinsics,
    RadialK1Intrinsics,
    RadialK3Intrinsics,
    RigIntrinsics,
)
from .settings import GradientCheckSettings

__all__ = [
    "CameraModel",
    "Observation",
    "Pose",
    "PinholeIntrinsics",
    "RadialK1Intrinsics",
    "RadialK3Intrinsics",
    "RigIntrinsics",
    "GradientCheckSettings",
]

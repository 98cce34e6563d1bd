"""Math primitives for reprojection residuals."""

from .dual import Dual, make_variables, gradient_of
from .generic import sqrt, sin, cos, value_of
from .rotation import (
    angle_axis_rotate_point,
    angle_axis_to_rotation_matrix,
    rotation_matrix_to_angle_axis,
)
from .jacobians import dual_jacobian, finite_difference_jacobian

__all__ = [
    "Dual",
    "make_variables",
    "gradient_of",
    "sqrt",
    "sin",
    "cos",
    "value_of",
    "angle_axis_rotate_point",
    "angle_axis_to_rotation_matrix",
    "rotation_matrix_to_angle_axis",
    "dual_jacobian",
    "finite_difference_jacobian",
]

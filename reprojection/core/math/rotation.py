"""Axis-angle rotations.

``angle_axis_rotate_point`` is generic over the scalar type and is the
rotation primitive shared by every residual model. The matrix helpers below
it operate on plain numpy arrays and are used to build and compose poses.
"""

from typing import Sequence

import numpy as np

from .generic import cos, sin, sqrt, value_of

# Below this squared angle Rodrigues' formula loses precision in theta and
# 1/theta; the first-order expansion is exact to machine precision there.
SMALL_ANGLE_THRESHOLD = np.finfo(np.float64).eps


def dot(a: Sequence, b: Sequence):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence, b: Sequence) -> list:
    return [
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ]


def angle_axis_rotate_point(angle_axis: Sequence, pt: Sequence) -> list:
    """Rotate a point by an axis-angle vector (Rodrigues' formula).

    With theta = |w| and unit axis a = w / theta the rotated point is

        pt * cos(theta) + (a x pt) * sin(theta) + a * (a . pt) * (1 - cos(theta))

    For theta^2 under SMALL_ANGLE_THRESHOLD the first-order expansion
    pt + w x pt is used instead. Its value and its derivative with respect to
    w both agree with the full formula to machine precision, so derivatives
    stay continuous through the zero rotation. Only the primal value of
    theta^2 is inspected; both paths are built from generic operations.

    Args:
        angle_axis: 3 scalars, rotation axis scaled by the angle in radians
        pt: 3 scalars, point to rotate

    Returns:
        List of 3 scalars, the rotated point
    """
    theta2 = dot(angle_axis, angle_axis)
    if value_of(theta2) > SMALL_ANGLE_THRESHOLD:
        theta = sqrt(theta2)
        cos_theta = cos(theta)
        sin_theta = sin(theta)
        theta_inverse = 1.0 / theta

        w = [angle_axis[0] * theta_inverse,
             angle_axis[1] * theta_inverse,
             angle_axis[2] * theta_inverse]
        w_cross_pt = cross(w, pt)
        tmp = dot(w, pt) * (1.0 - cos_theta)

        return [
            pt[0] * cos_theta + w_cross_pt[0] * sin_theta + w[0] * tmp,
            pt[1] * cos_theta + w_cross_pt[1] * sin_theta + w[1] * tmp,
            pt[2] * cos_theta + w_cross_pt[2] * sin_theta + w[2] * tmp,
        ]

    w_cross_pt = cross(angle_axis, pt)
    return [
        pt[0] + w_cross_pt[0],
        pt[1] + w_cross_pt[1],
        pt[2] + w_cross_pt[2],
    ]


def skew_symmetric(v: np.ndarray) -> np.ndarray:
    """Create skew-symmetric matrix from 3D vector."""
    if v.shape != (3,):
        raise ValueError(f"v must be 3-element vector, got shape {v.shape}")

    return np.array([
        [0, -v[2], v[1]],
        [v[2], 0, -v[0]],
        [-v[1], v[0], 0]
    ])


def angle_axis_to_rotation_matrix(angle_axis: np.ndarray) -> np.ndarray:
    """Convert an axis-angle vector to a 3x3 rotation matrix."""
    angle_axis = np.asarray(angle_axis, dtype=float)
    if angle_axis.shape != (3,):
        raise ValueError(f"angle_axis must be 3-element vector, got shape {angle_axis.shape}")

    theta2 = float(angle_axis @ angle_axis)
    if theta2 <= SMALL_ANGLE_THRESHOLD:
        return np.eye(3) + skew_symmetric(angle_axis)

    theta = np.sqrt(theta2)
    K = skew_symmetric(angle_axis / theta)
    return np.eye(3) + np.sin(theta) * K + (1 - np.cos(theta)) * (K @ K)


def rotation_matrix_to_angle_axis(R: np.ndarray) -> np.ndarray:
    """Convert a rotation matrix to an axis-angle vector.

    Angles are recovered in [0, pi]. Near pi the antisymmetric part of R
    vanishes, so the axis is taken from the symmetric part instead.
    """
    if R.shape != (3, 3):
        raise ValueError(f"R must be 3x3 matrix, got shape {R.shape}")

    axis_unnormalized = np.array([
        R[2, 1] - R[1, 2],
        R[0, 2] - R[2, 0],
        R[1, 0] - R[0, 1]
    ])
    cos_theta = np.clip((np.trace(R) - 1) / 2, -1, 1)
    sin_theta = 0.5 * np.linalg.norm(axis_unnormalized)
    theta = np.arctan2(sin_theta, cos_theta)

    if sin_theta > 1e-6:
        return theta / (2 * sin_theta) * axis_unnormalized

    if cos_theta > 0:
        # Small angle approximation
        return 0.5 * axis_unnormalized

    # (R + R^T) / 2 - cos(theta) I = (1 - cos(theta)) a a^T
    S = 0.5 * (R + R.T) - cos_theta * np.eye(3)
    k = int(np.argmax(np.diag(S)))
    axis = S[:, k] / np.linalg.norm(S[:, k])
    if axis @ axis_unnormalized < 0:
        axis = -axis

    return theta * axis

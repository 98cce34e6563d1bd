"""Reprojection residual functors, one per camera model.

Every functor is called as ``functor(intrinsics, extrinsics, point, residuals)``
and writes ``predicted - observed`` pixel coordinates into ``residuals``.
The body is written only with arithmetic operators and the generic rotation
primitive, so it runs unchanged on floats and on dual numbers.

Parameter blocks:
  - intrinsics: 3, 4, 6 or 9 values depending on the camera model
  - extrinsics: 6 values [rX, rY, rZ, tx, ty, tz], rotation as angle axis
  - point: 3 values, world coordinates

Depth is not checked. A point on the camera plane yields inf/nan residuals
for any block type, plain Python floats included: the perspective division
runs in numpy float64 arithmetic.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple, Type, Union

import numpy as np

from ..math.rotation import angle_axis_rotate_point
from ..models.camera import CameraModel, Observation

logger = logging.getLogger(__name__)


def _apply_pose(extrinsics: Sequence, point: Sequence) -> list:
    """Rotate then translate a world point into camera space."""
    pos_proj = angle_axis_rotate_point(extrinsics[0:3], point)
    return [
        pos_proj[0] + extrinsics[3],
        pos_proj[1] + extrinsics[4],
        pos_proj[2] + extrinsics[5],
    ]


def _perspective_divide(pos_proj: Sequence) -> tuple:
    """Homogeneous to euclidean (undistorted point)."""
    inverse_depth = np.float64(1.0) / pos_proj[2]
    return pos_proj[0] * inverse_depth, pos_proj[1] * inverse_depth


class ReprojectionResidual(ABC):
    """Base class for reprojection residual functors."""

    NUM_RESIDUALS = 2
    PARAMETER_BLOCK_SIZES: Tuple[int, ...] = ()
    CAMERA_MODEL: CameraModel

    OFFSET_FOCAL_LENGTH = 0
    OFFSET_PRINCIPAL_POINT_X = 1
    OFFSET_PRINCIPAL_POINT_Y = 2

    __slots__ = ("_observation",)

    def __init__(self, observation: Union[Observation, Sequence[float]]):
        """Initialize residual functor.

        Args:
            observation: Observed pixel (x, y)
        """
        if isinstance(observation, Observation):
            observation = observation.as_tuple()
        if len(observation) != 2:
            raise ValueError(f"Observation must have 2 coordinates, got {len(observation)}")
        self._observation = (float(observation[0]), float(observation[1]))

    @property
    def observation(self) -> Tuple[float, float]:
        return self._observation

    @abstractmethod
    def __call__(self, intrinsics, extrinsics, point, residuals) -> bool:
        """Write predicted minus observed pixel coordinates into residuals."""
        pass

    def _write_residuals(self, intrinsics, x, y, residuals) -> bool:
        """Apply focal length and principal point, then subtract the observation."""
        focal = intrinsics[self.OFFSET_FOCAL_LENGTH]
        principal_point_x = intrinsics[self.OFFSET_PRINCIPAL_POINT_X]
        principal_point_y = intrinsics[self.OFFSET_PRINCIPAL_POINT_Y]

        projected_x = principal_point_x + focal * x
        projected_y = principal_point_y + focal * y

        residuals[0] = projected_x - self._observation[0]
        residuals[1] = projected_y - self._observation[1]
        return True

    @classmethod
    def predict(cls, intrinsics, extrinsics, point) -> tuple:
        """Predicted pixel position for the given parameter blocks."""
        residuals = [0.0, 0.0]
        cls((0.0, 0.0))(intrinsics, extrinsics, point, residuals)
        return residuals[0], residuals[1]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(observation={self._observation!r})"


class PinholeResidual(ReprojectionResidual):
    """Pinhole camera, intrinsics [focal, ppx, ppy]."""

    PARAMETER_BLOCK_SIZES = (3, 6, 3)
    CAMERA_MODEL = CameraModel.PINHOLE

    __slots__ = ()

    def __call__(self, intrinsics, extrinsics, point, residuals) -> bool:
        pos_proj = _apply_pose(extrinsics, point)

        x_u, y_u = _perspective_divide(pos_proj)

        return self._write_residuals(intrinsics, x_u, y_u, residuals)


class PinholeRadialK1Residual(ReprojectionResidual):
    """Pinhole camera with one radial distortion term, intrinsics [focal, ppx, ppy, k1]."""

    PARAMETER_BLOCK_SIZES = (4, 6, 3)
    CAMERA_MODEL = CameraModel.PINHOLE_RADIAL_K1

    OFFSET_DISTO_K1 = 3

    __slots__ = ()

    def __call__(self, intrinsics, extrinsics, point, residuals) -> bool:
        pos_proj = _apply_pose(extrinsics, point)

        x_u, y_u = _perspective_divide(pos_proj)

        k1 = intrinsics[self.OFFSET_DISTO_K1]

        r2 = x_u * x_u + y_u * y_u
        r_coeff = 1.0 + k1 * r2
        x_d = x_u * r_coeff
        y_d = y_u * r_coeff

        return self._write_residuals(intrinsics, x_d, y_d, residuals)


class PinholeRadialK3Residual(ReprojectionResidual):
    """Pinhole camera with three radial terms, intrinsics [focal, ppx, ppy, k1, k2, k3]."""

    PARAMETER_BLOCK_SIZES = (6, 6, 3)
    CAMERA_MODEL = CameraModel.PINHOLE_RADIAL_K3

    OFFSET_DISTO_K1 = 3
    OFFSET_DISTO_K2 = 4
    OFFSET_DISTO_K3 = 5

    __slots__ = ()

    def __call__(self, intrinsics, extrinsics, point, residuals) -> bool:
        pos_proj = _apply_pose(extrinsics, point)

        x_u, y_u = _perspective_divide(pos_proj)

        k1 = intrinsics[self.OFFSET_DISTO_K1]
        k2 = intrinsics[self.OFFSET_DISTO_K2]
        k3 = intrinsics[self.OFFSET_DISTO_K3]

        r2 = x_u * x_u + y_u * y_u
        r4 = r2 * r2
        r6 = r4 * r2
        r_coeff = 1.0 + k1 * r2 + k2 * r4 + k3 * r6
        x_d = x_u * r_coeff
        y_d = y_u * r_coeff

        return self._write_residuals(intrinsics, x_d, y_d, residuals)


class PinholeRigResidual(ReprojectionResidual):
    """Pinhole camera at a fixed sub-pose on a moving rig.

    Intrinsics are [focal, ppx, ppy, subpose rotation(3), subpose translation(3)];
    extrinsics hold the rig pose (R, t). The camera-space point is

        R_s R X + t_s + R t_s + t
    """

    PARAMETER_BLOCK_SIZES = (9, 6, 3)
    CAMERA_MODEL = CameraModel.PINHOLE_RIG

    OFFSET_SUBPOSE_ROTATION = 3
    OFFSET_SUBPOSE_TRANSLATION = 6

    __slots__ = ()

    def __call__(self, intrinsics, extrinsics, point, residuals) -> bool:
        subpose_rotation = intrinsics[self.OFFSET_SUBPOSE_ROTATION:self.OFFSET_SUBPOSE_ROTATION + 3]
        subpose_translation = intrinsics[self.OFFSET_SUBPOSE_TRANSLATION:self.OFFSET_SUBPOSE_TRANSLATION + 3]

        # R_s R X
        pos_rig = angle_axis_rotate_point(extrinsics[0:3], point)
        pos_proj = angle_axis_rotate_point(subpose_rotation, pos_rig)
        # R t_s
        rig_trans = angle_axis_rotate_point(extrinsics[0:3], subpose_translation)

        pos_proj = [
            pos_proj[0] + subpose_translation[0] + rig_trans[0] + extrinsics[3],
            pos_proj[1] + subpose_translation[1] + rig_trans[1] + extrinsics[4],
            pos_proj[2] + subpose_translation[2] + rig_trans[2] + extrinsics[5],
        ]

        x_u, y_u = _perspective_divide(pos_proj)

        return self._write_residuals(intrinsics, x_u, y_u, residuals)


class ResidualRegistry:
    """Registry mapping camera models to residual functor types."""

    _residual_types: Dict[CameraModel, Type[ReprojectionResidual]] = {
        CameraModel.PINHOLE: PinholeResidual,
        CameraModel.PINHOLE_RADIAL_K1: PinholeRadialK1Residual,
        CameraModel.PINHOLE_RADIAL_K3: PinholeRadialK3Residual,
        CameraModel.PINHOLE_RIG: PinholeRigResidual,
    }

    @classmethod
    def get_residual_class(cls, camera_model: Union[CameraModel, str]) -> Type[ReprojectionResidual]:
        """Get residual class for a camera model or its string value."""
        try:
            camera_model = CameraModel(camera_model)
        except ValueError:
            raise ValueError(f"Unknown camera model: {camera_model}") from None
        return cls._residual_types[camera_model]

    @classmethod
    def list_camera_models(cls) -> List[CameraModel]:
        """List all camera models with a residual functor."""
        return list(cls._residual_types.keys())

    @classmethod
    def parameter_block_sizes(cls, camera_model: Union[CameraModel, str]) -> Tuple[int, ...]:
        """Sizes of the (intrinsics, extrinsics, point) blocks for a camera model."""
        return cls.get_residual_class(camera_model).PARAMETER_BLOCK_SIZES

    @classmethod
    def create_residual(
        cls,
        camera_model: Union[CameraModel, str],
        observation: Union[Observation, Sequence[float]]
    ) -> ReprojectionResidual:
        """Create residual functor for a camera model."""
        residual_class = cls.get_residual_class(camera_model)
        residual = residual_class(observation)
        logger.debug(f"Created {residual!r} for camera model {residual_class.CAMERA_MODEL.value}")
        return residual

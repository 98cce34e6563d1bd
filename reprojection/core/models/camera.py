"""Camera models, observations and parameter-block descriptors."""

from enum import Enum
from typing import ClassVar, List, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from ..math.rotation import angle_axis_to_rotation_matrix, rotation_matrix_to_angle_axis


class CameraModel(str, Enum):
    """Camera models with a matching residual functor."""
    PINHOLE = "pinhole"
    PINHOLE_RADIAL_K1 = "pinhole_radial_k1"
    PINHOLE_RADIAL_K3 = "pinhole_radial_k3"
    PINHOLE_RIG = "pinhole_rig"


def _as_block(block: Sequence[float], size: int, name: str) -> np.ndarray:
    block = np.asarray(block, dtype=float).ravel()
    if block.shape != (size,):
        raise ValueError(f"{name} block must have {size} elements, got {block.shape[0]}")
    return block


class Observation(BaseModel):
    """Observed image point in pixels."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(allow_inf_nan=False, description="Pixel x coordinate")
    y: float = Field(allow_inf_nan=False, description="Pixel y coordinate")

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class Pose(BaseModel):
    """Rigid world-to-camera transform, X_cam = R(rotation) X + translation."""

    rotation: List[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        description="Axis-angle rotation [rx, ry, rz] in radians",
        min_length=3,
        max_length=3
    )
    translation: List[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        description="Translation [tx, ty, tz]",
        min_length=3,
        max_length=3
    )

    BLOCK_SIZE: ClassVar[int] = 6

    def to_block(self) -> np.ndarray:
        """Pack as the extrinsics parameter block [r(3), t(3)]."""
        return np.array(self.rotation + self.translation, dtype=float)

    @classmethod
    def from_block(cls, block: Sequence[float]) -> "Pose":
        block = _as_block(block, cls.BLOCK_SIZE, "Extrinsics")
        return cls(rotation=block[:3].tolist(), translation=block[3:].tolist())

    def rotation_matrix(self) -> np.ndarray:
        return angle_axis_to_rotation_matrix(np.array(self.rotation))

    def transform_point(self, X: np.ndarray) -> np.ndarray:
        """Map world points (3 or Nx3) into camera space."""
        X = np.atleast_2d(X)
        X_cam = (self.rotation_matrix() @ X.T).T + np.array(self.translation)
        return X_cam


class PinholeIntrinsics(BaseModel):
    """Focal length and principal point, block [focal, ppx, ppy]."""

    focal: float = Field(gt=0, description="Focal length in pixels")
    ppx: float = Field(description="Principal point x in pixels")
    ppy: float = Field(description="Principal point y in pixels")

    camera_model: ClassVar[CameraModel] = CameraModel.PINHOLE
    block_fields: ClassVar[Tuple[str, ...]] = ("focal", "ppx", "ppy")

    @classmethod
    def block_size(cls) -> int:
        return len(cls.block_fields)

    def to_block(self) -> np.ndarray:
        """Pack as the intrinsics parameter block for this camera model."""
        return np.array([getattr(self, name) for name in self.block_fields], dtype=float)

    @classmethod
    def from_block(cls, block: Sequence[float]):
        block = _as_block(block, cls.block_size(), "Intrinsics")
        return cls(**dict(zip(cls.block_fields, block.tolist())))


class RadialK1Intrinsics(PinholeIntrinsics):
    """Pinhole with one radial term, block [focal, ppx, ppy, k1]."""

    k1: float = Field(default=0.0, description="Radial distortion r^2 coefficient")

    camera_model: ClassVar[CameraModel] = CameraModel.PINHOLE_RADIAL_K1
    block_fields: ClassVar[Tuple[str, ...]] = ("focal", "ppx", "ppy", "k1")


class RadialK3Intrinsics(RadialK1Intrinsics):
    """Pinhole with three radial terms, block [focal, ppx, ppy, k1, k2, k3]."""

    k2: float = Field(default=0.0, description="Radial distortion r^4 coefficient")
    k3: float = Field(default=0.0, description="Radial distortion r^6 coefficient")

    camera_model: ClassVar[CameraModel] = CameraModel.PINHOLE_RADIAL_K3
    block_fields: ClassVar[Tuple[str, ...]] = ("focal", "ppx", "ppy", "k1", "k2", "k3")


class RigIntrinsics(PinholeIntrinsics):
    """Pinhole camera mounted on a rig at a calibrated sub-pose.

    Block layout is [focal, ppx, ppy, subpose rotation(3), subpose translation(3)].
    """

    subpose: Pose = Field(
        default_factory=Pose,
        description="Fixed offset of the camera relative to the rig"
    )

    camera_model: ClassVar[CameraModel] = CameraModel.PINHOLE_RIG

    @classmethod
    def block_size(cls) -> int:
        return len(cls.block_fields) + Pose.BLOCK_SIZE

    def to_block(self) -> np.ndarray:
        return np.concatenate([super().to_block(), self.subpose.to_block()])

    @classmethod
    def from_block(cls, block: Sequence[float]) -> "RigIntrinsics":
        block = _as_block(block, cls.block_size(), "Intrinsics")
        return cls(
            focal=block[0],
            ppx=block[1],
            ppy=block[2],
            subpose=Pose.from_block(block[3:])
        )

    def camera_pose(self, platform: Pose) -> Pose:
        """Single pose equivalent to the rig pose followed by the sub-pose.

        Matches the rig residual: X_cam = R_s R X + t_s + R t_s + t.
        """
        R = platform.rotation_matrix()
        R_s = self.subpose.rotation_matrix()
        t_s = np.array(self.subpose.translation)

        R_cam = R_s @ R
        t_cam = t_s + R @ t_s + np.array(platform.translation)

        return Pose(
            rotation=rotation_matrix_to_angle_axis(R_cam).tolist(),
            translation=t_cam.tolist()
        )

"""Drive scipy least squares with autodiff reprojection Jacobians."""

import numpy as np
import pytest
from scipy.optimize import least_squares

from reprojection.core.models.camera import (
    CameraModel,
    Pose,
    RadialK3Intrinsics,
    RigIntrinsics,
)
from reprojection.core.optimization.cost_function import AutoDiffCostFunction
from reprojection.core.optimization.residuals import ResidualRegistry


def make_points(rng, n):
    """Random points in a slab in front of the cameras."""
    return np.column_stack([
        rng.uniform(-1.0, 1.0, n),
        rng.uniform(-1.0, 1.0, n),
        rng.uniform(4.0, 6.0, n),
    ])


def make_cost_functions(camera_model, intrinsics, extrinsics, points):
    """One cost function per point, observing its exact projection."""
    functor_cls = ResidualRegistry.get_residual_class(camera_model)
    costs = []
    for X in points:
        observation = functor_cls.predict(intrinsics, extrinsics, X)
        costs.append(AutoDiffCostFunction(ResidualRegistry.create_residual(camera_model, observation)))
    return costs


class TestPoseRefinement:
    """Recover a rig pose from exact observations."""

    def setup_method(self):
        """Set up a rig camera with a known sub-pose."""
        rng = np.random.default_rng(7)
        self.points = make_points(rng, 25)
        self.intrinsics = RigIntrinsics(
            focal=800.0, ppx=320.0, ppy=240.0,
            subpose=Pose(rotation=[0.0, 0.05, 0.0], translation=[0.1, 0.0, 0.0])
        ).to_block()
        self.true_pose = np.array([0.05, -0.1, 0.02, 0.1, -0.2, 0.3])
        self.costs = make_cost_functions(
            CameraModel.PINHOLE_RIG, self.intrinsics, self.true_pose, self.points
        )

    def _fun(self, x):
        return np.concatenate([
            cost.evaluate([self.intrinsics, x, X], compute_jacobians=False)[0]
            for cost, X in zip(self.costs, self.points)
        ])

    def _jac(self, x):
        return np.vstack([
            cost.evaluate([self.intrinsics, x, X])[1][1]
            for cost, X in zip(self.costs, self.points)
        ])

    def test_zero_cost_at_truth(self):
        """Test that the true pose has zero residuals."""
        np.testing.assert_allclose(self._fun(self.true_pose), 0.0, atol=1e-9)

    def test_converges_to_true_pose(self):
        """Test Levenberg-Marquardt convergence with autodiff Jacobians."""
        x0 = self.true_pose + np.array([0.03, -0.02, 0.04, 0.05, 0.05, -0.1])

        result = least_squares(self._fun, x0, jac=self._jac, method="lm", xtol=1e-12, ftol=1e-12)

        assert result.success
        np.testing.assert_allclose(result.x, self.true_pose, atol=1e-7)
        assert 0.5 * np.sum(result.fun**2) < 1e-12


class TestIntrinsicsRefinement:
    """Recover focal length and distortion with a known pose."""

    def setup_method(self):
        """Set up a Radial-K3 camera."""
        rng = np.random.default_rng(11)
        self.points = make_points(rng, 40)
        self.pose = np.array([0.02, 0.03, -0.01, 0.0, 0.1, 0.5])
        self.true_intrinsics = RadialK3Intrinsics(
            focal=800.0, ppx=320.0, ppy=240.0, k1=-0.2, k2=0.05, k3=0.0
        ).to_block()
        self.costs = make_cost_functions(
            CameraModel.PINHOLE_RADIAL_K3, self.true_intrinsics, self.pose, self.points
        )

    def _fun(self, x):
        return np.concatenate([
            cost.evaluate([x, self.pose, X], compute_jacobians=False)[0]
            for cost, X in zip(self.costs, self.points)
        ])

    def _jac(self, x):
        return np.vstack([
            cost.evaluate([x, self.pose, X])[1][0]
            for cost, X in zip(self.costs, self.points)
        ])

    def test_converges(self):
        """Test that residuals vanish from a perturbed start."""
        x0 = self.true_intrinsics.copy()
        x0[0] *= 1.02
        x0[1] += 3.0
        x0[3:] = 0.0

        result = least_squares(self._fun, x0, jac=self._jac, method="lm", xtol=1e-14, ftol=1e-14)

        assert result.success
        assert 0.5 * np.sum(result.fun**2) < 1e-6
        assert result.x[0] == pytest.approx(800.0, rel=1e-4)
        assert result.x[1] == pytest.approx(320.0, abs=1e-2)

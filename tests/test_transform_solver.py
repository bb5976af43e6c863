import numpy as np

from alignment.transform_solver import TransformSolver
from registration_types import TransformMode


def test_compute_centroid():
    points = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 4.0, 6.0]])
    np.testing.assert_allclose(TransformSolver.compute_centroid(points), [2.0 / 3.0, 4.0 / 3.0, 2.0])


def test_cross_covariance_is_sum_of_outer_products():
    a = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0], [-1.0, -2.0, 0.0]])
    b = np.array([[0.0, 1.0, 0.0], [3.0, 0.0, 1.0], [-3.0, -1.0, -1.0]])
    expected = sum(np.outer(a[i], b[i]) for i in range(3))
    np.testing.assert_allclose(TransformSolver.compute_cross_covariance(a, b), expected)


def test_solve_recovers_rigid_motion(landmarks, rotation, translation):
    target = landmarks @ rotation.T + translation

    scale, solved_rotation, solved_translation = TransformSolver().solve(landmarks, target, TransformMode.RIGID_BODY)

    assert scale == 1.0
    np.testing.assert_allclose(solved_rotation, rotation, atol=1e-9)
    np.testing.assert_allclose(solved_translation, translation, atol=1e-7)


def test_solve_corrects_reflection(landmarks):
    mirrored = landmarks * np.array([-1.0, 1.0, 1.0])

    _, solved_rotation, _ = TransformSolver().solve(landmarks, mirrored, TransformMode.RIGID_BODY)

    assert np.isclose(np.linalg.det(solved_rotation), 1.0)
    np.testing.assert_allclose(solved_rotation.T @ solved_rotation, np.identity(3), atol=1e-12)


def test_solve_keeps_unit_scale_when_from_points_coincide():
    source = np.tile([1.0, 2.0, 3.0], (4, 1))
    target = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])

    scale, solved_rotation, solved_translation = TransformSolver().solve(source, target, TransformMode.SIMILARITY)

    assert scale == 1.0
    assert np.isclose(np.linalg.det(solved_rotation), 1.0)
    # The single source location maps onto the target centroid
    np.testing.assert_allclose(solved_rotation @ source[0] + solved_translation, target.mean(axis=0), atol=1e-12)


def test_solve_does_not_modify_inputs(landmarks, rotation, translation):
    target = landmarks @ rotation.T + translation
    source_before, target_before = landmarks.copy(), target.copy()

    TransformSolver().solve(landmarks, target, TransformMode.SIMILARITY)

    np.testing.assert_array_equal(landmarks, source_before)
    np.testing.assert_array_equal(target, target_before)

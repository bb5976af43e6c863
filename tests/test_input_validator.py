import numpy as np
import pytest

from fiducials.fiducial_list import FiducialList
from fiducials.linear_transform import LinearTransform
from registration_types import AlignmentStatus
from validation.input_validator import InputValidator


def make_list(count, name="L"):
    fiducial_list = FiducialList(name, name)
    for i in range(count):
        fiducial_list.add_fiducial([i, i * i, 1.0])
    return fiducial_list


def test_point_sets_valid():
    points = np.zeros((4, 3))
    assert InputValidator.validate_point_sets(points, points) is AlignmentStatus.SUCCESS


def test_too_few_points_wins_over_count_mismatch():
    assert InputValidator.validate_point_sets(np.zeros((2, 3)), np.zeros((7, 3))) is AlignmentStatus.INSUFFICIENT_POINTS


def test_registration_missing_list_before_missing_output():
    assert InputValidator.validate_registration_inputs(None, make_list(3), None) is AlignmentStatus.MISSING_INPUT
    assert InputValidator.validate_registration_inputs(make_list(3), None, None) is AlignmentStatus.MISSING_INPUT


def test_registration_missing_output_before_point_counts():
    status = InputValidator.validate_registration_inputs(make_list(1), make_list(5), None)
    assert status is AlignmentStatus.MISSING_OUTPUT
    assert status.message == "Output transform is not defined."


def test_registration_empty_lists_are_too_short():
    output = LinearTransform("t", "Output")
    status = InputValidator.validate_registration_inputs(make_list(0), make_list(0), output)
    assert status is AlignmentStatus.INSUFFICIENT_POINTS


def test_registration_count_checks():
    output = LinearTransform("t", "Output")
    assert InputValidator.validate_registration_inputs(make_list(3), make_list(4), output) is AlignmentStatus.MISMATCHED_COUNTS
    assert InputValidator.validate_registration_inputs(make_list(4), make_list(4), output) is AlignmentStatus.SUCCESS


def test_pose_matrix_is_copied():
    pose = np.identity(4)
    validated = InputValidator.validate_pose_matrix(pose)
    validated[0, 0] = 5.0
    assert pose[0, 0] == 1.0


@pytest.mark.parametrize("matrix", [np.identity(3), [[1, 2, 3, 4]], np.full((4, 4), np.nan)])
def test_pose_matrix_rejects_bad_input(matrix):
    with pytest.raises(ValueError):
        InputValidator.validate_pose_matrix(matrix)

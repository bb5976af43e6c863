from typing import Optional, Sized

import numpy as np

from registration_types import AlignmentStatus
from config import MIN_FIDUCIALS
from logger.backend_logger import backend_logger


class InputValidator:
    """
    Checks registration inputs before any computation happens.
    Problems with the inputs are reported as an AlignmentStatus, never raised.
    """

    @staticmethod
    def validate_point_sets(from_points: Optional[Sized], to_points: Optional[Sized]) -> AlignmentStatus:
        """
        Validates a pair of corresponding point sets.

        Checks are applied in a fixed order and the first failure wins:
        missing/empty input, then too few points in either set, then unequal counts.

        Args:
            from_points: Ordered "from" points (anything with a length), or None.
            to_points: Ordered "to" points, or None.

        Returns:
            AlignmentStatus: SUCCESS when alignment can proceed.
        """
        if from_points is None or to_points is None or len(from_points) == 0 or len(to_points) == 0:
            backend_logger.warning("Alignment requested with a missing or empty point set.")
            return AlignmentStatus.MISSING_INPUT

        from_count = len(from_points)
        to_count = len(to_points)

        if from_count < MIN_FIDUCIALS or to_count < MIN_FIDUCIALS:
            backend_logger.warning(f"Not enough landmarks to align (from={from_count}, to={to_count}). Minimum required: {MIN_FIDUCIALS}.")
            return AlignmentStatus.INSUFFICIENT_POINTS

        if from_count != to_count:
            backend_logger.warning(f"Landmark count mismatch: from={from_count}, to={to_count}.")
            return AlignmentStatus.MISMATCHED_COUNTS

        return AlignmentStatus.SUCCESS

    @staticmethod
    def validate_registration_inputs(from_list, to_list, output_transform) -> AlignmentStatus:
        """
        Validates fiducial lists and the output transform for a registration request.

        Missing lists are reported before a missing output transform, and both
        before any check on the number of fiducials.
        """
        if from_list is None or to_list is None:
            backend_logger.warning("Registration requested with an undefined fiducial list.")
            return AlignmentStatus.MISSING_INPUT

        if output_transform is None:
            backend_logger.warning("Registration requested without an output transform.")
            return AlignmentStatus.MISSING_OUTPUT

        from_count = from_list.number_of_fiducials
        to_count = to_list.number_of_fiducials

        if from_count < MIN_FIDUCIALS or to_count < MIN_FIDUCIALS:
            backend_logger.warning(f"Fiducial lists too short for registration (from={from_count}, to={to_count}).")
            return AlignmentStatus.INSUFFICIENT_POINTS

        if from_count != to_count:
            backend_logger.warning(f"Fiducial lists differ in length: from={from_count}, to={to_count}.")
            return AlignmentStatus.MISMATCHED_COUNTS

        return AlignmentStatus.SUCCESS

    @staticmethod
    def validate_pose_matrix(matrix) -> np.ndarray:
        """
        Converts a pose to a fresh 4x4 float64 matrix.

        Raises:
            ValueError: If the value is not a finite 4x4 matrix.
        """
        array = np.array(matrix, dtype=np.float64, copy=True)
        if array.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {array.shape}.")
        if not np.all(np.isfinite(array)):
            raise ValueError("Matrix elements must be finite numbers.")
        return array

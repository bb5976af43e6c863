from typing import Optional, Sequence, Union

import numpy as np

from registration_types import AlignmentResult, AlignmentStatus, TransformMode
from alignment.transform_solver import TransformSolver
from logger.backend_logger import backend_logger
from utils import TransformUtils
from validation.input_validator import InputValidator

PointSet = Union[np.ndarray, Sequence[Sequence[float]]]


class LandmarkAligner:
    """
    Computes the best-fit rigid or similarity transform mapping one ordered set
    of landmarks onto another:
    1. Precondition checks (missing input, too few points, unequal counts).
    2. Conversion of both point sets into private working arrays.
    3. Least-squares solve through TransformSolver.
    4. Assembly of the 4x4 homogeneous matrix and its residual error.

    The aligner holds no per-call state, so one instance may be shared freely.
    """

    def __init__(self):
        self.transform_solver = TransformSolver()

    def align(
        self,
        from_points: Optional[PointSet],
        to_points: Optional[PointSet],
        mode: Union[TransformMode, str, None] = TransformMode.RIGID_BODY
    ) -> AlignmentResult:
        """
        Aligns from_points onto to_points.

        Args:
            from_points: Ordered source landmarks, shape (N, 3).
            to_points: Ordered target landmarks, index-matched to from_points.
            mode: TransformMode or its name. Unrecognized names mean rigid body.

        Returns:
            AlignmentResult: On success holds the matrix with p' = s * R * p + t.
                             On failure holds only the status.

        Raises:
            ValueError: If a non-empty point set is not made of finite 3D coordinates,
                or a coordinate exceeds MAX_COORDINATE_MAGNITUDE (config) in magnitude.
        """
        transform_mode = TransformMode.from_string(mode)

        status = InputValidator.validate_point_sets(from_points, to_points)
        if status is not AlignmentStatus.SUCCESS:
            return AlignmentResult(status=status, mode=transform_mode)

        source = TransformUtils.as_point_array(from_points)
        target = TransformUtils.as_point_array(to_points)

        scale, rotation, translation = self.transform_solver.solve(source, target, transform_mode)
        matrix = TransformUtils.compose_matrix(scale, rotation, translation)
        rms_error = TransformUtils.root_mean_square_error(matrix, source, target)

        backend_logger.info(f"Landmark alignment succeeded with RMS error {rms_error:.6f} "
                            f"and rotation of {TransformUtils.rotation_angle_degrees(rotation):.3f} degrees.")

        return AlignmentResult(
            status=AlignmentStatus.SUCCESS,
            mode=transform_mode,
            matrix=matrix,
            scale=scale,
            rotation=rotation,
            translation=translation,
            rms_error=rms_error,
        )

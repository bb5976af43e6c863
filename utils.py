import numpy as np
import cv2
from config import MAX_COORDINATE_MAGNITUDE


class TransformUtils:
    """
    A collection of static utility methods for working with 3D point sets
    and 4x4 homogeneous transformation matrices.
    """

    @staticmethod
    def as_point_array(points) -> np.ndarray:
        """
        Converts a sequence of 3D points into a fresh (N, 3) float64 array.
        The result never shares memory with the input.

        Args:
            points: Any sequence of 3-element coordinate sequences, or an (N, 3) array.

        Returns:
            np.ndarray: A new (N, 3) float64 array.

        Raises:
            ValueError: If the input cannot be read as finite (N, 3) coordinates,
                or a coordinate exceeds MAX_COORDINATE_MAGNITUDE in absolute value.
        """
        array = np.array(points, dtype=np.float64, copy=True)
        if array.size == 0:
            return array.reshape(0, 3)
        if array.ndim != 2 or array.shape[1] != 3:
            raise ValueError(f"Expected points with shape (N, 3), got {array.shape}.")
        if not np.all(np.isfinite(array)):
            raise ValueError("Point coordinates must be finite numbers.")
        if np.max(np.abs(array)) > MAX_COORDINATE_MAGNITUDE:
            raise ValueError(f"Point coordinates must not exceed {MAX_COORDINATE_MAGNITUDE:g} in magnitude.")
        return array

    @staticmethod
    def compose_matrix(scale: float, rotation: np.ndarray, translation: np.ndarray) -> np.ndarray:
        """
        Builds the 4x4 homogeneous matrix for p' = s * R * p + t.

        Args:
            scale (float): Uniform scale factor.
            rotation (np.ndarray): 3x3 rotation matrix.
            translation (np.ndarray): Translation vector of length 3.

        Returns:
            np.ndarray: A new 4x4 float64 matrix.
        """
        matrix = np.identity(4)
        matrix[:3, :3] = scale * np.asarray(rotation, dtype=np.float64)
        matrix[:3, 3] = np.asarray(translation, dtype=np.float64).reshape(3)
        return matrix

    @staticmethod
    def apply_transform(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
        """
        Applies a 4x4 homogeneous transform to an (N, 3) point array.

        Returns:
            np.ndarray: The transformed (N, 3) points.
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        matrix = np.asarray(matrix, dtype=np.float64)
        return points @ matrix[:3, :3].T + matrix[:3, 3]

    @staticmethod
    def root_mean_square_error(matrix: np.ndarray, from_points: np.ndarray, to_points: np.ndarray) -> float:
        """
        Root-mean-square distance between the transformed "from" points and the "to" points
        (the fiducial registration error of the fit).
        """
        residuals = TransformUtils.apply_transform(matrix, from_points) - np.asarray(to_points, dtype=np.float64)
        return float(np.sqrt(np.mean(np.sum(residuals ** 2, axis=1))))

    @staticmethod
    def is_proper_rotation(rotation: np.ndarray, atol: float = 1e-9) -> bool:
        """True when the 3x3 block is orthonormal with determinant +1."""
        rotation = np.asarray(rotation, dtype=np.float64)
        orthonormal = np.allclose(rotation.T @ rotation, np.identity(3), atol=atol)
        return bool(orthonormal and np.isclose(np.linalg.det(rotation), 1.0, atol=atol))

    @staticmethod
    def rotation_angle_degrees(rotation: np.ndarray) -> float:
        """
        Magnitude of the rotation in degrees, taken from its axis-angle
        (Rodrigues) representation.
        """
        rotation_vector, _ = cv2.Rodrigues(np.asarray(rotation, dtype=np.float64))
        return float(np.degrees(np.linalg.norm(rotation_vector)))

import numpy as np
from typing import Tuple

from registration_types import TransformMode
from config import DEGENERATE_SPREAD_EPSILON
from logger.backend_logger import backend_logger


class TransformSolver:
    """
    Estimates the least-squares rigid or similarity transform between two
    corresponding 3D point sets (the absolute orientation problem), using the
    SVD of the cross-covariance matrix of the centered point sets.
    """

    @staticmethod
    def compute_centroid(points: np.ndarray) -> np.ndarray:
        """Mean of an (N, 3) point array."""
        return points.mean(axis=0)

    @staticmethod
    def compute_cross_covariance(from_centered: np.ndarray, to_centered: np.ndarray) -> np.ndarray:
        """
        Sum of outer products from_i (x) to_i over all correspondences.

        Args:
            from_centered (np.ndarray): (N, 3) "from" points with their centroid removed.
            to_centered (np.ndarray): (N, 3) "to" points with their centroid removed.

        Returns:
            np.ndarray: The 3x3 cross-covariance matrix H.
        """
        return from_centered.T @ to_centered

    def solve(
        self,
        from_points: np.ndarray,  # (N, 3), N >= 3
        to_points: np.ndarray,    # (N, 3), same N
        mode: TransformMode = TransformMode.RIGID_BODY
    ) -> Tuple[float, np.ndarray, np.ndarray]:
        """
        Finds s, R, t minimising sum ||s * R * from_i + t - to_i||^2.

        Inputs are assumed already validated (matching lengths, at least 3
        points). They are read but never modified.

        Args:
            from_points (np.ndarray): Source landmarks.
            to_points (np.ndarray): Target landmarks, index-matched to from_points.
            mode (TransformMode): SIMILARITY estimates a uniform scale, RIGID_BODY fixes it at 1.

        Returns:
            Tuple[float, np.ndarray, np.ndarray]: scale, 3x3 proper rotation, translation (3,).
        """
        from_centroid = self.compute_centroid(from_points)
        to_centroid = self.compute_centroid(to_points)

        from_centered = from_points - from_centroid
        to_centered = to_points - to_centroid

        H = self.compute_cross_covariance(from_centered, to_centered)
        U, singular_values, Vt = np.linalg.svd(H)
        V = Vt.T

        rotation = V @ U.T

        # Reflection: flip the axis paired with the smallest singular value (numpy sorts descending)
        signs = np.ones(3)
        if np.linalg.det(rotation) < 0:
            backend_logger.debug("Cross-covariance SVD produced a reflection. Correcting to a proper rotation.")
            signs[-1] = -1.0
            V[:, -1] *= -1.0
            rotation = V @ U.T

        scale = 1.0
        if mode is TransformMode.SIMILARITY:
            spread = float(np.sum(from_centered ** 2))
            if spread > DEGENERATE_SPREAD_EPSILON:
                scale = float(np.dot(signs, singular_values)) / spread
            else:
                backend_logger.warning("All 'from' landmarks coincide. Scale cannot be estimated, keeping scale = 1.")

        translation = to_centroid - scale * (rotation @ from_centroid)

        backend_logger.info(f"Solved {mode.value} transform from {from_points.shape[0]} landmark pairs (scale={scale:.6f}).")
        return scale, rotation, translation

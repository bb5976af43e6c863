from typing import Optional

import numpy as np

from fiducials.fiducial_list import Fiducial, FiducialList
from fiducials.linear_transform import LinearTransform
from logger.backend_logger import backend_logger
from validation.input_validator import InputValidator


def tip_position_from_pose(pose) -> np.ndarray:
    """Translation column of a 4x4 pose, i.e. where the probe tip sits."""
    matrix = InputValidator.validate_pose_matrix(pose)
    return matrix[:3, 3].copy()


class ProbeCapture:
    """Records the current tip position of a tracked probe as a new fiducial."""

    @staticmethod
    def capture(probe_transform: Optional[LinearTransform], active_list: Optional[FiducialList]) -> Optional[Fiducial]:
        """
        Appends the probe tip, in world coordinates, to the active list.
        Does nothing and returns None when either the probe or the list is missing.
        """
        if probe_transform is None:
            backend_logger.warning("Probe capture requested without a probe transform.")
            return None
        if active_list is None:
            backend_logger.warning("Probe capture requested but no fiducial list is active.")
            return None

        tip = tip_position_from_pose(probe_transform.matrix_to_world())
        fiducial = active_list.add_fiducial(tip)
        backend_logger.info(f"Captured probe '{probe_transform.name}' tip at {tip.tolist()} into list '{active_list.name}'.")
        return fiducial

import os
import tempfile

# Keep log files out of the source tree; must happen before config is imported
os.environ.setdefault("FIDUCIAL_REGISTRATION_LOGS_DIR", tempfile.mkdtemp(prefix="fiducial_registration_logs_"))

import cv2
import numpy as np
import pytest


def rotation_from_vector(rotation_vector) -> np.ndarray:
    rotation, _ = cv2.Rodrigues(np.asarray(rotation_vector, dtype=np.float64))
    return rotation


@pytest.fixture
def landmarks() -> np.ndarray:
    """Five non-coplanar landmarks, roughly the spread of skull fiducials in mm."""
    return np.array([
        [29.930, 65.059, -692.872],
        [20.588, 38.868, -675.454],
        [18.266, 57.316, -682.061],
        [-12.500, 44.100, -701.300],
        [5.750, 80.420, -660.010],
    ])


@pytest.fixture
def rotation() -> np.ndarray:
    return rotation_from_vector([0.3, -0.5, 0.9])


@pytest.fixture
def translation() -> np.ndarray:
    return np.array([10.0, -5.0, 2.5])

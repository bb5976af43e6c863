import os
from pathlib import Path

# Base paths
BASE_DIR = Path(__file__).parent
LOGS_DIR = Path(os.environ.get("FIDUCIAL_REGISTRATION_LOGS_DIR", BASE_DIR / "logs"))

# Logging level for the backend logger (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("FIDUCIAL_REGISTRATION_LOG_LEVEL", "INFO").upper()

# Server settings used when running main.py directly
HOST = os.environ.get("FIDUCIAL_REGISTRATION_HOST", "0.0.0.0")
PORT = int(os.environ.get("FIDUCIAL_REGISTRATION_PORT", "5500"))

# Registration modes. Any other value falls back to rigid body.
TRANSFORM_MODE_RIGID_BODY = "RigidBody"
TRANSFORM_MODE_SIMILARITY = "Similarity"
DEFAULT_TRANSFORM_MODE = TRANSFORM_MODE_RIGID_BODY

# Rotation is under-determined with fewer than 3 correspondences
MIN_FIDUCIALS = 3

# Limits
MAX_FIDUCIALS_PER_LIST = 1000      # Upper bound on points accepted per fiducial list over the API
MAX_COORDINATE_MAGNITUDE = 1e150   # Squared coordinates and covariance sums must stay finite in float64

# Status strings reported back to callers. Existing callers compare against these literally.
STATUS_SUCCESS = "Success."
STATUS_MISSING_INPUT = "One or more fiducial lists not defined."
STATUS_MISSING_OUTPUT = "Output transform is not defined."
STATUS_INSUFFICIENT_POINTS = "One or more fiducial lists has too few fiducials."
STATUS_MISMATCHED_COUNTS = "Fiducial lists have unequal number of fiducials."

# Squared spread of the "from" points below which the similarity scale is not estimated
DEGENERATE_SPREAD_EPSILON = 1e-12

# Create directories if they don't exist
LOGS_DIR.mkdir(parents=True, exist_ok=True)

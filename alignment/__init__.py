# The 'alignment' package estimates transforms between corresponding landmark sets.

# Import the main aligner class (the entry point used by the rest of the service)
from .landmark_aligner import LandmarkAligner

# Import the least-squares solver it delegates to
from .transform_solver import TransformSolver

from .fiducial_list import Fiducial, FiducialList
from .linear_transform import LinearTransform
from .probe_capture import ProbeCapture, tip_position_from_pose

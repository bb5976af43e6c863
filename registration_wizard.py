from typing import Dict, Optional
from uuid import uuid4

from alignment.landmark_aligner import LandmarkAligner
from config import DEFAULT_TRANSFORM_MODE
from fiducials.fiducial_list import Fiducial, FiducialList
from fiducials.linear_transform import LinearTransform
from fiducials.probe_capture import ProbeCapture
from logger.backend_logger import backend_logger
from logger.frontend_logger import SessionLogBuffer
from registration_types import AlignmentResult, AlignmentStatus, TransformMode
from validation.input_validator import InputValidator


class FiducialRegistrationWizard:
    """
    Per-session registration workspace.
    Owns the fiducial lists and transforms of a session, captures probe
    positions into the active list, and registers one list onto another.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.log_buffer = SessionLogBuffer(session_id)
        self.landmark_aligner = LandmarkAligner()
        self.fiducial_lists: Dict[str, FiducialList] = {}
        self.transforms: Dict[str, LinearTransform] = {}
        self.active_list_id: Optional[str] = None

    # Fiducial lists

    def add_fiducial_list(self, name: str, points=None) -> FiducialList:
        fiducial_list = FiducialList(uuid4().hex, name)
        if points is not None:
            for point in points:
                fiducial_list.add_fiducial(point)
        self.fiducial_lists[fiducial_list.list_id] = fiducial_list
        backend_logger.info(f"Session {self.session_id}: created fiducial list '{name}' ({fiducial_list.list_id}) with {len(fiducial_list)} fiducials.")
        return fiducial_list

    def get_fiducial_list(self, list_id: Optional[str]) -> Optional[FiducialList]:
        if list_id is None:
            return None
        return self.fiducial_lists.get(list_id)

    def set_active_list(self, list_id: Optional[str]) -> Optional[FiducialList]:
        """Makes the given list the target of probe captures. Unknown ids clear the selection."""
        fiducial_list = self.get_fiducial_list(list_id)
        self.active_list_id = fiducial_list.list_id if fiducial_list is not None else None
        return fiducial_list

    @property
    def active_list(self) -> Optional[FiducialList]:
        return self.get_fiducial_list(self.active_list_id)

    # Transforms

    def add_transform(self, name: str, matrix=None, parent_id: Optional[str] = None) -> LinearTransform:
        """
        Raises:
            KeyError: If parent_id does not name a transform in this session.
            ValueError: If matrix is not a finite 4x4 matrix.
        """
        parent = None
        if parent_id is not None:
            parent = self.transforms.get(parent_id)
            if parent is None:
                raise KeyError(f"Parent transform {parent_id} not found.")
        transform = LinearTransform(uuid4().hex, name, matrix, parent)
        self.transforms[transform.transform_id] = transform
        backend_logger.info(f"Session {self.session_id}: created transform '{name}' ({transform.transform_id}).")
        return transform

    def get_transform(self, transform_id: Optional[str]) -> Optional[LinearTransform]:
        if transform_id is None:
            return None
        return self.transforms.get(transform_id)

    def set_transform_matrix(self, transform_id: str, matrix) -> LinearTransform:
        """
        Raises:
            KeyError: If the transform does not exist.
            ValueError: If matrix is not a finite 4x4 matrix.
        """
        transform = self.transforms[transform_id]
        transform.set_matrix_to_parent(matrix)
        return transform

    # Operations

    def add_fiducial(self, probe_transform: Optional[LinearTransform]) -> Optional[Fiducial]:
        """Appends the probe tip position to the active fiducial list."""
        fiducial = ProbeCapture.capture(probe_transform, self.active_list)
        if fiducial is not None:
            self.log_buffer.add_log(f"Added fiducial {fiducial.label} at {[round(c, 3) for c in fiducial.position.tolist()]}.")
        return fiducial

    def calculate_transform(
        self,
        from_list: Optional[FiducialList],
        to_list: Optional[FiducialList],
        output_transform: Optional[LinearTransform],
        transform_type: str = DEFAULT_TRANSFORM_MODE
    ) -> AlignmentResult:
        """
        Registers from_list onto to_list and stores the result in output_transform.

        The output transform is only modified when registration succeeds.
        The returned result's message is the status string for the user.
        """
        mode = TransformMode.from_string(transform_type)
        status = InputValidator.validate_registration_inputs(from_list, to_list, output_transform)
        if status is not AlignmentStatus.SUCCESS:
            self.log_buffer.add_log(status.message, "error")
            return AlignmentResult(status=status, mode=mode)

        result = self.landmark_aligner.align(from_list.to_point_array(), to_list.to_point_array(), mode)
        if not result.succeeded:
            self.log_buffer.add_log(result.message, "error")
            return result

        output_transform.set_matrix_to_parent(result.matrix)
        backend_logger.info(f"Session {self.session_id}: registered '{from_list.name}' onto '{to_list.name}' "
                            f"into transform '{output_transform.name}' ({mode.value}).")
        self.log_buffer.add_log(f"{result.message} {mode.value} registration error (RMS): {result.rms_error:.4f}")
        return result

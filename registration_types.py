from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from config import (
    TRANSFORM_MODE_RIGID_BODY,
    TRANSFORM_MODE_SIMILARITY,
    STATUS_SUCCESS,
    STATUS_MISSING_INPUT,
    STATUS_MISSING_OUTPUT,
    STATUS_INSUFFICIENT_POINTS,
    STATUS_MISMATCHED_COUNTS,
)
from logger.backend_logger import backend_logger


class TransformMode(str, Enum):
    """Selects whether a uniform scale is estimated along with rotation and translation."""

    RIGID_BODY = TRANSFORM_MODE_RIGID_BODY
    SIMILARITY = TRANSFORM_MODE_SIMILARITY

    @classmethod
    def from_string(cls, value: Any) -> "TransformMode":
        """
        Parses a mode name. Only the exact string "Similarity" selects similarity;
        every other value, including None and misspellings, falls back to rigid body.
        """
        if isinstance(value, cls):
            return value
        if value == TRANSFORM_MODE_SIMILARITY:
            return cls.SIMILARITY
        if value is not None and value != TRANSFORM_MODE_RIGID_BODY:
            backend_logger.warning(f"Unrecognized transform type '{value}'. Falling back to {TRANSFORM_MODE_RIGID_BODY}.")
        return cls.RIGID_BODY


class AlignmentStatus(Enum):
    """Outcome of an alignment request, each carrying the status string shown to callers."""

    SUCCESS = STATUS_SUCCESS
    MISSING_INPUT = STATUS_MISSING_INPUT
    MISSING_OUTPUT = STATUS_MISSING_OUTPUT
    INSUFFICIENT_POINTS = STATUS_INSUFFICIENT_POINTS
    MISMATCHED_COUNTS = STATUS_MISMATCHED_COUNTS

    @property
    def message(self) -> str:
        return self.value


@dataclass
class AlignmentResult:
    """Result of a landmark alignment. Geometry fields are only set on success."""

    status: AlignmentStatus
    mode: TransformMode = TransformMode.RIGID_BODY
    matrix: Optional[np.ndarray] = None  # 4x4 homogeneous matrix
    scale: float = 1.0
    rotation: Optional[np.ndarray] = field(default=None, repr=False)
    translation: Optional[np.ndarray] = field(default=None, repr=False)
    rms_error: Optional[float] = None

    @property
    def succeeded(self) -> bool:
        return self.status is AlignmentStatus.SUCCESS

    @property
    def message(self) -> str:
        return self.status.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "success" if self.succeeded else "error",
            "error": None if self.succeeded else self.status.name,
            "message": self.message,
            "transform_type": self.mode.value,
            "matrix": self.matrix.tolist() if self.matrix is not None else None,
            "scale": self.scale if self.succeeded else None,
            "rms_error": self.rms_error,
        }

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from logger.backend_logger import backend_logger


@dataclass
class Fiducial:
    """A labeled landmark position."""
    label: str
    position: np.ndarray = field(repr=False)

    def to_dict(self) -> Dict:
        return {"label": self.label, "position": self.position.tolist()}


class FiducialList:
    """
    An ordered list of fiducials. List order is what establishes
    correspondence with another list during registration.
    """

    def __init__(self, list_id: str, name: str):
        self.list_id = list_id
        self.name = name
        self.fiducials: List[Fiducial] = []
        self._label_counter = 0

    @property
    def number_of_fiducials(self) -> int:
        return len(self.fiducials)

    def __len__(self) -> int:
        return len(self.fiducials)

    def add_fiducial(self, position, label: Optional[str] = None) -> Fiducial:
        """
        Appends a fiducial at the given position.

        Args:
            position: Three coordinates.
            label (Optional[str]): Label for the new fiducial. Defaults to "<list name>-<n>".

        Returns:
            Fiducial: The fiducial that was added.

        Raises:
            ValueError: If position is not three finite numbers.
        """
        coordinates = np.array(position, dtype=np.float64, copy=True).reshape(-1)
        if coordinates.shape != (3,) or not np.all(np.isfinite(coordinates)):
            raise ValueError(f"A fiducial position needs three finite coordinates, got {position!r}.")

        self._label_counter += 1
        if label is None:
            label = f"{self.name}-{self._label_counter}"

        fiducial = Fiducial(label=label, position=coordinates)
        self.fiducials.append(fiducial)
        backend_logger.debug(f"Added fiducial '{label}' to list '{self.name}' at {coordinates.tolist()}.")
        return fiducial

    def remove_fiducial(self, index: int) -> Fiducial:
        """Removes and returns the fiducial at index. Raises IndexError when out of range."""
        return self.fiducials.pop(index)

    def clear(self):
        self.fiducials = []

    def get_nth_fiducial_position(self, index: int) -> np.ndarray:
        return self.fiducials[index].position.copy()

    def to_point_array(self) -> np.ndarray:
        """Positions of all fiducials, in list order, as a new (N, 3) array."""
        if not self.fiducials:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([f.position for f in self.fiducials], dtype=np.float64)

    def to_dict(self) -> Dict:
        return {
            "id": self.list_id,
            "name": self.name,
            "fiducials": [f.to_dict() for f in self.fiducials],
        }

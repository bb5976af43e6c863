from typing import Dict, Optional

import numpy as np

from validation.input_validator import InputValidator


class LinearTransform:
    """
    A 4x4 homogeneous transform expressed relative to an optional parent transform.
    A transform without a parent is relative to world coordinates.
    """

    def __init__(self, transform_id: str, name: str, matrix_to_parent=None, parent: Optional["LinearTransform"] = None):
        self.transform_id = transform_id
        self.name = name
        self.matrix_to_parent = np.identity(4)
        self.parent: Optional["LinearTransform"] = None
        if matrix_to_parent is not None:
            self.set_matrix_to_parent(matrix_to_parent)
        if parent is not None:
            self.set_parent(parent)

    def set_matrix_to_parent(self, matrix):
        """Stores a copy of the given 4x4 matrix."""
        self.matrix_to_parent = InputValidator.validate_pose_matrix(matrix)

    def set_parent(self, parent: Optional["LinearTransform"]):
        """
        Raises:
            ValueError: If the new parent would make the transform its own ancestor.
        """
        ancestor = parent
        while ancestor is not None:
            if ancestor is self:
                raise ValueError(f"Transform '{self.name}' cannot be its own ancestor.")
            ancestor = ancestor.parent
        self.parent = parent

    def matrix_to_world(self) -> np.ndarray:
        """Composes this transform with all of its ancestors."""
        matrix = self.matrix_to_parent.copy()
        ancestor = self.parent
        while ancestor is not None:
            matrix = ancestor.matrix_to_parent @ matrix
            ancestor = ancestor.parent
        return matrix

    def to_dict(self) -> Dict:
        return {
            "id": self.transform_id,
            "name": self.name,
            "parent_id": self.parent.transform_id if self.parent is not None else None,
            "matrix_to_parent": self.matrix_to_parent.tolist(),
            "matrix_to_world": self.matrix_to_world().tolist(),
        }

"""
Voxel Store Module - Placed Blocks
===================================
Holds every block in the structure. Blocks sit on a unit grid and are
stored by their center position; at most one block occupies a cell.
"""

import numpy as np
from typing import Iterator, List, Sequence, Tuple


Position = Tuple[float, float, float]


class VoxelStore:
    """
    Mutable set of placed blocks.

    Two positions closer than DEDUP_TOLERANCE are treated as the same
    cell, which absorbs floating point drift in cursor positions.
    """

    DEDUP_TOLERANCE = 0.1

    def __init__(self, tolerance: float = DEDUP_TOLERANCE):
        self.tolerance = tolerance
        self._voxels: List[Position] = []

    def _occupied(self, position: np.ndarray) -> bool:
        if not self._voxels:
            return False
        distances = np.linalg.norm(np.asarray(self._voxels) - position, axis=1)
        return bool(np.any(distances < self.tolerance))

    def add(self, position: Sequence[float]) -> bool:
        """
        Place a block unless its cell is already taken.

        Args:
            position: Block center (x, y, z)

        Returns:
            True if a block was inserted, False if the cell was occupied
        """
        pos = np.asarray(position, dtype=float)
        if self._occupied(pos):
            return False
        self._voxels.append((float(pos[0]), float(pos[1]), float(pos[2])))
        return True

    def clear_all(self) -> int:
        """Remove every block. Returns how many were removed."""
        removed = len(self._voxels)
        self._voxels = []
        return removed

    def all(self) -> Tuple[Position, ...]:
        """Read-only snapshot of block positions in placement order."""
        return tuple(self._voxels)

    def __contains__(self, position) -> bool:
        return self._occupied(np.asarray(position, dtype=float))

    def __iter__(self) -> Iterator[Position]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._voxels)

"""Spatial hashing for fast neighbour lookups in 3D."""

from __future__ import annotations

import math
from collections import defaultdict

from soft_targeting.core.math3d import Vector3

CellKey = tuple[int, int, int]


class SpatialHash:
    """Uniform grid mapping cell keys to sets of entity handles.

    ``query_radius`` is conservative: it returns every handle in cells the
    sphere touches, so callers still do an exact distance test.
    """

    __slots__ = ("_cell_size", "_cells", "_keys")

    def __init__(self, cell_size: float = 500.0) -> None:
        if cell_size <= 0.0:
            raise ValueError(f"cell_size must be > 0 (got {cell_size!r})")
        self._cell_size = cell_size
        self._cells: dict[CellKey, set[int]] = defaultdict(set)
        self._keys: dict[int, CellKey] = {}

    def _key(self, pos: Vector3) -> CellKey:
        size = self._cell_size
        return math.floor(pos.x / size), math.floor(pos.y / size), math.floor(pos.z / size)

    def insert(self, handle: int, pos: Vector3) -> None:
        key = self._key(pos)
        self._cells[key].add(handle)
        self._keys[handle] = key

    def remove(self, handle: int) -> None:
        key = self._keys.pop(handle, None)
        if key is None:
            return
        bucket = self._cells.get(key)
        if bucket is not None:
            bucket.discard(handle)
            if not bucket:
                del self._cells[key]

    def move(self, handle: int, new_pos: Vector3) -> None:
        new_key = self._key(new_pos)
        if self._keys.get(handle) != new_key:
            self.remove(handle)
            self.insert(handle, new_pos)

    def query_radius(self, pos: Vector3, radius: float) -> list[int]:
        """Return handles in cells overlapping the sphere, sorted by handle."""
        if not self._cells:
            return []
        cx, cy, cz = self._key(pos)
        r = math.ceil(radius / self._cell_size)
        result: set[int] = set()

        # Large sphere over a sparse grid: scan occupied cells instead
        if (2 * r + 1) ** 3 > len(self._cells):
            for (kx, ky, kz), bucket in self._cells.items():
                if abs(kx - cx) <= r and abs(ky - cy) <= r and abs(kz - cz) <= r:
                    result.update(bucket)
            return sorted(result)

        for dx in range(-r, r + 1):
            for dy in range(-r, r + 1):
                for dz in range(-r, r + 1):
                    bucket = self._cells.get((cx + dx, cy + dy, cz + dz))
                    if bucket:
                        result.update(bucket)
        return sorted(result)

    def __len__(self) -> int:
        return len(self._keys)

    def clear(self) -> None:
        self._cells.clear()
        self._keys.clear()

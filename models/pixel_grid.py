from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np
from PIL import Image as PILImage

from models.errors import IndexOutOfRangeError, MalformedGridError
from models.pixel import Pixel


class PixelGrid:
    """
    Row-major 2D grid of Pixels backed by a flat list.

    Cell (row, col) lives at index ``row * width + col``, so every cell has
    its own slot and writers working on distinct coordinates never touch
    the same storage.
    """

    def __init__(self, cells: List[Pixel], width: int, height: int):
        if width < 0 or height < 0:
            raise MalformedGridError(f"Negative grid dimensions: {width}x{height}")
        if (width == 0) != (height == 0):
            raise MalformedGridError(f"Degenerate grid dimensions: {width}x{height}")
        if len(cells) != width * height:
            raise MalformedGridError(
                f"Expected {width * height} pixels for {width}x{height}, got {len(cells)}"
            )
        self._cells = cells
        self._width = width
        self._height = height

    # ─── Construction ──────────────────────────────────────────────
    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Pixel]]) -> PixelGrid:
        """Build from nested rows; every row must have the same, non-zero length."""
        rows = [list(r) for r in rows]
        if not rows:
            return cls([], 0, 0)

        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise MalformedGridError(
                    f"Row {i} has {len(row)} pixels, expected {width}"
                )
        if width == 0:
            raise MalformedGridError("Rows must contain at least one pixel")

        cells = [px for row in rows for px in row]
        return cls(cells, width, len(rows))

    @classmethod
    def from_flat(cls, pixels: Iterable[Pixel], width: int) -> PixelGrid:
        cells = list(pixels)
        if not cells:
            return cls([], 0, 0)
        if width < 1:
            raise MalformedGridError(f"Width must be >= 1, got {width}")
        if len(cells) % width:
            raise MalformedGridError(
                f"{len(cells)} pixels cannot be split into rows of {width}"
            )
        return cls(cells, width, len(cells) // width)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelGrid:
        """
        Args:
            arr: (H, W, 4) RGBA array. Values outside [0, 255] are clipped.
        """
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise MalformedGridError(f"Expected (H, W, 4) RGBA array, got shape {arr.shape}")
        height, width = arr.shape[:2]
        if height == 0 or width == 0:
            return cls([], 0, 0)
        flat = np.clip(arr, 0, 255).astype(np.uint8).reshape(-1, 4).tolist()
        return cls([Pixel(*px) for px in flat], width, height)

    # ─── Access ────────────────────────────────────────────────────
    def _index(self, row: int, col: int) -> int:
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexOutOfRangeError(
                f"({row}, {col}) outside grid of {self._width}x{self._height}"
            )
        return row * self._width + col

    def get(self, row: int, col: int) -> Pixel:
        return self._cells[self._index(row, col)]

    def set(self, row: int, col: int, pixel: Pixel) -> None:
        self._cells[self._index(row, col)] = pixel

    def dimensions(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return self._width, self._height

    def coordinates(self) -> Iterator[Tuple[int, int]]:
        for row in range(self._height):
            for col in range(self._width):
                yield row, col

    def rows(self) -> List[List[Pixel]]:
        w = self._width
        return [self._cells[r * w:(r + 1) * w] for r in range(self._height)]

    def copy(self) -> PixelGrid:
        return PixelGrid(list(self._cells), self._width, self._height)

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.dimensions() == other.dimensions() and self._cells == other._cells

    def __repr__(self) -> str:
        return f"PixelGrid({self._width}x{self._height})"

    # ─── Encode boundary ───────────────────────────────────────────
    def to_array(self) -> np.ndarray:
        """Return an (H, W, 4) uint8 RGBA array."""
        if not self._cells:
            return np.zeros((0, 0, 4), dtype=np.uint8)
        flat = np.array([px.as_tuple() for px in self._cells], dtype=np.int64)
        return np.clip(flat, 0, 255).astype(np.uint8).reshape(self._height, self._width, 4)

    def to_image(self) -> PILImage.Image:
        """Convert to an RGBA PIL image for encoding."""
        if not self._cells:
            raise MalformedGridError("Cannot build an image from an empty grid")
        return PILImage.fromarray(np.ascontiguousarray(self.to_array()))

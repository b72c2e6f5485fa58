from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from models.pixel_grid import PixelGrid


@dataclass
class Image:
    """
    Simple data object: decoded RGBA pixel grid (+ optional source path and
    format name for bookkeeping). No codec logic outside the repository.
    """
    grid: PixelGrid
    path: Path | None = None # Source of the image.
    format: str | None = None # Pillow format name, e.g. "PNG" or "JPEG".

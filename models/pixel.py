from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Pixel:
    """
    One RGBA picture element. Channels are plain ints in [0, 255].
    Immutable: a transform returns a new Pixel instead of editing this one.
    """
    r: int
    g: int
    b: int
    a: int = 255

    def as_tuple(self):
        return self.r, self.g, self.b, self.a

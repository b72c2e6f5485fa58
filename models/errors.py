from __future__ import annotations

from typing import List, Tuple


class BrightnessAdjusterError(Exception):
    """Base class for every error raised by this project."""


class FileAccessError(BrightnessAdjusterError, OSError):
    """Input image unreadable or output file unwritable."""


class DecodeError(BrightnessAdjusterError, ValueError):
    """Image bytes could not be turned into a PixelGrid."""


class UnsupportedFormatError(DecodeError):
    pass


class CorruptDataError(DecodeError):
    pass


class InvalidBudgetError(BrightnessAdjusterError, ValueError):
    """Concurrency budget is not a positive integer."""


class ResourceProbeError(BrightnessAdjusterError, RuntimeError):
    """Host environment could not report a concurrency limit."""


class InvalidArgumentError(BrightnessAdjusterError, ValueError):
    """Bad command-line input."""


class UnsupportedAdjustmentError(InvalidArgumentError):
    """Adjustment type is recognized but has no implementation."""


class MalformedGridError(BrightnessAdjusterError, ValueError):
    pass


class IndexOutOfRangeError(BrightnessAdjusterError, IndexError):
    pass


class PixelPassError(BrightnessAdjusterError, RuntimeError):
    """
    Raised after a parallel pass finished with one or more failed units.
    `failures` holds (row, col, exception) for every unit that raised.
    """

    def __init__(self, failures: List[Tuple[int, int, BaseException]]):
        self.failures = failures
        row, col, first = failures[0]
        super().__init__(
            f"{len(failures)} pixel transform(s) failed; "
            f"first at ({row}, {col}): {first!r}"
        )

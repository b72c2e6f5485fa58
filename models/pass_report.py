from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class PassReport:
    """
    Summary of one BoundedParallelMap pass.
    """
    dispatched: int # Units submitted (one per pixel).
    completed: int # Units that finished without raising.
    failed: int # Units whose transform raised.
    peak_in_flight: int # Highest number of transforms executing at once.
    elapsed_seconds: float

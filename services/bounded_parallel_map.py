from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple
import logging
import os
import threading
import time

from dotenv import load_dotenv
from tqdm import tqdm

from models.errors import InvalidBudgetError, PixelPassError
from models.pass_report import PassReport
from models.pixel import Pixel
from models.pixel_grid import PixelGrid

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

PixelTransform = Callable[..., Pixel]


class BoundedParallelMap:
    """
    Applies a per-pixel transform to every cell of a PixelGrid in parallel.

    *   One task per (row, col). Each task reads and writes only its own cell.
    *   A counting semaphore sized to `budget` gates admission: the dispatcher
        blocks while `budget` tasks are queued or running.
    *   `apply()` returns only after every task has finished and released its
        slot. Failed tasks are collected and raised together afterwards.
    """

    def __init__(self,
                 budget: int,
                 *,
                 max_workers: int | None = None,
                 show_progress: bool | None = None):
        """
        Args:
            budget: Max simultaneously in-flight transforms (>= 1).
            max_workers: Thread pool size cap (defaults to MAX_WORKERS env var,
                then to the ThreadPoolExecutor default). Never exceeds `budget`.
            show_progress: Show a tqdm bar (defaults to SHOW_PROGRESS env var).
        """
        if isinstance(budget, bool) or not isinstance(budget, int) or budget < 1:
            raise InvalidBudgetError(f"Concurrency budget must be a positive integer, got {budget!r}")
        self.budget = budget

        if max_workers is None:
            raw = os.getenv("MAX_WORKERS", "").strip()
            try:
                max_workers = int(raw) if raw else min(32, (os.cpu_count() or 1) + 4)
            except ValueError:
                raise InvalidBudgetError(f"MAX_WORKERS is not an integer: {raw!r}") from None
        if max_workers < 1:
            raise InvalidBudgetError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = min(budget, max_workers)

        if show_progress is None:
            show_progress = os.getenv("SHOW_PROGRESS", "false").lower() in ("1", "true", "yes")
        self.show_progress = show_progress

    def apply(self, grid: PixelGrid, transform: PixelTransform, *args) -> PassReport:
        """
        Replace every cell with ``transform(cell, *args)``.

        Returns:
            PassReport for the pass.
        Raises:
            PixelPassError: after the barrier, if any transform raised. Cells
            whose transform failed keep their previous value.
        """
        width, height = grid.dimensions()
        total = width * height
        if total == 0:
            logger.debug("Empty grid, nothing to dispatch")
            return PassReport(0, 0, 0, 0, 0.0)

        gate = threading.BoundedSemaphore(self.budget)
        lock = threading.Lock()
        failures: List[Tuple[int, int, BaseException]] = []
        in_flight = 0
        peak = 0
        completed = 0
        dispatched = 0
        started = time.perf_counter()

        logger.info(f"Transforming {width}x{height} grid: budget={self.budget}, workers={self.max_workers}")

        with tqdm(total=total, desc="pixels", ncols=70, disable=not self.show_progress) as progress:

            def run_unit(row: int, col: int) -> None:
                nonlocal in_flight, peak, completed
                with lock:
                    in_flight += 1
                    peak = max(peak, in_flight)
                ok = False
                try:
                    grid.set(row, col, transform(grid.get(row, col), *args))
                    ok = True
                except Exception as exc:
                    with lock:
                        failures.append((row, col, exc))
                finally:
                    with lock:
                        in_flight -= 1
                        if ok:
                            completed += 1
                        progress.update(1)
                    gate.release()

            # Leaving the executor block joins every submitted unit
            with ThreadPoolExecutor(max_workers=self.max_workers,
                                    thread_name_prefix="pixel") as executor:
                for row, col in grid.coordinates():
                    gate.acquire()
                    try:
                        executor.submit(run_unit, row, col)
                    except BaseException:
                        gate.release()
                        raise
                    dispatched += 1

        report = PassReport(
            dispatched=dispatched,
            completed=completed,
            failed=len(failures),
            peak_in_flight=peak,
            elapsed_seconds=time.perf_counter() - started,
        )
        logger.info(
            f"Pass finished: {report.completed}/{report.dispatched} ok, {report.failed} failed, "
            f"peak in-flight {report.peak_in_flight}, {report.elapsed_seconds:.2f}s"
        )

        if failures:
            failures.sort(key=lambda f: (f[0], f[1]))
            raise PixelPassError(failures)
        return report

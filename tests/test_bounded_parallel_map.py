import threading
import time

import numpy as np
import pytest

from models.errors import InvalidBudgetError, PixelPassError
from models.image_adjustments import adjust_pixel_brightness
from models.pixel import Pixel
from models.pixel_grid import PixelGrid
from services.bounded_parallel_map import BoundedParallelMap


def _random_grid(width, height, seed=0):
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    return PixelGrid.from_array(arr)


@pytest.mark.parametrize("budget", [0, -3, 2.5, True, None])
def test_invalid_budget_rejected(budget):
    with pytest.raises(InvalidBudgetError):
        BoundedParallelMap(budget)


def test_workers_capped_by_budget():
    assert BoundedParallelMap(2, max_workers=16).max_workers == 2
    assert BoundedParallelMap(100, max_workers=4).max_workers == 4


def test_max_workers_from_env(monkeypatch):
    monkeypatch.setenv("MAX_WORKERS", "3")
    assert BoundedParallelMap(50).max_workers == 3


def test_empty_grid_completes_immediately():
    called = []
    report = BoundedParallelMap(4).apply(PixelGrid.from_rows([]), lambda p: called.append(p) or p)
    assert called == []
    assert report.dispatched == 0
    assert report.failed == 0


@pytest.mark.parametrize("budget", [1, 3, 64])
def test_matches_sequential_result(budget):
    grid = _random_grid(17, 9)
    expected = grid.copy()
    for row, col in expected.coordinates():
        expected.set(row, col, adjust_pixel_brightness(expected.get(row, col), 1.37))

    report = BoundedParallelMap(budget, max_workers=8).apply(grid, adjust_pixel_brightness, 1.37)

    assert grid.dimensions() == (17, 9)
    assert grid == expected
    assert report.dispatched == report.completed == 17 * 9
    assert report.failed == 0


def test_each_cell_transformed_exactly_once():
    grid = PixelGrid.from_rows([[Pixel(0, 0, 0, 0) for _ in range(12)] for _ in range(7)])

    def bump(p):
        return Pixel(p.r + 1, p.g, p.b, p.a)

    BoundedParallelMap(5).apply(grid, bump)
    assert all(grid.get(r, c).r == 1 for r, c in grid.coordinates())


def test_in_flight_never_exceeds_budget():
    budget = 3
    lock = threading.Lock()
    state = {"running": 0, "peak": 0}

    def slow(p):
        with lock:
            state["running"] += 1
            state["peak"] = max(state["peak"], state["running"])
        time.sleep(0.002)
        with lock:
            state["running"] -= 1
        return p

    grid = _random_grid(8, 6)
    report = BoundedParallelMap(budget, max_workers=16).apply(grid, slow)

    assert state["peak"] <= budget
    assert report.peak_in_flight <= budget
    assert report.completed == 48


def test_failures_are_collected_after_all_units_finish():
    grid = PixelGrid.from_rows([[Pixel(c, 0, 0) for c in range(10)] for _ in range(3)])

    def picky(p, factor):
        if p.r % 4 == 0:
            raise ValueError(f"bad pixel {p.r}")
        return adjust_pixel_brightness(p, factor)

    # budget 1: a slot leaked by a failing unit would deadlock the pass
    with pytest.raises(PixelPassError) as excinfo:
        BoundedParallelMap(1).apply(grid, picky, 2.0)

    failures = excinfo.value.failures
    assert len(failures) == 3 * 3  # r in {0, 4, 8} on each row
    assert all(isinstance(exc, ValueError) for _, _, exc in failures)
    assert [(r, c) for r, c, _ in failures][:3] == [(0, 0), (0, 4), (0, 8)]

    for row, col in grid.coordinates():
        if col % 4 == 0:
            assert grid.get(row, col) == Pixel(col, 0, 0)
        else:
            assert grid.get(row, col) == Pixel(col * 2, 0, 0)


@pytest.mark.parametrize("value", ["eight", "2.5", "0"])
def test_bad_max_workers_env_rejected(monkeypatch, value):
    monkeypatch.setenv("MAX_WORKERS", value)
    with pytest.raises(InvalidBudgetError, match="MAX_WORKERS|max_workers"):
        BoundedParallelMap(10)

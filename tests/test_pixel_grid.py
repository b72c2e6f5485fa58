import numpy as np
import pytest
from PIL import Image as PILImage

from models.errors import IndexOutOfRangeError, MalformedGridError
from models.pixel import Pixel
from models.pixel_grid import PixelGrid


def _grid(width=3, height=2):
    return PixelGrid.from_rows(
        [[Pixel(r * 10 + c, c, r, 255) for c in range(width)] for r in range(height)]
    )


def test_from_rows_dimensions_and_access():
    grid = _grid(3, 2)
    assert grid.dimensions() == (3, 2)
    assert len(grid) == 6
    assert grid.get(1, 2) == Pixel(12, 2, 1, 255)


def test_from_rows_rejects_ragged_rows():
    with pytest.raises(MalformedGridError):
        PixelGrid.from_rows([[Pixel(0, 0, 0)], [Pixel(0, 0, 0), Pixel(1, 1, 1)]])


def test_from_rows_rejects_empty_rows():
    with pytest.raises(MalformedGridError):
        PixelGrid.from_rows([[], []])


def test_zero_rows_is_empty_grid():
    grid = PixelGrid.from_rows([])
    assert grid.dimensions() == (0, 0)
    assert len(grid) == 0
    assert list(grid.coordinates()) == []


def test_from_flat():
    pixels = [Pixel(i, i, i) for i in range(6)]
    grid = PixelGrid.from_flat(pixels, 2)
    assert grid.dimensions() == (2, 3)
    assert grid.get(2, 1) == Pixel(5, 5, 5)


@pytest.mark.parametrize("width", [0, 4])
def test_from_flat_rejects_bad_width(width):
    with pytest.raises(MalformedGridError):
        PixelGrid.from_flat([Pixel(0, 0, 0)] * 6, width)


@pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (2, 0), (0, 3)])
def test_bounds_checked(row, col):
    grid = _grid(3, 2)
    with pytest.raises(IndexOutOfRangeError):
        grid.get(row, col)
    with pytest.raises(IndexOutOfRangeError):
        grid.set(row, col, Pixel(1, 1, 1))


def test_set_writes_only_target_cell():
    grid = _grid(3, 2)
    before = grid.copy()
    grid.set(0, 1, Pixel(9, 9, 9, 9))
    assert grid.get(0, 1) == Pixel(9, 9, 9, 9)
    for row, col in grid.coordinates():
        if (row, col) != (0, 1):
            assert grid.get(row, col) == before.get(row, col)


def test_rows_are_row_major():
    grid = _grid(2, 2)
    assert grid.rows() == [
        [Pixel(0, 0, 0, 255), Pixel(1, 1, 0, 255)],
        [Pixel(10, 0, 1, 255), Pixel(11, 1, 1, 255)],
    ]


def test_array_conversion():
    arr = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    grid = PixelGrid.from_array(arr)
    assert grid.dimensions() == (3, 2)
    assert grid.get(1, 0) == Pixel(12, 13, 14, 15)
    np.testing.assert_array_equal(grid.to_array(), arr)


def test_from_array_rejects_non_rgba():
    with pytest.raises(MalformedGridError):
        PixelGrid.from_array(np.zeros((2, 2, 3), dtype=np.uint8))


def test_to_image_is_rgba():
    img = _grid(3, 2).to_image()
    assert isinstance(img, PILImage.Image)
    assert img.mode == "RGBA"
    assert img.size == (3, 2)
    assert img.getpixel((2, 1)) == (12, 2, 1, 255)

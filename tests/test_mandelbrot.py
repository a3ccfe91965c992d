import numpy as np
import pytest

from parlab import mandelbrot
from parlab.mandelbrot import Viewport


def test_default_viewport():
    view = Viewport()
    assert (view.x0, view.y0, view.x1, view.y1) == (-2.0, -1.0, 1.0, 1.0)


def test_scale_and_shift_identity():
    assert Viewport().scale_and_shift(1.0, 0.0, 0.0) == Viewport()


def test_scale_and_shift_moves_corners():
    view = Viewport().scale_and_shift(0.5, 1.0, 2.0)
    assert view.x0 == pytest.approx(-2.0 * 0.5 + 1.0)
    assert view.y1 == pytest.approx(1.0 * 0.5 + 2.0)


def test_mandel_origin_never_escapes():
    assert mandelbrot.mandel(0.0, 0.0, 256) == 256


def test_mandel_far_point_escapes_immediately():
    assert mandelbrot.mandel(2.0, 2.0, 50) == 0


def test_mandel_real_one():
    assert mandelbrot.mandel(1.0, 0.0, 10) == 2


def test_mandel_zero_count():
    assert mandelbrot.mandel(0.0, 0.0, 0) == 0


def test_serial_matches_scalar():
    width, height, iters = 12, 8, 64
    out = np.zeros(width * height, dtype=np.int32)
    mandelbrot.mandelbrot_serial(-2.0, -1.0, 1.0, 1.0, width, height, 0, height, iters, out)
    dx = (np.float32(1.0) - np.float32(-2.0)) / np.float32(width)
    dy = (np.float32(1.0) - np.float32(-1.0)) / np.float32(height)
    for j in range(height):
        for i in range(width):
            x = np.float32(-2.0) + np.float32(i) * dx
            y = np.float32(-1.0) + np.float32(j) * dy
            assert out[j * width + i] == mandelbrot.mandel(x, y, iters)


def test_serial_writes_only_requested_rows():
    width, height = 6, 5
    out = np.full(width * height, -1, dtype=np.int32)
    mandelbrot.mandelbrot_serial(-2.0, -1.0, 1.0, 1.0, width, height, 2, 2, 32, out)
    grid = out.reshape(height, width)
    assert (grid[[0, 1, 4]] == -1).all()
    assert (grid[2:4] >= 0).all()


def test_serial_accepts_list_output():
    width, height = 4, 3
    as_list = [0] * (width * height)
    as_array = np.zeros(width * height, dtype=np.int32)
    mandelbrot.mandelbrot_serial(-2.0, -1.0, 1.0, 1.0, width, height, 0, height, 20, as_list)
    mandelbrot.mandelbrot_serial(-2.0, -1.0, 1.0, 1.0, width, height, 0, height, 20, as_array)
    assert as_list == as_array.tolist()


@pytest.mark.parametrize("rows_fn", [mandelbrot.block_rows, mandelbrot.interleaved_rows])
@pytest.mark.parametrize("num_threads,height", [(1, 7), (3, 7), (4, 12), (5, 3)])
def test_row_assignments_partition_image(rows_fn, num_threads, height):
    rows = [row for tid in range(num_threads) for row in rows_fn(tid, num_threads, height)]
    assert sorted(rows) == list(range(height))


def test_block_rows_last_thread_takes_remainder():
    assert list(mandelbrot.block_rows(2, 3, 7)) == [4, 5, 6]


def test_interleaved_rows_stride():
    assert list(mandelbrot.interleaved_rows(1, 3, 7)) == [1, 4]


@pytest.mark.parametrize("num_threads", [1, 3, 4])
def test_thread_matches_serial(num_threads, capsys):
    width, height, iters = 16, 10, 48
    serial = np.zeros(width * height, dtype=np.int32)
    threaded = np.zeros(width * height, dtype=np.int32)
    mandelbrot.mandelbrot_serial(-2.0, -1.0, 1.0, 1.0, width, height, 0, height, iters, serial)
    mandelbrot.mandelbrot_thread(num_threads, -2.0, -1.0, 1.0, 1.0, width, height, iters, threaded)
    assert np.array_equal(serial, threaded)
    out = capsys.readouterr().out
    assert out.count("[thread ") == num_threads


def test_thread_limit():
    out = np.zeros(4, dtype=np.int32)
    with pytest.raises(ValueError, match="32"):
        mandelbrot.mandelbrot_thread(33, -2.0, -1.0, 1.0, 1.0, 2, 2, 8, out)


def test_thread_needs_one_thread():
    out = np.zeros(4, dtype=np.int32)
    with pytest.raises(ValueError):
        mandelbrot.mandelbrot_thread(0, -2.0, -1.0, 1.0, 1.0, 2, 2, 8, out)
import numpy as np
import pytest

from parlab.sqrt import main, sqrt_serial, sqrt_simd, verify_result


@pytest.fixture
def values():
    rng = np.random.default_rng(42)
    return (0.001 + 2.998 * rng.random(200)).astype(np.float32)


def test_serial_close_to_sqrt(values):
    result = sqrt_serial(values, 1.0)
    assert result.shape == values.shape
    assert np.all(np.abs(result - np.sqrt(values)) <= 1e-4)


def test_simd_close_to_sqrt(values):
    result = sqrt_simd(values, 1.0)
    assert result.shape == values.shape
    max_error = float(np.max(np.abs(result - np.sqrt(values))))
    assert max_error <= 1e-4


def test_simd_lane_count_does_not_change_results(values):
    assert np.array_equal(sqrt_simd(values, 1.0, 8), sqrt_simd(values, 1.0, 3))


def test_exact_start_needs_no_iteration():
    assert sqrt_serial([1.0], 1.0).tolist() == [1.0]
    assert sqrt_simd([1.0], 1.0).tolist() == [1.0]


def test_stalled_iteration_raises():
    with pytest.raises(ValueError):
        sqrt_serial([3.0], 1.0)
    with pytest.raises(ValueError):
        sqrt_simd([3.0], 1.0)


def test_simd_rejects_zero_lanes():
    with pytest.raises(ValueError):
        sqrt_simd([1.0], 1.0, 0)


def test_verify_result_lists_bad_indices(capsys):
    gold = np.array([1.0, 2.0, 3.0], dtype=np.float32)
    result = gold.copy()
    result[1] = 2.5
    assert verify_result(result, gold) == [1]
    assert "Error: [1] Got" in capsys.readouterr().out


def test_verify_result_accepts_match(capsys):
    gold = np.array([1.0, 2.0], dtype=np.float32)
    assert verify_result(gold, gold) == []
    assert capsys.readouterr().out == ""


def test_main_small_run(capsys):
    assert main(["-n", "64"]) == 0
    out = capsys.readouterr().out
    assert "[sqrt serial]" in out
    assert "speedup from SIMD256" in out
    assert "Error:" not in out


def test_main_rejects_bad_size():
    assert main(["--size", "0"]) == 1
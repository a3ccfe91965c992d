import random

import numpy as np
import pytest

from parlab.vecintrin import VectorUnit
from parlab.vector_programs import (
    EXP_MAX,
    abs_serial,
    abs_vector,
    array_sum_serial,
    array_sum_vector,
    clamped_exp_serial,
    clamped_exp_vector,
    init_values,
    main,
    verify_result,
)


def test_init_values_shapes_and_ranges():
    values, exponents, output, gold = init_values(12, 4, random.Random(3))
    assert len(values) == len(exponents) == len(output) == len(gold) == 16
    assert values.min() >= -1.0 and values.max() <= 3.0
    assert exponents.min() >= 0 and exponents.max() < EXP_MAX
    assert not output.any() and not gold.any()


def test_init_values_is_reproducible_with_seed():
    first = init_values(8, 4, random.Random(7))
    second = init_values(8, 4, random.Random(7))
    assert np.array_equal(first[0], second[0])
    assert np.array_equal(first[1], second[1])


@pytest.mark.parametrize("n", [4, 16, 32])
def test_abs_vector_matches_serial(n):
    unit = VectorUnit()
    values, _, _, _ = init_values(n, unit.width, random.Random(n))
    expected = abs_serial(values, n)
    actual = abs_vector(unit, values, n)
    assert np.array_equal(actual[:n], expected[:n])
    assert (actual[:n] >= 0).all()


@pytest.mark.parametrize("n", [4, 16, 40])
def test_clamped_exp_vector_matches_serial(n):
    unit = VectorUnit()
    values, exponents, _, _ = init_values(n, unit.width, random.Random(n + 1))
    gold = clamped_exp_serial(values, exponents, n)
    output = clamped_exp_vector(unit, values, exponents, n)
    assert verify_result(values, exponents, output, gold, n) is True
    assert (output[:n] <= np.float32(9.999999)).all()


def test_clamped_exp_serial_cases():
    values = np.array([2.5, 3.0, 0.5], dtype=np.float32)
    exponents = np.array([0, 5, 1], dtype=np.int32)
    result = clamped_exp_serial(values, exponents, 3)
    assert result[0] == np.float32(1.0)
    assert result[1] == np.float32(9.999999)
    assert result[2] == values[2]


def test_vector_unit_logs_instructions():
    unit = VectorUnit()
    values, exponents, _, _ = init_values(8, unit.width, random.Random(5))
    clamped_exp_vector(unit, values, exponents, 8)
    stats = unit.logger.stats
    assert stats.total_instructions > 0
    assert stats.utilized_lane <= stats.total_lane
    assert stats.total_lane == stats.total_instructions * unit.width


def test_array_sum_vector_close_to_serial():
    unit = VectorUnit()
    values, _, _, _ = init_values(64, unit.width, random.Random(11))
    assert abs(array_sum_vector(unit, values, 64) - array_sum_serial(values, 64)) < 0.2


def test_array_sum_serial_of_nothing_is_zero():
    assert array_sum_serial([1.0, 2.0], 0) == 0.0


def test_verify_result_reports_mismatch(capsys):
    values = np.ones(6, dtype=np.float32)
    exponents = np.ones(6, dtype=np.int32)
    gold = np.zeros(6, dtype=np.float32)
    output = gold.copy()
    output[1] = 5.0
    assert verify_result(values, exponents, output, gold, 2) is False
    out = capsys.readouterr().out
    assert "Wrong calculation at value[1]!" in out
    assert "out of bound" not in out


def test_verify_result_reports_out_of_bound_write(capsys):
    values = np.ones(6, dtype=np.float32)
    exponents = np.ones(6, dtype=np.int32)
    gold = np.zeros(6, dtype=np.float32)
    output = gold.copy()
    output[4] = 1.0
    assert verify_result(values, exponents, output, gold, 2) is False
    assert "You have written to out of bound value!" in capsys.readouterr().out


def test_main_default_passes(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.count("Passed!!!") == 2
    assert "Vector Width:" in out


def test_main_prints_log(capsys):
    assert main(["-s", "8", "-l"]) == 0
    assert "Printing Vector Unit Execution Log" in capsys.readouterr().out


def test_main_rejects_non_positive_size(capsys):
    assert main(["--size", "0"]) == -1
    assert "Workload size is set to 0" in capsys.readouterr().out


def test_main_size_not_multiple_of_width(capsys):
    assert main(["-s", "6"]) == 0
    assert "Must have N % VECTOR_WIDTH == 0" in capsys.readouterr().out


def test_main_unknown_option(capsys):
    assert main(["-x"]) == 1
    assert "Usage:" in capsys.readouterr().out
import pytest

from parlab import timer


def test_parse_cpuinfo_empty_uses_default():
    assert timer.parse_cpuinfo("") == pytest.approx(1e-9)


def test_parse_cpuinfo_model_name_ghz():
    text = "processor\t: 0\nmodel name\t: Some CPU @ 2.5GHz\n"
    assert timer.parse_cpuinfo(text) * 2.5 == pytest.approx(1e-9)


def test_parse_cpuinfo_model_name_mhz():
    text = "model name\t: Old CPU @ 800MHz\n"
    assert timer.parse_cpuinfo(text) * 800 == pytest.approx(1e-6)


def test_parse_cpuinfo_cpu_mhz_line():
    text = "vendor_id\t: Generic\ncpu MHz\t\t: 2400.000\n"
    assert timer.parse_cpuinfo(text) * 2400 == pytest.approx(1e-6)


def test_parse_cpuinfo_model_name_without_at_falls_through():
    text = "model name\t: Plain CPU\ncpu MHz\t\t: 1000.0\n"
    assert timer.parse_cpuinfo(text) * 1000 == pytest.approx(1e-6)


def test_parse_cpuinfo_unparsable_frequency_continues():
    text = "model name\t: Weird @ fastGHz\ncpu MHz : 500\n"
    assert timer.parse_cpuinfo(text) * 500 == pytest.approx(1e-6)


def test_parse_cpuinfo_first_match_wins():
    text = "model name\t: A @ 2.5GHz\ncpu MHz\t\t: 1000.0\n"
    assert timer.parse_cpuinfo(text) * 2.5 == pytest.approx(1e-9)


def test_ticks_are_monotonic():
    first = timer.current_ticks()
    second = timer.current_ticks()
    assert second >= first


def test_seconds_are_monotonic():
    first = timer.current_seconds()
    second = timer.current_seconds()
    assert second >= first


def test_conversions_are_consistent():
    assert timer.ticks_per_second() * timer.seconds_per_tick() == pytest.approx(1.0)
    assert timer.ms_per_tick() == pytest.approx(timer.seconds_per_tick() * 1000.0)


def test_tick_units():
    assert timer.tick_units() == "ns"
import numpy as np
import pytest
from wltrace.job import Job
from wltrace.utils import draw_uniform, is_finite_float, is_int, jobs_to_dataframe, parse_long_number


@pytest.mark.parametrize("input,expected", [
    ("128", 128),
    (" 64 ", 64),
    ("128.0", 128),
    ("1.28e2", 128),
    ("7.9", 7),
    ("-1", -1),
])
def test_parse_long_number(input, expected):
    assert parse_long_number(input) == expected


@pytest.mark.parametrize("input", ["", "x", "nan", "inf", "12ab", "1_000", "١٢", "1_0.5"])
def test_parse_long_number_error(input):
    with pytest.raises(ValueError):
        parse_long_number(input)


@pytest.mark.parametrize("input,expected", [
    ("12", True),
    ("-3", True),
    ("1.0", False),
    ("", False),
    ("1_000", False),
    ("١٢", False),
    ("１", False),
])
def test_is_int(input, expected):
    assert is_int(input) is expected


@pytest.mark.parametrize("input,expected", [
    ("5.250", True),
    ("3", True),
    ("nan", False),
    ("-inf", False),
    ("five", False),
    (".5", True),
    ("1e3", True),
    ("1_000.5", False),
    ("٥.25", False),
])
def test_is_finite_float(input, expected):
    assert is_finite_float(input) is expected


def test_draw_uniform():
    rng = np.random.default_rng(0)
    draws = [draw_uniform(rng, 5) for _ in range(200)]
    assert all(isinstance(d, int) for d in draws)
    assert set(draws) == {0, 1, 2, 3, 4}
    assert draw_uniform(rng, 0) == 0
    with pytest.raises(ValueError):
        draw_uniform(rng, -1)


def test_jobs_to_dataframe():
    jobs = [Job(f"j{i}", i, 0, 10, 1, -1, 512, None, None, "url", None, 0) for i in range(3)]
    df = jobs_to_dataframe(jobs)
    assert len(df) == 3
    assert list(df["submit_time"]) == [0, 1, 2]
    assert jobs_to_dataframe([]).empty

# tests/test_timecode.py
import math

import pytest

from captionline.timecode import code_to_seconds, seconds_to_code


@pytest.mark.parametrize(
    "seconds, fmt, expected",
    [
        (1.5, "srt", "00:00:01,500"),
        (3.25, "vtt", "00:00:03.250"),
        (3723.456, "srt", "01:02:03,456"),
        (3723.456, "ass", "1:02:03.46"),
        (0.0, "ass", "0:00:00.00"),
        (75.9, "display", "01:15"),
        (3725.0, "display", "01:02:05"),
        (36000.0, "vtt", "10:00:00.000"),
    ],
)
def test_seconds_to_code(seconds, fmt, expected):
    assert seconds_to_code(seconds, fmt) == expected


@pytest.mark.parametrize("bad", [-3.0, float("nan"), float("inf")])
def test_seconds_to_code_clamps_invalid_input(bad):
    assert seconds_to_code(bad, "srt") == "00:00:00,000"
    assert seconds_to_code(bad, "ass") == "0:00:00.00"
    assert seconds_to_code(bad, "display") == "00:00"


def test_seconds_to_code_rejects_unknown_format():
    with pytest.raises(ValueError):
        seconds_to_code(1.0, "sbv")


def test_millisecond_rounding_does_not_overflow_field():
    assert seconds_to_code(59.9996, "srt") == "00:01:00,000"
    assert seconds_to_code(59.996, "ass") == "0:01:00.00"


@pytest.mark.parametrize(
    "code, expected",
    [
        ("00:00:01,500", 1.5),
        ("00:00:01.500", 1.5),
        ("0:00:01.50", 1.5),
        ("1:02:03.46", 3723.46),
        ("01:02:03", 3723.0),
        ("02:05.5", 125.5),
        ("02:05,25", 125.25),
        ("02:05", 125.0),
        ("1:02:345", 62.345),
        ("12.75", 12.75),
        ("42", 42.0),
        ("nonsense", 0.0),
        ("00:00:0²", 0.0),
        ("1:2x", 0.0),
        ("", 0.0),
        ("-4", 0.0),
    ],
)
def test_code_to_seconds(code, expected):
    assert code_to_seconds(code) == pytest.approx(expected)


def test_code_to_seconds_accepts_either_separator_for_every_format():
    assert code_to_seconds("00:00:02.250", "srt") == pytest.approx(2.25)
    assert code_to_seconds("00:00:02,250", "vtt") == pytest.approx(2.25)


@pytest.mark.parametrize("fmt, unit", [("srt", 0.001), ("vtt", 0.001), ("ass", 0.01)])
@pytest.mark.parametrize("value", [0.0, 0.004, 1.5, 59.999, 61.237, 3599.995, 7322.1234])
def test_round_trip_within_one_unit(fmt, unit, value):
    parsed = code_to_seconds(seconds_to_code(value, fmt), fmt)
    assert math.isclose(parsed, value, abs_tol=unit + 1e-9)

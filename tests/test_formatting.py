import pytest

from dssprender.errors import FormatIncompatibility
from dssprender.formatting import format_int, format_real, letter, round_half_up, terminate, fit


def test_format_int_right_aligns():
    assert format_int(42, 5) == "   42"
    assert format_int(-5, 5) == "   -5"
    assert format_int(99999, 5) == "99999"


def test_format_int_overflow_is_fatal():
    with pytest.raises(FormatIncompatibility):
        format_int(100000, 5)
    with pytest.raises(FormatIncompatibility):
        format_int(-1000, 4)


def test_format_real_precision():
    assert format_real(148.6, 6, 1) == " 148.6"
    assert format_real(0.0, 6, 3) == " 0.000"
    assert format_real(-0.04, 4, 1) == "-0.0"
    # Reals are allowed to grow past their field
    assert format_real(-1234.5, 6, 1) == "-1234.5"


def test_letter_mapping():
    assert letter(1) == 'A'
    assert letter(26) == 'Z'
    assert letter(27) == 'A'
    assert letter(2, lowercase=True) == 'b'
    assert letter(28, lowercase=True) == 'b'


@pytest.mark.parametrize("k", [1, 5, 13, 26, 27, 100])
@pytest.mark.parametrize("n", [0, 1, 3])
def test_letter_wraps_every_26(k, n):
    assert letter(k) == letter(k + 26 * n)
    assert letter(k, lowercase=True) == letter(k + 26 * n, lowercase=True)


def test_round_half_up():
    assert round_half_up(7.49) == 7
    assert round_half_up(7.5) == 8
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3 # round() would give 2


def test_terminate_places_marker_in_fixed_column():
    line = terminate("REFERENCE")
    assert len(line) == 128
    assert line.startswith("REFERENCE ")
    assert line[127] == '.'


def test_terminate_keeps_long_text():
    text = "X" * 130
    assert terminate(text) == text + " ."


def test_fit_truncates():
    assert fit("A" * 200) == "A" * 127 + "."
    assert fit("HEADER") == "HEADER" + " " * 121 + "."

import io

import pytest

from xvkit.fmt import fprintf, sprintf


@pytest.mark.parametrize("n", [0, 7, -1, 123456, -2147483648, 2147483647])
def test_decimal_round_trip(n):
    assert sprintf("%d", n) == str(n)


def test_decimal_wraps_to_32_bits():
    assert sprintf("%d", 2**31) == str(-(2**31))


@pytest.mark.parametrize("n", [0, 255, 0xDEAD, 0x7FFFFFFF])
def test_hex_round_trip(n):
    text = sprintf("%x", n)
    assert int(text, 16) == n
    assert text == text.upper()


def test_hex_of_negative_is_unsigned():
    assert int(sprintf("%x", -1), 16) == 2**32 - 1


def test_unsigned_long_is_truncated_to_32_bits():
    assert sprintf("%l", 2**32 + 5) == "5"


def test_pointer_has_sixteen_digits():
    text = sprintf("%p", 0x1234)
    assert text.startswith("0x")
    assert len(text) == 18
    assert int(text, 16) == 0x1234


def test_strings_and_null():
    assert sprintf("%s-%s", "abc", None) == "abc-(null)"


def test_char_accepts_code_or_character():
    assert sprintf("%c%c", "z", 65) == "zA"


def test_percent_and_unknown_conversions():
    assert sprintf("100%% %q") == "100% %q"


def test_trailing_percent_is_dropped():
    assert sprintf("ab%") == "ab"


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        sprintf("%d %d", 1)


def test_fprintf_writes_same_text():
    out = io.StringIO()
    fprintf(out, "%s: %d\n", "count", 3)
    assert out.getvalue() == sprintf("%s: %d\n", "count", 3)
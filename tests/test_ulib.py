import io

import pytest

from xvkit.ulib import atoi, itoa, read_line, strcmp


def test_atoi_reads_leading_digits():
    assert atoi("123abc") == 123


def test_atoi_accepts_no_sign_or_space():
    assert atoi("-5") == 0
    assert atoi(" 5") == 0
    assert atoi("") == 0


@pytest.mark.parametrize("n", [0, 9, 10, 4096, 2147483647])
def test_itoa_atoi_round_trip(n):
    assert atoi(itoa(n)) == n
    assert itoa(n) == str(n)


@pytest.mark.parametrize("n", [1, 42, 100000])
def test_itoa_negative(n):
    assert itoa(-n) == "-" + itoa(n)


def test_strcmp_equal():
    assert strcmp("same", "same") == 0


def test_strcmp_ordering():
    assert strcmp("abc", "abd") < 0
    assert strcmp("b", "a") > 0
    assert strcmp("ab", "abc") < 0
    assert strcmp("abc", "ab") > 0


def test_strcmp_stops_at_nul():
    assert strcmp("ab\0x", "ab\0y") == 0


def test_strcmp_is_unsigned():
    assert strcmp(b"\xff", b"a") > 0


def test_strcmp_antisymmetric():
    assert strcmp("apple", "apricot") == -strcmp("apricot", "apple")


def test_read_line_splits_lines():
    stream = io.StringIO("hello\nworld")
    assert read_line(stream, 100) == "hello\n"
    assert read_line(stream, 100) == "world"
    assert read_line(stream, 100) == ""


def test_read_line_respects_limit():
    stream = io.StringIO("abcdef")
    assert read_line(stream, 4) == "abc"
    assert read_line(stream, 4) == "def"


def test_read_line_stops_at_carriage_return():
    stream = io.StringIO("ab\rcd\n")
    assert read_line(stream, 100) == "ab\r"
    assert read_line(stream, 100) == "cd\n"
import io

import pytest

from xvkit.grep import grep, main, match


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("abc", "xxabcxx", True),
        ("^abc", "xabc", False),
        ("^abc", "abcx", True),
        ("a.c", "abc", True),
        ("ab*c", "ac", True),
        ("ab*c", "abbbc", True),
        ("ab*c", "adc", False),
        ("abc$", "xabc", True),
        ("abc$", "abcd", False),
        ("", "anything", True),
        (".*", "", True),
        ("^$", "", True),
        ("^$", "x", False),
        ("x", "", False),
    ],
)
def test_match(pattern, text, expected):
    assert match(pattern, text) is expected


def test_match_long_text_does_not_overflow_recursion():
    text = "a" * 5000
    assert match("^" + "a" * 5000 + "$", text)


def test_grep_yields_matching_lines_with_newline():
    stream = io.StringIO("hello\nworld\nhelp\n")
    assert list(grep("hel", stream)) == ["hello\n", "help\n"]


def test_grep_ignores_unterminated_last_line():
    stream = io.StringIO("one\ntwo")
    assert list(grep("o", stream)) == ["one\n"]


def test_grep_output_is_subset_of_input_lines():
    lines = [f"line {i}\n" for i in range(300)]
    out = list(grep("1.*2", io.StringIO("".join(lines))))
    assert out and all(line in lines for line in out)
    assert all(match("1.*2", line[:-1]) for line in out)


def test_grep_stops_on_overlong_line():
    stream = io.StringIO("x" * 1100 + "\nabc\n")
    assert list(grep("abc", stream)) == []


def test_main_usage(capsys):
    assert main([]) == 1
    assert "usage: grep pattern [file ...]" in capsys.readouterr().err


def test_main_files(tmp_path, capsys):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("cat\ndog\n")
    second.write_text("catalog\nbird\n")
    assert main(["^cat", str(first), str(second)]) == 0
    assert capsys.readouterr().out == "cat\ncatalog\n"


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert main(["x", str(missing)]) == 1
    assert capsys.readouterr().out == f"grep: cannot open {missing}\n"


def test_main_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("red\ngreen\nblue\n"))
    assert main(["e.n"]) == 0
    assert capsys.readouterr().out == "green\n"
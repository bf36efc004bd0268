import io
import sys

import pytest

from xvkit.coreutils import cat, cat_main, echo, echo_main, wc_main, word_count


class _FailingReader(io.RawIOBase):
    def readable(self):
        return True

    def readinto(self, buffer):
        raise OSError("device gone")


def test_cat_concatenates_streams():
    out = io.BytesIO()
    cat([io.BytesIO(b"abc"), io.BytesIO(b""), io.BytesIO(b"x" * 2000)], out)
    assert out.getvalue() == b"abc" + b"x" * 2000


def test_cat_read_failure_is_oserror():
    with pytest.raises(OSError):
        cat([_FailingReader()], io.BytesIO())


def test_cat_main_files(tmp_path, capsysbinary):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.write_bytes(b"hello\n")
    second.write_bytes(b"\x00\xffbin")
    assert cat_main([str(first), str(second)]) == 0
    assert capsysbinary.readouterr().out == b"hello\n\x00\xffbin"


def test_cat_main_missing_file(tmp_path, capsysbinary):
    missing = tmp_path / "nope"
    assert cat_main([str(missing)]) == 1
    assert capsysbinary.readouterr().err == f"cat: cannot open {missing}\n".encode()


def test_cat_main_stdin(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"piped data")))
    assert cat_main([]) == 0
    assert capsysbinary.readouterr().out == b"piped data"


def test_echo_joins_with_spaces():
    out = io.StringIO()
    echo(["a", "b", "c"], out)
    assert out.getvalue() == "a b c\n"


def test_echo_without_args_writes_nothing():
    out = io.StringIO()
    echo([], out)
    assert out.getvalue() == ""


def test_echo_main(capsys):
    assert echo_main(["hi", "there"]) == 0
    assert capsys.readouterr().out == "hi there\n"


def test_word_count_example():
    assert word_count(b"hello world\n") == (1, 2, 12)


@pytest.mark.parametrize(
    "data",
    [b"", b"a b\tc\r\nd\ve", b"  lead and trail  \n\n", b"one\ntwo\nthree"],
)
def test_word_count_invariants(data):
    counts = word_count(data)
    assert counts.chars == len(data)
    assert counts.lines == data.count(b"\n")
    assert counts.words == len(data.split())


def test_nul_separates_words():
    assert word_count(b"a\0b").words == word_count(b"a b").words


def test_wc_main_file(tmp_path, capsys):
    path = tmp_path / "text"
    data = b"first line\nsecond  line here\n"
    path.write_bytes(data)
    counts = word_count(data)
    assert wc_main([str(path)]) == 0
    assert capsys.readouterr().out == f"{counts.lines} {counts.words} {counts.chars} {path}\n"


def test_wc_main_stdin_has_empty_name(monkeypatch, capsys):
    data = b"x y\n"
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
    counts = word_count(data)
    assert wc_main([]) == 0
    assert capsys.readouterr().out == f"{counts.lines} {counts.words} {counts.chars} \n"


def test_wc_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "absent"
    assert wc_main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"
import pytest

from xvkit.shell import (
    MAXARGS,
    BackCmd,
    ExecCmd,
    ListCmd,
    OpenFlag,
    PipeCmd,
    RedirCmd,
    ShellSyntaxError,
    Token,
    cd_target,
    parse_command,
    tokenize,
)


def test_open_flag_values_match_fcntl():
    assert parse_command("echo > f") == RedirCmd(ExecCmd(["echo"]), "f", 0x601, 1)
    assert parse_command("echo >> f") == RedirCmd(ExecCmd(["echo"]), "f", 0x201, 1)
    assert parse_command("cat < f") == RedirCmd(ExecCmd(["cat"]), "f", 0x000, 0)


def test_tokenize_words_and_operators():
    tokens = tokenize("ls -l | wc > out >> log ; a & (b) < c")
    assert [t.kind for t in tokens] == [
        "word", "word", "|", "word", ">", "word", ">>", "word",
        ";", "word", "&", "(", "word", ")", "<", "word",
    ]
    assert [t.text for t in tokens if t.is_word] == ["ls", "-l", "wc", "out", "log", "a", "b", "c"]


def test_tokenize_symbols_split_words():
    assert tokenize("a|b") == [Token("word", "a"), Token("|", "|"), Token("word", "b")]


def test_tokenize_stops_at_nul():
    assert tokenize("echo hi\0 rest") == [Token("word", "echo"), Token("word", "hi")]


def test_tokenize_blank_line():
    assert tokenize(" \t\n") == []


def test_parse_simple_exec():
    assert parse_command("echo hi there\n") == ExecCmd(["echo", "hi", "there"])


def test_parse_empty_line():
    assert parse_command("\n") == ExecCmd([])


def test_parse_redirections_nest_in_order():
    cmd = parse_command("cat < in > out\n")
    inner = RedirCmd(ExecCmd(["cat"]), "in", OpenFlag.RDONLY, 0)
    assert cmd == RedirCmd(inner, "out", OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, 1)


def test_parse_append_redirection():
    cmd = parse_command("echo x >> log")
    assert cmd == RedirCmd(ExecCmd(["echo", "x"]), "log", OpenFlag.WRONLY | OpenFlag.CREATE, 1)


def test_redirection_before_args_shares_argv():
    cmd = parse_command("> out echo a b")
    assert isinstance(cmd, RedirCmd)
    assert cmd.cmd == ExecCmd(["echo", "a", "b"])
    assert cmd.file == "out"


def test_parse_pipeline_is_right_nested():
    cmd = parse_command("a | b | c")
    assert cmd == PipeCmd(ExecCmd(["a"]), PipeCmd(ExecCmd(["b"]), ExecCmd(["c"])))


def test_parse_list_and_background():
    cmd = parse_command("a & ; b")
    assert cmd == ListCmd(BackCmd(ExecCmd(["a"])), ExecCmd(["b"]))


def test_parse_double_background():
    assert parse_command("a & &") == BackCmd(BackCmd(ExecCmd(["a"])))


def test_parse_block_with_redirection():
    cmd = parse_command("(echo a; echo b) > f")
    assert cmd == RedirCmd(
        ListCmd(ExecCmd(["echo", "a"]), ExecCmd(["echo", "b"])),
        "f",
        OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC,
        1,
    )


def test_max_args_minus_one_is_allowed():
    words = [f"w{i}" for i in range(MAXARGS - 1)]
    assert parse_command(" ".join(words)) == ExecCmd(words)


def test_too_many_args():
    words = [f"w{i}" for i in range(MAXARGS)]
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parse_command(" ".join(words))


def test_missing_redirection_file():
    with pytest.raises(ShellSyntaxError, match="missing file for redirection"):
        parse_command("cat <")


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing \\)"):
        parse_command("(echo a")


def test_leftovers():
    with pytest.raises(ShellSyntaxError, match="leftovers"):
        parse_command("echo )")


def test_paren_inside_arguments():
    with pytest.raises(ShellSyntaxError, match="syntax"):
        parse_command("echo a (b")


def test_cd_target():
    assert cd_target("cd /tmp\n") == "/tmp"
    assert cd_target("ls\n") is None
    assert cd_target("cdx\n") is None
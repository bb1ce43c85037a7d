import pytest

from barstatus.cli import Options, UsageError, main, parse_args, render_status
from barstatus.config import Arg


def _entry(text):
    return Arg(lambda: text, "%s")


@pytest.mark.parametrize(
    "argv, expected",
    [
        ([], Options()),
        (["-s"], Options(to_stdout=True)),
        (["-1"], Options(to_stdout=True, once=True)),
        (["-s1"], Options(to_stdout=True, once=True)),
        (["-s", "--"], Options(to_stdout=True)),
        (["--"], Options()),
    ],
)
def test_parse_args_flags(argv, expected):
    assert parse_args(argv) == expected


def test_version_flag():
    assert parse_args(["-v"]).version is True
    assert parse_args(["-sv"]).version is True


@pytest.mark.parametrize(
    "argv", [["-x"], ["foo"], ["-"], ["--", "-s"], ["-s", "extra"], ["--long"]]
)
def test_parse_args_rejects(argv):
    with pytest.raises(UsageError):
        parse_args(argv)


def test_render_status_joins_entries():
    entries = [_entry("abc"), Arg(lambda: None, "<%s>"), _entry("def")]
    assert render_status(entries, "n/a", 100) == "abc<n/a>def"


def test_render_status_truncates(capsys):
    entries = [_entry("abcdef"), _entry("ghijkl"), _entry("never")]
    result = render_status(entries, "n/a", 10)
    assert len(result) == 9
    assert result == "abcdefghijkl"[:9]
    assert "Output truncated" in capsys.readouterr().err


def test_render_status_exact_fit_is_truncated():
    entries = [_entry("abcd")]
    assert render_status(entries, "n/a", 4) == "abc"


def test_main_version(capsys):
    assert main(["-v"]) == 1
    assert "barstatus-1.1" in capsys.readouterr().err


def test_main_usage(capsys):
    assert main(["-q"]) == 1
    assert capsys.readouterr().err.startswith("usage: barstatus")


def test_main_once_prints_one_line(capsys):
    assert main(["-1"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("UPT: ")
    assert " | MEM: " in lines[0]
    assert "IP: n/a | " in lines[0]
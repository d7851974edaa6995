import pytest

from remotecontrol.core.models.command import ParsedCommand
from remotecontrol.core.protocol.parser import parse


@pytest.mark.ut
@pytest.mark.parametrize(
    "line, expected",
    [
        ("saveAll", ParsedCommand("saveAll", "")),
        ("showInfoMessage hi", ParsedCommand("showInfoMessage", "hi")),
        ("openFile /tmp/a.txt", ParsedCommand("openFile", "/tmp/a.txt")),
        ("  insertText hello  ", ParsedCommand("insertText", "hello")),
        ("insertText   hello  world", ParsedCommand("insertText", "hello  world")),
        ("insertText\thello", ParsedCommand("insertText", "hello")),
        ("saveAll\r", ParsedCommand("saveAll", "")),
        ("showInfoMessage a\tb  c\r\n", ParsedCommand("showInfoMessage", "a\tb  c")),
    ],
)
def test_parse_splits_on_first_whitespace_run(line, expected):
    assert parse(line) == expected


@pytest.mark.ut
def test_parse_is_case_sensitive():
    assert parse("SAVEALL").name == "SAVEALL"
    assert parse("saveall").name == "saveall"


@pytest.mark.ut
@pytest.mark.parametrize("line", ["", " ", "\t\t", "\r", "   \n"])
def test_parse_blank_line_yields_empty_token(line):
    assert parse(line) == ParsedCommand("", "")


@pytest.mark.ut
@pytest.mark.parametrize(
    "line",
    [
        "x",
        "unknown-token with args",
        "été ☃ snow",
        "�� garbage",
        "a" * 10_000,
        "cmd " + " ".join(str(i) for i in range(100)),
    ],
)
def test_parse_is_total_and_matches_prefix(line):
    parsed = parse(line)

    stripped = line.strip()
    assert parsed.name == stripped.split(maxsplit=1)[0]
    assert not any(c.isspace() for c in parsed.name)
    if parsed.argument:
        assert stripped.endswith(parsed.argument)


@pytest.mark.ut
def test_parse_keeps_internal_whitespace_of_argument():
    parsed = parse("replaceSelection def f():\n    return  1")

    assert parsed.name == "replaceSelection"
    assert parsed.argument == "def f():\n    return  1"

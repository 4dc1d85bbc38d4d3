import io

import pytest

from starbytes.cmdline import (
    CommandLineError,
    CommandLineParser,
    FlagType,
    is_flag,
    split_flag_value,
)


def make_parser():
    parser = CommandLineParser(out=io.StringIO())
    parser.flag("name", "", "")
    parser.flag("count", 0, "")
    parser.flag("verbose", False, "")
    return parser


def test_is_flag():
    assert is_flag("--x")
    assert is_flag("-x")
    assert not is_flag("x")


def test_split_flag_value():
    assert split_flag_value("--out=file") == ("out", "file")
    assert split_flag_value("-out") == ("out", None)
    assert split_flag_value("plain") == ("plain", None)


def test_split_flag_value_empty_value():
    with pytest.raises(CommandLineError):
        split_flag_value("--out=")


def test_flag_types_follow_defaults():
    parser = make_parser()
    kinds = {f.name: f.type for f in parser.flags}
    assert kinds == {
        "name": FlagType.STRING,
        "count": FlagType.INT,
        "verbose": FlagType.BOOL,
    }


def test_parse_separate_and_equals_values():
    parser = make_parser()
    values = parser.parse(["--name", "demo", "-count=3", "--verbose", "true"])
    assert values == {"name": "demo", "count": 3, "verbose": True}


def test_parse_defaults_kept():
    values = make_parser().parse([])
    assert values == {"name": "", "count": 0, "verbose": False}


@pytest.mark.parametrize("raw,expected", [("1", True), ("0", False), ("false", False)])
def test_bool_values(raw, expected):
    assert make_parser().parse(["--verbose", raw])["verbose"] is expected


def test_bad_bool_value():
    with pytest.raises(CommandLineError):
        make_parser().parse(["--verbose", "maybe"])


def test_missing_value():
    with pytest.raises(CommandLineError):
        make_parser().parse(["--name"])


def test_value_that_is_a_flag():
    with pytest.raises(CommandLineError):
        make_parser().parse(["--name", "--count"])


def test_unknown_flag():
    with pytest.raises(CommandLineError):
        make_parser().parse(["--nope", "1"])


def test_alias():
    parser = make_parser()
    parser.alias("name", "n")
    assert parser.parse(["-n", "demo"])["name"] == "demo"


def test_commands():
    parser = CommandLineParser(out=io.StringIO())
    parser.command("build", "Build it")
    parser.command("run", "Run it")
    parser.flag("target", "", "build")
    parser.flag("arg", "", "run")
    values = parser.parse(["build", "--target", "x"])
    assert parser.selected_command == "build"
    assert values == {"target": "x"}
    with pytest.raises(CommandLineError):
        parser.parse(["build", "--arg", "y"])


def test_unknown_command():
    parser = CommandLineParser(out=io.StringIO())
    parser.command("build")
    with pytest.raises(CommandLineError):
        parser.parse(["deploy"])
    with pytest.raises(CommandLineError):
        parser.parse([])


def test_help_written():
    out = io.StringIO()
    parser = CommandLineParser(out=out)
    parser.command("build", "Build it")
    assert parser.parse(["--help"]) is None
    text = out.getvalue()
    assert text == parser.help_text()
    assert "COMMANDS:" in text
    assert "build - Build it" in text
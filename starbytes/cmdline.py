"""A small command line parser with sub-commands and typed flags."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, TextIO

HELP_FLAGS = ("--help", "-help")


class CommandLineError(ValueError):
    """Raised when the command line cannot be parsed."""


class FlagType(enum.Enum):
    INT = "int"
    STRING = "string"
    BOOL = "bool"


@dataclass
class CommandData:
    name: str
    desc: str = ""


@dataclass
class FlagData:
    name: str
    type: FlagType
    value: Any
    sub: str = ""
    desc: str = ""
    aliases: list[str] = field(default_factory=list)

    def matches(self, name: str) -> bool:
        return name == self.name or name in self.aliases


def is_flag(arg: str) -> bool:
    """True when *arg* starts with a dash."""
    return arg.startswith("-")


def split_flag_value(arg: str) -> tuple[str, Optional[str]]:
    """Strip leading dashes and split ``name=value``.

    Returns the name and the value, or ``None`` for the value when no ``=``
    is present.
    """
    if arg.startswith("--"):
        body = arg[2:]
    elif arg.startswith("-"):
        body = arg[1:]
    else:
        return arg, None
    name, sep, value = body.partition("=")
    if not sep:
        return name, None
    if not value:
        raise CommandLineError(f"Expected value for {name}")
    return name, value


def _convert(flag: FlagData, raw: str) -> Any:
    if flag.type is FlagType.STRING:
        return raw
    if flag.type is FlagType.BOOL:
        if raw in ("true", "1"):
            return True
        if raw in ("false", "0"):
            return False
        raise CommandLineError("Cannot set bool value with value provided")
    try:
        return int(raw)
    except ValueError:
        raise CommandLineError(
            f"Cannot set int value with value provided: {raw}"
        ) from None


class CommandLineParser:
    """Parses ``[command] --flag value --flag=value ...`` argument lists."""

    def __init__(self, prog_name: str = "PROG_NAME", out: Optional[TextIO] = None) -> None:
        self.prog_name = prog_name
        self.out = out if out is not None else sys.stdout
        self.commands: list[CommandData] = []
        self.flags: list[FlagData] = []
        self.selected_command: Optional[str] = None

    def command(self, name: str, desc: str = "") -> None:
        self.commands.append(CommandData(name, desc))

    def flag(self, name: str, default: Any, sub: str = "") -> None:
        """Declare a flag; its type follows the type of *default*."""
        if isinstance(default, bool):
            kind = FlagType.BOOL
        elif isinstance(default, int):
            kind = FlagType.INT
        elif isinstance(default, str):
            kind = FlagType.STRING
        else:
            raise TypeError(f"Unsupported flag type: {type(default).__name__}")
        self.flags.append(FlagData(name, kind, default, sub))

    def alias(self, name: str, sub: str) -> None:
        """Let *sub* stand for the flag called *name*; unknown names are ignored."""
        for flag in self.flags:
            if flag.name == name:
                flag.aliases.append(sub)
                return

    def help_text(self) -> str:
        lines = [self.prog_name, "", "", "COMMANDS:", ""]
        lines.extend(f"{cmd.name} - {cmd.desc}" for cmd in self.commands)
        return "\n".join(lines) + "\n"

    def _candidate_flags(self) -> list[FlagData]:
        if self.selected_command is None:
            return self.flags
        return [f for f in self.flags if f.sub in ("", self.selected_command)]

    def parse(self, args: Sequence[str]) -> Optional[dict[str, Any]]:
        """Parse *args* (without the program name).

        Returns a mapping of flag names to values, or ``None`` when help was
        requested and written to the output stream.
        """
        args = list(args)
        if any(a in HELP_FLAGS for a in args):
            self.out.write(self.help_text())
            self.out.flush()
            return None

        self.selected_command = None
        rest = iter(args)
        if self.commands:
            cmd = next(rest, None)
            if cmd is None or not any(c.name == cmd for c in self.commands):
                raise CommandLineError(f"Unknown Command: {cmd or ''}")
            self.selected_command = cmd

        candidates = self._candidate_flags()
        for arg in rest:
            name, value = split_flag_value(arg)
            if value is None:
                value = next(rest, None)
                if value is None or is_flag(value):
                    raise CommandLineError(f"Expected value for flag {name}")
            flag = next((f for f in candidates if f.matches(name)), None)
            if flag is None:
                raise CommandLineError(f"Unknown flag: {name}")
            flag.value = _convert(flag, value)

        return {f.name: f.value for f in candidates}
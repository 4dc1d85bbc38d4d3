"""The binary runtime code format: codes, identifiers, templates and objects.

Identifiers are a little-endian 64-bit length followed by UTF-8 bytes,
counts are little-endian 32-bit unsigned integers, codes are single bytes
and numbers are little-endian doubles.
"""

from __future__ import annotations

import enum
import io
import struct
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Optional

from .objects import Num, NumType


class RTCode(enum.IntEnum):
    MODULE_END = 0x00
    RTVAR = 0x01
    RTFUNC = 0x02
    RTCLASS_DEF = 0x03
    RTOBJCREATE = 0x04
    RTINTOBJCREATE = 0x05
    RTEXPR = 0x06
    RTIVKFUNC = 0x06
    RTRETURN = 0x07
    RTFUNCBLOCK_BEGIN = 0x08
    RTFUNCBLOCK_END = 0x09
    RTBLOCK_BEGIN = 0x08
    RTBLOCK_END = 0x09
    RTVAR_REF = 0x0A
    RTOBJVAR_REF = 0x0B
    CONDITIONAL = 0x0C
    CONDITIONAL_END = 0x0D
    RTFUNC_REF = 0x0E
    UNARY_OPERATOR = 0x0F
    BINARY_OPERATOR = 0x10


COND_TYPE_IF = 0x0
COND_TYPE_ELSE = 0x1
COND_TYPE_LOOPIF = 0x2

UNARY_OP_PLUS = 0x0
UNARY_OP_MINUS = 0x1
UNARY_OP_NOT = 0x2

BINARY_OP_PLUS = 0x00
BINARY_OP_MINUS = 0x01
BINARY_OP_PLUS_EQUAL = 0x02
BINARY_MINUS_EQUAL = 0x03
BINARY_EQUAL_EQUAL = 0x04
BINARY_NOT_EQUAL = 0x05


class ObjectCode(enum.IntEnum):
    """Kind of a built-in object written after an object-create code."""

    STR = 0x1
    ARRAY = 0x2
    DICTIONARY = 0x3
    BOOL = 0x4
    NUM = 0x5


# Booleans are stored the way the runtime's boolean enum numbers them.
_BOOL_TRUE = 0x0
_BOOL_FALSE = 0x1

_SIZE = struct.Struct("<Q")
_COUNT = struct.Struct("<I")
_FLOAT = struct.Struct("<d")


class RTCodeError(ValueError):
    """Raised for truncated or malformed runtime code."""


@dataclass
class RTVar:
    id: str
    has_init_value: bool = False


@dataclass
class RTFuncTemplate:
    name: str
    args_template: list[str] = field(default_factory=list)
    invocations: int = 0
    block_start_pos: Optional[int] = None


@dataclass
class RTClass:
    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    methods: list[RTFuncTemplate] = field(default_factory=list)


def _read_exact(inp: BinaryIO, size: int) -> bytes:
    data = inp.read(size)
    if len(data) != size:
        raise RTCodeError(f"Unexpected end of runtime code (wanted {size} bytes)")
    return data


def write_code(out: BinaryIO, code: int) -> None:
    out.write(bytes([int(code)]))


def read_code(inp: BinaryIO) -> int:
    return _read_exact(inp, 1)[0]


def write_id(out: BinaryIO, name: str) -> None:
    data = name.encode("utf-8")
    out.write(_SIZE.pack(len(data)))
    out.write(data)


def read_id(inp: BinaryIO) -> str:
    (length,) = _SIZE.unpack(_read_exact(inp, _SIZE.size))
    try:
        return _read_exact(inp, length).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RTCodeError(f"Identifier is not valid UTF-8: {exc}") from None


def _write_count(out: BinaryIO, count: int) -> None:
    out.write(_COUNT.pack(count))


def _read_count(inp: BinaryIO) -> int:
    return _COUNT.unpack(_read_exact(inp, _COUNT.size))[0]


def _write_bool(out: BinaryIO, value: bool) -> None:
    out.write(bytes([1 if value else 0]))


def _read_bool(inp: BinaryIO) -> bool:
    return _read_exact(inp, 1)[0] != 0


def write_var(out: BinaryIO, var: RTVar) -> None:
    write_code(out, RTCode.RTVAR)
    write_id(out, var.id)
    _write_bool(out, var.has_init_value)


def read_var(inp: BinaryIO) -> RTVar:
    """Read a variable whose leading code has already been consumed."""
    name = read_id(inp)
    return RTVar(name, _read_bool(inp))


def write_func_template(out: BinaryIO, template: RTFuncTemplate) -> None:
    """Write the template header only; the body is written separately."""
    write_code(out, RTCode.RTFUNC)
    write_id(out, template.name)
    _write_count(out, len(template.args_template))
    for arg in template.args_template:
        write_id(out, arg)


def read_func_template(inp: BinaryIO) -> RTFuncTemplate:
    """Read a template whose leading code has already been consumed.

    A function block that follows is skipped and its start position kept.
    """
    name = read_id(inp)
    args = [read_id(inp) for _ in range(_read_count(inp))]
    template = RTFuncTemplate(name, args)
    nxt = inp.read(1)
    if not nxt:
        return template
    if nxt[0] != RTCode.RTFUNCBLOCK_BEGIN:
        inp.seek(-1, io.SEEK_CUR)
        return template
    template.block_start_pos = inp.tell()
    while read_code(inp) != RTCode.RTFUNCBLOCK_END:
        pass
    return template


def write_class(out: BinaryIO, cls: RTClass) -> None:
    write_code(out, RTCode.RTCLASS_DEF)
    write_id(out, cls.name)


def read_class(inp: BinaryIO) -> RTClass:
    """Read a class whose leading code has already been consumed."""
    return RTClass(read_id(inp))


def _write_object_body(out: BinaryIO, obj: Any) -> None:
    if isinstance(obj, str):
        write_code(out, ObjectCode.STR)
        write_id(out, obj)
    elif isinstance(obj, bool):
        write_code(out, ObjectCode.BOOL)
        out.write(bytes([_BOOL_TRUE if obj else _BOOL_FALSE]))
    elif isinstance(obj, list):
        write_code(out, ObjectCode.ARRAY)
        _write_count(out, len(obj))
        for item in obj:
            write_object(out, item)
    elif isinstance(obj, (Num, int, float)):
        value = obj.value if isinstance(obj, Num) else obj
        write_code(out, ObjectCode.NUM)
        out.write(_FLOAT.pack(float(value)))
    else:
        raise RTCodeError(f"Cannot write object of type {type(obj).__name__}")


def write_object(out: BinaryIO, obj: Any) -> None:
    """Write a built-in object preceded by the object-create code."""
    write_code(out, RTCode.RTINTOBJCREATE)
    _write_object_body(out, obj)


def read_object(inp: BinaryIO) -> Any:
    """Read an object whose object-create code has already been consumed.

    Numbers always come back as integers.
    """
    kind = read_code(inp)
    if kind == ObjectCode.STR:
        return read_id(inp)
    if kind == ObjectCode.BOOL:
        return _read_exact(inp, 1)[0] == _BOOL_TRUE
    if kind == ObjectCode.ARRAY:
        items = []
        for _ in range(_read_count(inp)):
            code = read_code(inp)
            if code not in (RTCode.RTINTOBJCREATE, RTCode.RTOBJCREATE):
                raise RTCodeError(f"Unexpected code {code:#04x} in array")
            items.append(read_object(inp))
        return items
    if kind == ObjectCode.NUM:
        (value,) = _FLOAT.unpack(_read_exact(inp, _FLOAT.size))
        return Num(NumType.INT, int(value))
    raise RTCodeError(f"Cannot read object with code {kind:#04x}")
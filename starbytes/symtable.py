"""Symbol tables: entries per scope, lookup and public serialization."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Iterator, Optional

from .astnodes import ASTType, GLOBAL_SCOPE, Region, Scope, Stmt
from .diagnostic import (
    Diagnostic,
    DiagnosticHandler,
    Severity,
    create_error,
    create_warning,
)

TABLE_START = 0xA0
IMPORT_SYMTABLE = 0x0B
DECLARE_SCOPE = 0xC0
TYPE_EXPR = 0xD0
DECLARE_TYPE = 0xE0

VAR_ENTRY = 0x01
FUNC_ENTRY = 0x02
CLASS_ENTRY = 0x03
INTERFACE_ENTRY = 0x04

TABLE_END = 0xFF

_SIZE = struct.Struct("<Q")


class EntryType(enum.Enum):
    VAR = "var"
    CLASS = "class"
    INTERFACE = "interface"
    SCOPE = "scope"
    FUNCTION = "function"


@dataclass(eq=False)
class VarInfo:
    type: Optional[ASTType] = None


@dataclass(eq=False)
class FunctionInfo:
    func_type: Optional[ASTType] = None
    return_type: Optional[ASTType] = None
    param_map: dict[str, ASTType] = field(default_factory=dict)


@dataclass(eq=False)
class ClassInfo:
    class_type: Optional[ASTType] = None
    inst_methods: list[FunctionInfo] = field(default_factory=list)
    fields: list[VarInfo] = field(default_factory=list)


@dataclass(eq=False)
class Entry:
    name: str
    type: EntryType
    data: Any = None
    interface_pos: Region = field(default_factory=Region)
    source_pos: Region = field(default_factory=Region)


@dataclass
class SemanticsContext:
    err_stream: DiagnosticHandler
    current_stmt: Optional[Stmt] = None


def semantic_diagnostic(message: str, stmt: Optional[Stmt], severity: Severity) -> Diagnostic:
    """Build a diagnostic about *stmt* with the given severity."""
    if severity is Severity.WARNING:
        return create_warning(message)
    return create_error(message)


def _write_id(out: BinaryIO, text: str) -> None:
    data = text.encode("utf-8")
    out.write(_SIZE.pack(len(data)))
    out.write(data)


def _write_code(out: BinaryIO, code: int) -> None:
    out.write(bytes([code]))


def _render_scope(scope: Scope, out: BinaryIO) -> None:
    _write_code(out, DECLARE_SCOPE)
    _write_id(out, scope.name)
    parent = scope.parent if scope.parent is not None else GLOBAL_SCOPE
    _write_id(out, parent.name)


def _export_type(type_: ASTType, out: BinaryIO) -> None:
    _write_code(out, DECLARE_TYPE)
    _write_id(out, type_.name)


def _ancestors(scope: Optional[Scope]) -> Iterator[Scope]:
    current = scope.parent if scope is not None else None
    while current is not None and current is not GLOBAL_SCOPE:
        yield current
        current = current.parent


class SymbolTable:
    """Entries of one module, each bound to the scope it was declared in."""

    def __init__(self) -> None:
        self.body: list[tuple[Entry, Scope]] = []
        self.deps: list[str] = []

    def import_module(self, module_name: str) -> None:
        self.deps.append(module_name)

    def add_symbol_in_scope(self, entry: Entry, scope: Scope) -> None:
        self.body.append((entry, scope))

    def symbol_exists(self, name: str, scope: Scope) -> bool:
        return self.index_of(name, scope) is not None

    def index_of(self, name: str, scope: Scope) -> Optional[int]:
        """Position of the first entry called *name* in *scope*, or None."""
        return next(
            (i for i, (entry, s) in enumerate(self.body) if entry.name == name and s is scope),
            None,
        )

    def serialize_public(self, out: BinaryIO) -> None:
        """Write dependencies, the scopes in use and the public entries."""
        exported: list[Scope] = []

        def export_scope(scope: Optional[Scope]) -> None:
            if scope is None or scope is GLOBAL_SCOPE:
                return
            if any(s is scope for s in exported):
                return
            _render_scope(scope, out)
            exported.append(scope)

        out.write(_SIZE.pack(len(self.deps)))
        for dep in self.deps:
            _write_id(out, dep)
        _write_code(out, TABLE_START)
        for entry, scope in self.body:
            for ancestor in reversed(list(_ancestors(scope))):
                export_scope(ancestor)
            export_scope(scope)
            if entry.type is EntryType.CLASS:
                _write_code(out, CLASS_ENTRY)
                info = entry.data
                class_type = info.class_type if isinstance(info, ClassInfo) else None
                _export_type(class_type or ASTType(entry.name), out)
            elif entry.type is EntryType.FUNCTION:
                _write_code(out, FUNC_ENTRY)
        _write_code(out, TABLE_END)


@dataclass
class STableContext:
    """The module's own table together with tables of imported modules."""

    main: SymbolTable = field(default_factory=SymbolTable)
    other_tables: list[SymbolTable] = field(default_factory=list)

    def has_table(self, table: SymbolTable) -> bool:
        return table is self.main or any(t is table for t in self.other_tables)

    def find_entry(self, name: str, ctxt: SemanticsContext, scope: Scope) -> Optional[Entry]:
        """Find the single entry called *name* in *scope*, reporting failures."""
        matches = [
            entry
            for table in (self.main, *self.other_tables)
            for entry, s in table.body
            if entry.name == name and s is scope
        ]
        if len(matches) > 1:
            message = f"Multiple symbol defined with the same name (`{name}`) in a scope."
        elif not matches:
            message = f"Undefined symbol `{name}`"
        else:
            return matches[-1]
        ctxt.err_stream.push(semantic_diagnostic(message, ctxt.current_stmt, Severity.ERROR))
        return None
"""Writes a readable tree of syntax nodes to a text stream."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .astnodes import (
    ASTStreamConsumer,
    BlockStmt,
    ConditionalDecl,
    Decl,
    Expr,
    FuncDecl,
    Identifier,
    ImportDecl,
    LiteralExpr,
    NodeType,
    ReturnDecl,
    Stmt,
    VarDecl,
)


def _pad(level: int) -> str:
    return "    " * level


def _format_number(literal: LiteralExpr) -> str:
    if literal.int_value is not None:
        return str(literal.int_value)
    return f"{literal.float_value:g}"


class ASTDumper(ASTStreamConsumer):
    """Prints every consumed statement and declaration as an indented tree."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out if out is not None else sys.stdout

    @classmethod
    def to_stdout(cls) -> "ASTDumper":
        return cls(sys.stdout)

    def accepts_symbol_table_context(self) -> bool:
        return False

    def consume_decl(self, decl: Decl) -> None:
        self.print_decl(decl, 0)

    def consume_stmt(self, stmt: Stmt) -> None:
        self.print_stmt(stmt, 0)

    def _write(self, *parts: str) -> None:
        self.out.write("".join(parts))

    def _identifier(self, ident: Identifier, level: int) -> None:
        pad = _pad(level)
        self._write("Identifier : {\n", pad, '   value:"', ident.val, '"\n', pad, "}\n")

    def _print_block(self, block: BlockStmt, level: int) -> None:
        pad = _pad(level)
        self._write("BlockStmt : {\n", pad, "   nodes:[\n", _pad(level + 1))
        for node in block.body:
            if node.type is not None and node.type.is_decl:
                self.print_decl(node, level + 1)
            else:
                self.print_stmt(node, level + 1)
        self._write(pad, "  ]\n", pad, "}\n")

    def print_decl(self, decl: Decl, level: int) -> None:
        pad = _pad(level)
        inner = level + 1
        inner_pad = _pad(inner)
        match decl.type:
            case NodeType.IMPORT_DECL:
                assert isinstance(decl, ImportDecl)
                self._write("ImportDecl : {\n", pad, "   module_name:")
                self._identifier(decl.module_name, inner)
                self._write(pad, "}\n")
            case NodeType.VAR_DECL:
                assert isinstance(decl, VarDecl)
                self._write("VarDecl : {\n", pad, "   vars: [\n")
                for spec in decl.specs:
                    self._write(inner_pad, "VarSpec : {\n", inner_pad, "   identifier:")
                    self._identifier(spec.id, inner + 1)
                    if spec.type is not None:
                        self._write(inner_pad, "   type:", spec.type.name, "\n")
                    if spec.expr is not None:
                        self._write(inner_pad, "   initialVal:")
                        self.print_stmt(spec.expr, inner + 1)
                    self._write(inner_pad, "}\n")
                self._write(pad, "  ]\n", pad, "}\n")
            case NodeType.FUNC_DECL:
                assert isinstance(decl, FuncDecl)
                self._write("FuncDecl : {\n", pad, "   id:")
                self._identifier(decl.func_id, inner)
                self._write(pad, "   params:[\n")
                for param_id, param_type in decl.params.items():
                    self._write(inner_pad, "ParamDecl : {\n", inner_pad, "   id:")
                    self._identifier(param_id, inner + 1)
                    self._write(inner_pad, "   type:", param_type.name, "\n")
                    self._write(inner_pad, "}\n")
                self._write(pad, "  ]\n", pad, "   body:")
                self._print_block(decl.block, inner)
                self._write(pad, "}\n")
            case NodeType.COND_DECL:
                assert isinstance(decl, ConditionalDecl)
                for index, cond in enumerate(decl.specs):
                    if cond.is_else():
                        self._write("ElseDecl : {\n", pad, "   block:")
                    else:
                        self._write("IfDecl : {\n" if index == 0 else "ElifDecl : {\n")
                        self._write(pad, "   expr:")
                        self.print_stmt(cond.expr, inner)
                        self._write(pad, "   block:")
                    self._print_block(cond.block, inner)
                    self._write(pad, "}\n")
            case NodeType.RETURN_DECL:
                assert isinstance(decl, ReturnDecl)
                self._write("ReturnDecl : {\n")
                if decl.expr is not None:
                    self._write(pad, "   expr:")
                    self.print_stmt(decl.expr, inner)
                self._write(pad, "}\n")
            case _:
                pass

    def print_stmt(self, stmt: Stmt, level: int) -> None:
        pad = _pad(level)
        inner = level + 1
        inner_pad = _pad(inner)
        match stmt.type:
            case NodeType.ID_EXPR:
                assert isinstance(stmt, Expr)
                self._write("IdentifierExpr: {\n", pad, "   id:")
                self._identifier(stmt.id, inner)
                self._write(pad, "}\n")
            case NodeType.IVKE_EXPR:
                assert isinstance(stmt, Expr)
                self._write("InvokeExpr: {\n", pad, "   callee:")
                self.print_stmt(stmt.callee, inner)
                self._write(pad, "   args:[\n")
                for arg in stmt.expr_array_data:
                    self._write(inner_pad)
                    self.print_stmt(arg, inner)
                self._write(pad, "   ]\n", pad, "}\n")
            case NodeType.ARRAY_EXPR:
                assert isinstance(stmt, Expr)
                self._write("ArrayExpr : {\n", pad, "   objects:[\n")
                for arg in stmt.expr_array_data:
                    self._write(inner_pad)
                    self.print_stmt(arg, inner)
                self._write(pad, "   ]\n", pad, "}\n")
            case NodeType.STR_LITERAL:
                assert isinstance(stmt, LiteralExpr)
                self._write("StrLiteral: {\n", pad, '   value:"', stmt.str_value, '"\n', pad, "}\n\n")
            case NodeType.BOOL_LITERAL:
                assert isinstance(stmt, LiteralExpr)
                value = "true" if stmt.bool_value else "false"
                self._write("BoolLiteral: {\n", pad, '   value:"', value, '"\n', pad, "}\n\n")
            case NodeType.NUM_LITERAL:
                assert isinstance(stmt, LiteralExpr)
                self._write("NumLiteral: {\n", pad, "   value:", _format_number(stmt), "\n", pad, "}\n\n")
            case _:
                pass
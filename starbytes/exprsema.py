"""Works out the type of an expression."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .astnodes import (
    ARRAY_TYPE,
    ASTType,
    BOOL_TYPE,
    Expr,
    FLOAT_TYPE,
    INT_TYPE,
    Identifier,
    LiteralExpr,
    NodeType,
    STRING_TYPE,
    Scope,
    ScopeType,
    SymbolType,
    VOID_TYPE,
)
from .diagnostic import DiagnosticHandler, Severity
from .symtable import (
    EntryType,
    FunctionInfo,
    STableContext,
    SemanticsContext,
    VarInfo,
    semantic_diagnostic,
)

PRINT_FUNC_ID = "print"
EXIT_FUNC_ID = "exit"

PRINT_FUNC_TYPE = ASTType(PRINT_FUNC_ID)
EXIT_FUNC_TYPE = ASTType(EXIT_FUNC_ID)


@dataclass
class ScopeContext:
    """The scope being checked and, inside a function, its parameters."""

    scope: Scope
    args: Optional[dict[Identifier, ASTType]] = None


def builtin_type(identifier: Identifier) -> Optional[ASTType]:
    """The type of a built-in function named by *identifier*, if any."""
    if identifier.val == PRINT_FUNC_ID:
        return PRINT_FUNC_TYPE
    return None


class ExpressionEvaluator:
    """Evaluates expressions to their types, reporting problems to a handler."""

    def __init__(self, err_stream: DiagnosticHandler) -> None:
        self.err_stream = err_stream

    def _error(self, message: str, stmt: Expr) -> None:
        self.err_stream.push(semantic_diagnostic(message, stmt, Severity.ERROR))

    def eval_expr(
        self,
        expr: Expr,
        table_context: STableContext,
        scope_context: ScopeContext,
    ) -> Optional[ASTType]:
        """Return the type of *expr*, or None when it cannot be typed."""
        kind = expr.type
        if kind is NodeType.ID_EXPR:
            return self._eval_identifier(expr, table_context, scope_context)
        if kind is NodeType.ARRAY_EXPR:
            return ARRAY_TYPE
        if kind is NodeType.BOOL_LITERAL:
            return BOOL_TYPE
        if kind is NodeType.STR_LITERAL:
            return STRING_TYPE
        if kind is NodeType.NUM_LITERAL:
            assert isinstance(expr, LiteralExpr)
            return INT_TYPE if expr.int_value is not None else FLOAT_TYPE
        if kind is NodeType.IVKE_EXPR:
            return self._eval_invoke(expr, table_context, scope_context)
        return None

    def _eval_identifier(
        self,
        expr: Expr,
        table_context: STableContext,
        scope_context: ScopeContext,
    ) -> Optional[ASTType]:
        ident = expr.id
        builtin = builtin_type(ident)
        if builtin is not None:
            ident.symbol_type = SymbolType.FUNCTION
            return builtin

        if scope_context.scope.type is ScopeType.FUNCTION and scope_context.args:
            for arg_id, arg_type in scope_context.args.items():
                if arg_id.match(ident):
                    return arg_type

        ctxt = SemanticsContext(self.err_stream, expr)
        entry = table_context.find_entry(ident.val, ctxt, scope_context.scope)
        if entry is None:
            return None
        if entry.type is EntryType.VAR:
            ident.symbol_type = SymbolType.VAR
            info = entry.data
            return info.type if isinstance(info, VarInfo) else None
        if entry.type is EntryType.FUNCTION:
            ident.symbol_type = SymbolType.FUNCTION
            info = entry.data
            return info.func_type if isinstance(info, FunctionInfo) else None
        self._error(
            "Identifier in this context cannot identify any other symbol type "
            "except another variable.",
            expr,
        )
        return None

    def _eval_invoke(
        self,
        expr: Expr,
        table_context: STableContext,
        scope_context: ScopeContext,
    ) -> Optional[ASTType]:
        func_type = self.eval_expr(expr.callee, table_context, scope_context)
        if func_type is None:
            return None
        func_name = func_type.name
        args = expr.expr_array_data

        if func_name == PRINT_FUNC_ID:
            if len(args) > 1:
                self._error("Incorrect number of arguments", expr)
            for arg in args:
                if self.eval_expr(arg, table_context, scope_context) is None:
                    return None
            return VOID_TYPE

        ctxt = SemanticsContext(self.err_stream, expr)
        entry = table_context.find_entry(func_name, ctxt, scope_context.scope)
        if entry is None:
            return None
        if entry.type is not EntryType.FUNCTION or not isinstance(entry.data, FunctionInfo):
            self._error(f"Identifier `{entry.name}` does not identify a function", expr)
            return None
        info = entry.data
        if len(args) != len(info.param_map):
            self._error(
                f"Incorrect number of arguments. Expected {len(info.param_map)} args, "
                f"but got {len(args)}\nContext: Invocation of func `{func_name}`",
                expr,
            )
            return None
        for arg, param_type in zip(args, info.param_map.values()):
            arg_type = self.eval_expr(arg, table_context, scope_context)
            if arg_type is None:
                return None
            if not param_type.match(
                arg_type,
                lambda message, arg=arg: self._error(
                    f"{message}\nContext: Param in invocation of func `{func_name}`", arg
                ),
            ):
                return None
        return info.return_type
"""Semantic checks for declarations and statements, and symbol registration."""

from __future__ import annotations

from typing import Optional

from .astnodes import (
    ARRAY_TYPE,
    ASTType,
    BOOL_TYPE,
    BlockStmt,
    ClassDecl,
    ConditionalDecl,
    DICTIONARY_TYPE,
    Decl,
    Expr,
    FuncDecl,
    GLOBAL_SCOPE,
    INT_TYPE,
    NodeType,
    ReturnDecl,
    STRING_TYPE,
    Scope,
    ScopeType,
    Stmt,
    VOID_TYPE,
    VarDecl,
)
from .diagnostic import DiagnosticHandler, Severity
from .exprsema import ExpressionEvaluator, ScopeContext
from .symtable import (
    ClassInfo,
    Entry,
    EntryType,
    FunctionInfo,
    STableContext,
    SymbolTable,
    VarInfo,
    semantic_diagnostic,
)

_BUILTIN_TYPES = (VOID_TYPE, STRING_TYPE, ARRAY_TYPE, DICTIONARY_TYPE, BOOL_TYPE, INT_TYPE)


class SemanticError(Exception):
    """Raised when a declaration or block fails semantic checking."""


def _invoked_name(expr: Expr) -> str:
    if expr.callee is not None and expr.callee.id is not None:
        return expr.callee.id.val
    if expr.id is not None:
        return expr.id.val
    return ""


class SemanticAnalyzer:
    """Checks statements against a symbol table, reporting to a handler."""

    def __init__(self, err_stream: DiagnosticHandler) -> None:
        self.err_stream = err_stream
        self._evaluator = ExpressionEvaluator(err_stream)

    def _report(self, message: str, stmt: Optional[Stmt], severity: Severity = Severity.ERROR) -> None:
        self.err_stream.push(semantic_diagnostic(message, stmt, severity))

    def _eval(self, expr: Expr, table_context: STableContext, scope_context: ScopeContext) -> Optional[ASTType]:
        return self._evaluator.eval_expr(expr, table_context, scope_context)

    def add_stable_entry_for_decl(self, decl: Decl, table: SymbolTable) -> None:
        """Register the symbols a top level declaration introduces."""
        scope = decl.scope if decl.scope is not None else GLOBAL_SCOPE
        if isinstance(decl, VarDecl) and decl.type is NodeType.VAR_DECL:
            for spec in decl.specs:
                table.add_symbol_in_scope(
                    Entry(spec.id.val, EntryType.VAR, VarInfo(spec.type)), scope
                )
        elif isinstance(decl, FuncDecl) and decl.type is NodeType.FUNC_DECL:
            info = FunctionInfo(
                func_type=decl.func_type,
                return_type=decl.return_type,
                param_map={pid.val: ptype for pid, ptype in decl.params.items()},
            )
            table.add_symbol_in_scope(Entry(decl.func_id.val, EntryType.FUNCTION, info), scope)
        elif isinstance(decl, ClassDecl) and decl.type is NodeType.CLASS_DECL:
            info = ClassInfo(
                class_type=decl.class_type,
                inst_methods=[FunctionInfo(m.func_type, m.return_type) for m in decl.methods],
                fields=[VarInfo(spec.type) for f in decl.fields for spec in f.specs],
            )
            table.add_symbol_in_scope(Entry(decl.id.val, EntryType.CLASS, info), scope)

    def type_exists(self, type_: ASTType, table_context: STableContext, scope: Scope) -> bool:
        """Whether *type_* is one of the built-in types."""
        return any(type_ is builtin for builtin in _BUILTIN_TYPES)

    def type_matches(
        self,
        type_: ASTType,
        expr: Expr,
        table_context: STableContext,
        scope_context: ScopeContext,
    ) -> bool:
        """Whether the type implied by *expr* matches the declared *type_*."""
        implied = self._eval(expr, table_context, scope_context)
        if implied is None:
            return False

        def on_error(message: str) -> None:
            self._report(
                f"{message}\nContext: Type `{implied.name}`was implied from var initializer",
                expr,
            )

        return type_.match(implied, on_error)

    def eval_generic_decl(
        self,
        decl: Decl,
        table_context: STableContext,
        scope_context: ScopeContext,
    ) -> Optional[ASTType]:
        """Check a variable or conditional declaration.

        Returns the return type a conditional implies inside a function,
        otherwise None. Raises SemanticError on failure.
        """
        if decl.type is NodeType.VAR_DECL:
            assert isinstance(decl, VarDecl)
            for spec in decl.specs:
                if spec.type is not None and spec.expr is not None:
                    if not self.type_matches(spec.type, spec.expr, table_context, scope_context):
                        raise SemanticError(f"Type mismatch for variable `{spec.id.val}`")
                elif spec.type is None and spec.expr is None:
                    message = (
                        f"Variable `{spec.id.val}` has no type assignment nor an initial value "
                        "thus the variable's type cannot be deduced."
                    )
                    self._report(message, decl)
                    raise SemanticError(message)
                elif spec.expr is not None:
                    implied = self._eval(spec.expr, table_context, scope_context)
                    if implied is None:
                        raise SemanticError(f"Cannot deduce type of variable `{spec.id.val}`")
                    spec.type = implied
            return None

        if decl.type is NodeType.COND_DECL:
            assert isinstance(decl, ConditionalDecl)
            result: Optional[ASTType] = None
            for cond in decl.specs:
                if not cond.is_else():
                    cond_type = self._eval(cond.expr, table_context, scope_context)
                    if cond_type is None:
                        raise SemanticError("Cannot evaluate condition")
                    if not cond_type.match(
                        BOOL_TYPE,
                        lambda _message, expr=cond.expr: self._report(
                            "Context: Expression was evaluated in as a conditional specifier", expr
                        ),
                    ):
                        raise SemanticError("Condition is not a Bool")
                block_type = self.eval_block(
                    cond.block, table_context, scope_context, scope_context.args is not None
                )
                if scope_context.scope.type is ScopeType.FUNCTION:
                    result = block_type
            return result

        raise SemanticError(f"Unsupported declaration: {decl.type}")

    def eval_block(
        self,
        block: BlockStmt,
        table_context: STableContext,
        scope_context: ScopeContext,
        in_func: bool = False,
    ) -> Optional[ASTType]:
        """Check every statement of *block* and work out its return type.

        The type is returned only for a block whose scope is a function.
        Raises SemanticError on failure.
        """
        main_return: Optional[ASTType] = None
        for node in block.body:
            if main_return is not None:
                self._report("The code here and below is unreachable.", node, Severity.WARNING)
                break
            if node.type is not None and node.type.is_decl:
                if node.type is NodeType.RETURN_DECL:
                    assert isinstance(node, ReturnDecl)
                    if not in_func:
                        message = "Cannot declare a return outside of a func scope."
                        self._report(message, node)
                        raise SemanticError(message)
                    if node.expr is None:
                        main_return = VOID_TYPE
                        continue
                    ret_type = self._eval(node.expr, table_context, scope_context)
                    if ret_type is None:
                        raise SemanticError("Cannot evaluate return value")
                    main_return = ret_type
                else:
                    self.eval_generic_decl(node, table_context, scope_context)
            else:
                assert isinstance(node, Expr)
                node_type = self._eval(node, table_context, scope_context)
                if node_type is None:
                    raise SemanticError("Cannot evaluate expression")
                if node.type is NodeType.IVKE_EXPR and node_type is not VOID_TYPE:
                    self._report(
                        f"Func `{_invoked_name(node)}` returns a value but is not being stored by a variable.",
                        node,
                        Severity.WARNING,
                    )
        return_type = main_return if main_return is not None else VOID_TYPE
        if block.parent_scope is not None and block.parent_scope.type is ScopeType.FUNCTION:
            return return_type
        return None

    def _check_func(self, func: FuncDecl, table_context: STableContext, scope: Scope) -> bool:
        name = func.func_id.val
        if table_context.main.symbol_exists(name, scope):
            self._report(f"Func `{name}` is already defined in this scope.", func)
            return False
        for param_type in func.params.values():
            if not self.type_exists(param_type, table_context, scope):
                return False
        func_context = ScopeContext(func.block.parent_scope, func.params)
        try:
            implied = self.eval_block(func.block, table_context, func_context, True)
        except SemanticError:
            return False
        if func.return_type is not None:
            def on_error(message: str) -> None:
                self._report(
                    f"{message}\nContext: Declared return type of func `{name}` "
                    "does not match implied return type.",
                    func,
                )

            return func.return_type.match(implied, on_error)
        func.return_type = implied
        return True

    def _check_class(self, cls: ClassDecl, table_context: STableContext, scope: Scope) -> bool:
        if scope.type not in (ScopeType.NAMESPACE, ScopeType.NEUTRAL):
            self._report("Class decl not allowed in class scope", cls)
            return False
        if table_context.main.symbol_exists(cls.id.val, scope):
            self._report(f"Class `{cls.id.val}` is already defined in this scope.", cls)
            return False
        class_scope = cls.scope if cls.scope is not None else scope
        class_context = ScopeContext(class_scope)
        try:
            for f in cls.fields:
                self.eval_generic_decl(f, table_context, class_context)
        except SemanticError:
            return False
        return all(
            self.check_symbols_in_scope(m, table_context, class_scope) for m in cls.methods
        )

    def check_symbols_in_scope(self, stmt: Stmt, table_context: STableContext, scope: Scope) -> bool:
        """Check *stmt* as if written in *scope*; False when it fails."""
        scope_context = ScopeContext(scope)
        kind = stmt.type
        if kind is None:
            return True
        if kind.is_decl:
            if kind is NodeType.FUNC_DECL:
                assert isinstance(stmt, FuncDecl)
                return self._check_func(stmt, table_context, scope)
            if kind is NodeType.CLASS_DECL:
                assert isinstance(stmt, ClassDecl)
                return self._check_class(stmt, table_context, scope)
            if kind is NodeType.RETURN_DECL:
                self._report("Return can not be declared in a namespace scope", stmt)
                return False
            if kind in (NodeType.VAR_DECL, NodeType.COND_DECL):
                try:
                    self.eval_generic_decl(stmt, table_context, scope_context)
                except SemanticError:
                    return False
            return True
        if kind is NodeType.IVKE_EXPR:
            assert isinstance(stmt, Expr)
            return_type = self._eval(stmt, table_context, scope_context)
            if return_type is None:
                return False
            if return_type is not VOID_TYPE:
                self._report(
                    f"Func `{_invoked_name(stmt)}` returns a value but is not being stored by a variable.",
                    stmt,
                    Severity.WARNING,
                )
                return False
        return True

    def check_symbols_for_stmt(self, stmt: Stmt, table_context: STableContext) -> bool:
        """Check a top level statement in the global scope."""
        return self.check_symbols_in_scope(stmt, table_context, GLOBAL_SCOPE)
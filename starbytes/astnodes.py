"""Syntax tree nodes, scopes and types."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

_DECL = 0x100
_EXPR = 0x200
_LITERAL = 0x400


class NodeType(enum.Enum):
    IMPORT_DECL = _DECL | 0x01
    VAR_DECL = _DECL | 0x02
    FUNC_DECL = _DECL | 0x03
    CLASS_DECL = _DECL | 0x04
    INTERFACE_DECL = _DECL | 0x05
    COND_DECL = _DECL | 0x06
    RETURN_DECL = _DECL | 0x07
    WHILE_DECL = _DECL | 0x08
    FOR_DECL = _DECL | 0x09
    ID_EXPR = _EXPR | 0x01
    MEMBER_EXPR = _EXPR | 0x02
    IVKE_EXPR = _EXPR | 0x03
    ARRAY_EXPR = _EXPR | 0x04
    DICT_EXPR = _EXPR | 0x05
    ASSIGN_EXPR = _EXPR | 0x06
    UNARY_EXPR = _EXPR | 0x07
    BINARY_EXPR = _EXPR | 0x08
    STR_LITERAL = _EXPR | _LITERAL | 0x01
    BOOL_LITERAL = _EXPR | _LITERAL | 0x02
    NUM_LITERAL = _EXPR | _LITERAL | 0x03

    @property
    def is_decl(self) -> bool:
        return bool(self.value & _DECL)

    @property
    def is_expr(self) -> bool:
        return bool(self.value & _EXPR)

    @property
    def is_literal(self) -> bool:
        return bool(self.value & _LITERAL)


class ScopeType(enum.Enum):
    NEUTRAL = "neutral"
    NAMESPACE = "namespace"
    FUNCTION = "function"
    CLASS = "class"


@dataclass(eq=False)
class Scope:
    """A named scope; scopes compare by identity."""

    name: str
    type: ScopeType = ScopeType.NEUTRAL
    parent: Optional["Scope"] = None


GLOBAL_SCOPE = Scope("GLOBAL", ScopeType.NEUTRAL)


class CommentType(enum.Enum):
    LINE = "line"
    BLOCK = "block"


@dataclass
class Comment:
    val: str = ""
    type: CommentType = CommentType.LINE


@dataclass
class Region:
    start_col: int = 0
    start_line: int = 0
    end_col: int = 0
    end_line: int = 0


@dataclass(eq=False, kw_only=True)
class Stmt:
    type: Optional[NodeType] = None
    scope: Optional[Scope] = None
    before_comments: list[Comment] = field(default_factory=list)
    after_comments: list[Comment] = field(default_factory=list)
    code_region: Region = field(default_factory=Region)
    parent_file: str = ""


class SymbolType(enum.Enum):
    CLASS = "class"
    FUNCTION = "function"
    VAR = "var"


@dataclass(eq=False, kw_only=True)
class Identifier(Stmt):
    val: str = ""
    symbol_type: Optional[SymbolType] = None

    def match(self, other: "Identifier") -> bool:
        return self.val == other.val


@dataclass(eq=False, kw_only=True)
class Expr(Stmt):
    id: Optional[Identifier] = None
    callee: Optional["Expr"] = None
    operator: Optional[str] = None
    left_expr: Optional["Expr"] = None
    right_expr: Optional["Expr"] = None
    expr_array_data: list["Expr"] = field(default_factory=list)
    dict_expr: dict["Expr", "Expr"] = field(default_factory=dict)


@dataclass(eq=False, kw_only=True)
class LiteralExpr(Expr):
    str_value: Optional[str] = None
    bool_value: Optional[bool] = None
    int_value: Optional[int] = None
    float_value: Optional[float] = None


@dataclass(eq=False)
class BlockStmt:
    """A sequence of statements that opens a new scope."""

    parent_scope: Optional[Scope] = None
    body: list[Stmt] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class Decl(Stmt):
    pass


@dataclass(eq=False, kw_only=True)
class ImportDecl(Decl):
    type: Optional[NodeType] = NodeType.IMPORT_DECL
    module_name: Optional[Identifier] = None


@dataclass(eq=False)
class VarSpec:
    id: Identifier
    type: Optional["ASTType"] = None
    expr: Optional[Expr] = None


@dataclass(eq=False, kw_only=True)
class VarDecl(Decl):
    type: Optional[NodeType] = NodeType.VAR_DECL
    is_const: bool = False
    specs: list[VarSpec] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class FuncDecl(Decl):
    type: Optional[NodeType] = NodeType.FUNC_DECL
    func_id: Optional[Identifier] = None
    func_type: Optional["ASTType"] = None
    return_type: Optional["ASTType"] = None
    params: dict[Identifier, "ASTType"] = field(default_factory=dict)
    block: Optional[BlockStmt] = None


@dataclass(eq=False, kw_only=True)
class ClassDecl(Decl):
    type: Optional[NodeType] = NodeType.CLASS_DECL
    id: Optional[Identifier] = None
    class_type: Optional["ASTType"] = None
    fields: list[VarDecl] = field(default_factory=list)
    methods: list[FuncDecl] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ReturnDecl(Decl):
    type: Optional[NodeType] = NodeType.RETURN_DECL
    expr: Optional[Expr] = None


@dataclass(eq=False)
class CondSpec:
    """One branch of a conditional; a branch without a condition is an else."""

    expr: Optional[Expr] = None
    block: Optional[BlockStmt] = None

    def is_else(self) -> bool:
        return self.expr is None


@dataclass(eq=False, kw_only=True)
class ConditionalDecl(Decl):
    type: Optional[NodeType] = NodeType.COND_DECL
    specs: list[CondSpec] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class WhileDecl(Decl):
    type: Optional[NodeType] = NodeType.WHILE_DECL
    expr: Optional[Expr] = None
    block: Optional[BlockStmt] = None


@dataclass(eq=False)
class ASTType:
    """A named type with optional type parameters; compared by identity."""

    name: str
    parent_node: Optional[Stmt] = field(default=None, repr=False)
    is_placeholder: bool = True
    is_alias: bool = False
    type_params: list["ASTType"] = field(default_factory=list)

    def add_type_param(self, type_: "ASTType") -> None:
        self.type_params.append(type_)

    def name_matches(self, other: "ASTType") -> bool:
        return self.name == other.name

    def match(self, other: Optional["ASTType"], on_error: Callable[[str], Any]) -> bool:
        """Compare by name and type parameters, reporting a mismatch to *on_error*."""
        if other is None:
            on_error(f"Type `{self.format()}` cannot be matched with an unknown type.")
            return False
        if not self.name_matches(other) or len(self.type_params) != len(other.type_params):
            on_error(f"Type `{self.format()}` does not match type `{other.format()}`.")
            return False
        for mine, theirs in zip(self.type_params, other.type_params):
            if not mine.match(theirs, on_error):
                return False
        return True

    def format(self) -> str:
        if not self.type_params:
            return self.name
        return f"{self.name}<{','.join(p.format() for p in self.type_params)}>"


VOID_TYPE = ASTType("Void", is_placeholder=False)
STRING_TYPE = ASTType("String", is_placeholder=False)
ARRAY_TYPE = ASTType("Array", is_placeholder=False)
DICTIONARY_TYPE = ASTType("Dictionary", is_placeholder=False)
BOOL_TYPE = ASTType("Bool", is_placeholder=False)
INT_TYPE = ASTType("Int", is_placeholder=False)
FLOAT_TYPE = ASTType("Float", is_placeholder=False)


class ASTStreamConsumer(abc.ABC):
    """Receives statements and declarations as the parser produces them."""

    table_context: Any = None

    @abc.abstractmethod
    def accepts_symbol_table_context(self) -> bool:
        """Whether this consumer wants the module's symbol table."""

    def consume_stable_context(self, table: Any) -> None:
        """Keep the symbol table context for later use."""
        self.table_context = table

    @abc.abstractmethod
    def consume_stmt(self, stmt: Stmt) -> None:
        """Handle a statement that is not a declaration."""

    @abc.abstractmethod
    def consume_decl(self, decl: Decl) -> None:
        """Handle a declaration."""
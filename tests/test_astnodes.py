import pytest

from starbytes.astnodes import (
    ARRAY_TYPE,
    STRING_TYPE,
    VOID_TYPE,
    ASTStreamConsumer,
    ASTType,
    CondSpec,
    ConditionalDecl,
    FuncDecl,
    Identifier,
    LiteralExpr,
    NodeType,
    VarDecl,
    VarSpec,
)


def test_identifier_match():
    assert Identifier(val="x").match(Identifier(val="x"))
    assert not Identifier(val="x").match(Identifier(val="y"))


def test_cond_spec_is_else():
    assert CondSpec().is_else()
    assert not CondSpec(expr=LiteralExpr(type=NodeType.BOOL_LITERAL, bool_value=True)).is_else()


def test_node_type_categories():
    decl_type = VarDecl().type
    assert decl_type.is_decl
    assert not decl_type.is_expr
    literal_type = LiteralExpr(type=NodeType.STR_LITERAL).type
    assert literal_type.is_literal and literal_type.is_expr
    assert FuncDecl().type.is_decl


def test_decl_default_types():
    assert VarDecl().type is NodeType.VAR_DECL
    assert FuncDecl().type is NodeType.FUNC_DECL
    assert ConditionalDecl().type is NodeType.COND_DECL


def test_type_format_with_params():
    t = ASTType("Array")
    t.add_type_param(STRING_TYPE)
    assert t.format() == "Array<String>"
    assert VOID_TYPE.format() == "Void"


def test_type_match_success():
    errors = []
    assert ASTType("String").match(STRING_TYPE, errors.append)
    assert errors == []


def test_type_match_failure_reports():
    errors = []
    assert not STRING_TYPE.match(ARRAY_TYPE, errors.append)
    assert len(errors) == 1


def test_type_match_none_reports():
    errors = []
    assert not STRING_TYPE.match(None, errors.append)
    assert len(errors) == 1


def test_name_matches_ignores_identity():
    assert ASTType("Bool").name_matches(ASTType("Bool"))
    assert ASTType("Bool") is not ASTType("Bool")


def test_repr_of_cyclic_nodes_terminates():
    decl = VarDecl()
    spec = VarSpec(Identifier(val="x"), ASTType("String", parent_node=decl))
    decl.specs.append(spec)
    assert "String" in repr(decl)


def test_stream_consumer_is_abstract():
    with pytest.raises(TypeError):
        ASTStreamConsumer()


def test_stream_consumer_stores_table():
    class Collector(ASTStreamConsumer):
        def __init__(self):
            self.seen = []

        def accepts_symbol_table_context(self):
            return True

        def consume_stmt(self, stmt):
            self.seen.append(stmt)

        def consume_decl(self, decl):
            self.seen.append(decl)

    c = Collector()
    table = object()
    c.consume_stable_context(table)
    decl = VarDecl()
    c.consume_decl(decl)
    assert c.table_context is table
    assert c.seen == [decl]
import io

from starbytes.astnodes import (
    INT_TYPE,
    STRING_TYPE,
    BlockStmt,
    CondSpec,
    ConditionalDecl,
    Expr,
    FuncDecl,
    Identifier,
    ImportDecl,
    LiteralExpr,
    NodeType,
    ReturnDecl,
    VarDecl,
    VarSpec,
    WhileDecl,
)
from starbytes.dumper import ASTDumper


def id_expr(name):
    return Expr(type=NodeType.ID_EXPR, id=Identifier(val=name))


def str_lit(text):
    return LiteralExpr(type=NodeType.STR_LITERAL, str_value=text)


def bool_lit(value):
    return LiteralExpr(type=NodeType.BOOL_LITERAL, bool_value=value)


def dump_stmt(stmt, level=0):
    out = io.StringIO()
    ASTDumper(out).print_stmt(stmt, level)
    return out.getvalue()


def dump_decl(decl, level=0):
    out = io.StringIO()
    ASTDumper(out).print_decl(decl, level)
    return out.getvalue()


def test_identifier_expr_exact_output():
    assert dump_stmt(id_expr("foo")) == (
        'IdentifierExpr: {\n   id:Identifier : {\n       value:"foo"\n    }\n}\n'
    )


def test_str_literal():
    text = dump_stmt(str_lit("hi"))
    assert text.startswith("StrLiteral: {\n")
    assert '   value:"hi"\n' in text
    assert text.endswith("}\n\n")


def test_bool_literal_false():
    assert 'value:"false"' in dump_stmt(bool_lit(False))
    assert 'value:"true"' in dump_stmt(bool_lit(True))


def test_num_literals():
    int_text = dump_stmt(LiteralExpr(type=NodeType.NUM_LITERAL, int_value=42))
    float_text = dump_stmt(LiteralExpr(type=NodeType.NUM_LITERAL, float_value=1.5))
    assert "   value:42\n" in int_text
    assert "   value:1.5\n" in float_text


def test_does_not_accept_symbol_table():
    assert ASTDumper(io.StringIO()).accepts_symbol_table_context() is False


def test_var_decl():
    decl = VarDecl(
        specs=[
            VarSpec(
                id=Identifier(val="count"),
                type=INT_TYPE,
                expr=LiteralExpr(type=NodeType.NUM_LITERAL, int_value=3),
            )
        ]
    )
    text = dump_decl(decl)
    assert text.startswith("VarDecl : {\n")
    assert "VarSpec : {" in text
    assert "type:Int" in text
    assert "initialVal:NumLiteral: {" in text
    assert 'value:"count"' in text


def test_conditional_order():
    decl = ConditionalDecl(
        specs=[
            CondSpec(expr=bool_lit(True), block=BlockStmt()),
            CondSpec(expr=bool_lit(False), block=BlockStmt()),
            CondSpec(block=BlockStmt()),
        ]
    )
    text = dump_decl(decl)
    assert text.index("IfDecl") < text.index("ElifDecl") < text.index("ElseDecl")
    assert text.count("BlockStmt : {") == 3


def test_func_decl():
    decl = FuncDecl(
        func_id=Identifier(val="greet"),
        params={Identifier(val="name"): STRING_TYPE},
        block=BlockStmt(body=[ReturnDecl()]),
    )
    text = dump_decl(decl)
    assert text.startswith("FuncDecl : {\n")
    assert "ParamDecl : {" in text
    assert "type:String" in text
    assert "body:BlockStmt : {" in text
    assert "ReturnDecl : {" in text


def test_return_without_value():
    assert dump_decl(ReturnDecl()) == "ReturnDecl : {\n}\n"


def test_return_with_value():
    text = dump_decl(ReturnDecl(expr=str_lit("x")))
    assert "   expr:StrLiteral: {" in text


def test_invoke_expr_lists_args():
    expr = Expr(
        type=NodeType.IVKE_EXPR,
        callee=id_expr("print"),
        expr_array_data=[str_lit("a"), str_lit("b")],
    )
    text = dump_stmt(expr)
    assert text.startswith("InvokeExpr: {\n")
    assert "callee:IdentifierExpr: {" in text
    assert "args:[" in text
    assert text.count("StrLiteral: {") == 2


def test_array_expr():
    expr = Expr(type=NodeType.ARRAY_EXPR, expr_array_data=[bool_lit(True)])
    text = dump_stmt(expr)
    assert text.startswith("ArrayExpr : {\n")
    assert "objects:[" in text
    assert text.count("BoolLiteral") == 1


def test_import_decl():
    text = dump_decl(ImportDecl(module_name=Identifier(val="io")))
    assert "module_name:Identifier : {" in text
    assert 'value:"io"' in text


def test_unknown_decl_prints_nothing():
    assert dump_decl(WhileDecl()) == ""


def test_consume_matches_level_zero():
    out = io.StringIO()
    ASTDumper(out).consume_stmt(str_lit("same"))
    assert out.getvalue() == dump_stmt(str_lit("same"), 0)
    decl_out = io.StringIO()
    ASTDumper(decl_out).consume_decl(ReturnDecl())
    assert decl_out.getvalue() == dump_decl(ReturnDecl(), 0)


def test_to_stdout(capsys):
    ASTDumper.to_stdout().consume_stmt(id_expr("shown"))
    captured = capsys.readouterr().out
    assert "IdentifierExpr: {" in captured
    assert 'value:"shown"' in captured


def test_indentation_grows_with_level():
    deeper = dump_stmt(id_expr("a"), 2)
    shallow = dump_stmt(id_expr("a"), 0)
    assert len(deeper) > len(shallow)
    assert deeper.splitlines()[-1] == "        }"
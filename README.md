# starbytes

`starbytes` holds the middle stages of a compiler for the Starbytes
programming language: the syntax tree, symbol tables, semantic analysis,
and the binary runtime code format. It has no dependencies outside the
standard library.

## What is in the package

- **Syntax tree** (`starbytes.astnodes`): the node classes (`VarDecl`,
  `FuncDecl`, `ClassDecl`, `ConditionalDecl`, `ReturnDecl`, `ImportDecl`,
  `WhileDecl`, `Expr`, `LiteralExpr`, `Identifier`, `BlockStmt` and
  others), each tagged with a `NodeType`. Scopes are modelled by `Scope` and
  `ScopeType`, and the global scope is `GLOBAL_SCOPE`. Types are modelled by
  `ASTType`, with built-in instances such as `VOID_TYPE`, `STRING_TYPE`,
  `BOOL_TYPE`, `INT_TYPE` and `FLOAT_TYPE`. `ASTType.match` compares two
  types by name and type parameters and reports a mismatch through a
  callback. `ASTStreamConsumer` is the base class for anything that takes
  nodes one at a time.
- **Tree dump** (`starbytes.dumper`): `ASTDumper` is an `ASTStreamConsumer`
  that writes consumed declarations and statements as an indented tree to a
  text stream. `ASTDumper.to_stdout()` writes to standard output.
- **Symbol tables** (`starbytes.symtable`): a `SymbolTable` binds each
  `Entry` (variable, function or class) to the scope that declares it.
  `SymbolTable.serialize_public` writes the table's dependencies, scopes and
  public entries to a binary stream. `STableContext.find_entry` looks up a
  name across the module's table and any imported tables. It pushes an
  "Undefined symbol" or "Multiple symbol defined" diagnostic when the
  lookup fails.
- **Semantic analysis** (`starbytes.exprsema`, `starbytes.semantics`):
  - `ExpressionEvaluator.eval_expr` works out the type of an expression.
    It covers literals, arrays, identifiers, the built-in `print`, and calls
    to declared functions, where it checks the argument count and the
    parameter types.
  - `SemanticAnalyzer.check_symbols_for_stmt` checks a top-level statement
    in the global scope and returns `True` or `False`. Variables without a
    declared type get the type of their initializer. Functions without a
    declared return type get the type their body implies.
  - Warnings are issued for code after a `return` and for function results
    that are not stored.
  - `SemanticAnalyzer.add_stable_entry_for_decl` registers the symbols that a
    declaration introduces. `eval_generic_decl` and `eval_block` raise
    `SemanticError` when a check fails.
- **Runtime code format** (`starbytes.rtcode`): the `RTCode` and
  `ObjectCode` opcodes, plus readers and writers for identifiers
  (`write_id`/`read_id`), variables (`RTVar`), function templates
  (`RTFuncTemplate`), classes (`RTClass`) and constant objects
  (`write_object`/`read_object`).
  - Strings, booleans, lists and numbers are supported as constant objects.
  - Numbers are stored as doubles and are read back as integer `Num`
    values.
  - Truncated or malformed input raises `RTCodeError`.
- **Runtime values** (`starbytes.objects`):
  - `Num` is an integer or floating-point number, with `add`, `sub`,
    `convert_to` and `compare`.
  - `make_class` creates a `ClassType`, and `ClassObject` is an instance of
    one, with named properties.
  - `FuncRef` is a reference to a function template.
  - `Compare` is the result of a comparison; `compare_strings` compares two
    strings.
- **Diagnostics** (`starbytes.diagnostic`):
  - `DiagnosticHandler` collects `Diagnostic` objects made with
    `create_error` or `create_warning`.
  - `has_errored` tells whether any of them is an error, and `log_all`
    writes the errors through a `StreamLogger`.
  - `fmt_string` replaces `@{N}` placeholders with positional arguments.
- **Command line** (`starbytes.cmdline`): `CommandLineParser` handles an
  optional leading command followed by flags written as `--flag value` or
  `--flag=value`.
  - The type of each flag (string, int or bool) follows its default value.
  - `parse` returns a mapping of flag names to values.
  - When `--help` is given, it writes the help text and returns `None`
    instead.
  - Bad input raises `CommandLineError`.

## Examples

Formatting a message with positional placeholders:

```python
from starbytes.diagnostic import fmt_string

fmt_string("expected @{0} arguments, got @{1}", 2, 3)
# 'expected 2 arguments, got 3'
```

Checking a declaration and registering its symbol:

```python
from starbytes.astnodes import GLOBAL_SCOPE, Identifier, LiteralExpr, NodeType, VarDecl, VarSpec
from starbytes.diagnostic import DiagnosticHandler
from starbytes.semantics import SemanticAnalyzer
from starbytes.symtable import STableContext

analyzer = SemanticAnalyzer(DiagnosticHandler())
tables = STableContext()
decl = VarDecl(specs=[
    VarSpec(Identifier(val="x"), expr=LiteralExpr(type=NodeType.NUM_LITERAL, int_value=1)),
])
analyzer.check_symbols_for_stmt(decl, tables)       # True
decl.specs[0].type.name                              # 'Int'
analyzer.add_stable_entry_for_decl(decl, tables.main)
tables.main.symbol_exists("x", GLOBAL_SCOPE)         # True
```

Writing and reading an identifier in the runtime code format:

```python
import io
from starbytes.rtcode import read_id, write_id

buf = io.BytesIO()
write_id(buf, "main")
buf.seek(0)
read_id(buf)
# 'main'
```

Parsing a command line:

```python
from starbytes.cmdline import CommandLineParser

parser = CommandLineParser()
parser.command("build")
parser.flag("out", "a.out")
parser.parse(["build", "--out=x"])
# {'out': 'x'}
```

## What the package does not do

The package does not read Starbytes source text. It has no tokenizer and no
parser, so syntax trees must be built from the node classes directly. It
also does not walk a checked tree to produce runtime code or an interface
description of a module. `starbytes.rtcode` only reads and writes the
individual records of the format. There is no interpreter for runtime code
and no command to run.

## Requirements

Python 3.10 or newer. Install with the `test` extra to run the tests with
pytest.
"""Syntax tree, symbol tables, semantic analysis and runtime code format for the Starbytes language."""

__version__ = "0.4.0"
"""
Language — Bundled CUE-style configuration language

The session treats these as collaborators and only calls the entry
points re-exported here:
- parse_file / parse_expression (parser)
- build / evaluate_in_context / compile_unit (evaluator)
- render / render_file (formatter)

Supported: structs, lists, null/bool/int/float/string literals, basic
types (int, float, number, string, bool), `_` and `_|_`, references,
selectors, indexing, arithmetic, comparison, boolean operators,
unification with `&`, builtin packages (strings, math, list) and `len`.
"""

from .ast import File, ImportSpec, Field, Ident
from .parser import parse_file, parse_expression
from .evaluator import Instance, build, evaluate_in_context, compile_unit
from .format import render, render_file, render_source, format_label
from .values import (
    Value, Struct, ListValue, Scalar, TypeValue, Top, Bottom, Builtin, Package,
    unify, nest, from_python, to_python,
)

__all__ = [
    # Syntax
    'File', 'ImportSpec', 'Field', 'Ident',
    'parse_file', 'parse_expression',
    # Evaluation
    'Instance', 'build', 'evaluate_in_context', 'compile_unit',
    # Formatting
    'render', 'render_file', 'render_source', 'format_label',
    # Values
    'Value', 'Struct', 'ListValue', 'Scalar', 'TypeValue', 'Top', 'Bottom',
    'Builtin', 'Package', 'unify', 'nest', 'from_python', 'to_python',
]

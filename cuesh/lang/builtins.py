"""
Builtins — Predeclared functions and importable packages

`len` is always in scope. Packages are brought into a file with
`import "strings"` and used as `strings.ToUpper(x)`.
"""

import math
from typing import Any, Callable, Dict, Optional, Tuple

from .values import (
    Bottom, Builtin, ListValue, Package, Scalar, Struct, Value,
    describe, from_python, to_python,
)


def _check(name: str, kinds: Tuple[str, ...], args: Tuple[Value, ...]) -> Optional[Bottom]:
    for position, (kind, arg) in enumerate(zip(kinds, args), 1):
        if isinstance(arg, Bottom):
            return arg
        if not arg.is_concrete:
            return Bottom(f"{name}: argument {position} is incomplete ({describe(arg)})")
        if kind == "any":
            continue
        actual = arg.kind
        if kind == "number" and actual in ("int", "float"):
            continue
        if actual != kind:
            return Bottom(f"{name}: argument {position} must be {kind}, got {actual}")
    return None


def builtin(name: str, *kinds: str) -> Callable[[Callable[..., Any]], Builtin]:
    """Wrap a plain Python function over data as a Builtin value."""

    def decorate(func: Callable[..., Any]) -> Builtin:
        def call(*args: Value) -> Value:
            error = _check(name, kinds, args)
            if error is not None:
                return error
            try:
                return from_python(func(*[to_python(arg) for arg in args]))
            except (ValueError, ZeroDivisionError, OverflowError) as exc:
                return Bottom(f"{name}: {exc}")

        return Builtin(name, call, len(kinds))

    return decorate


def _length(value: Value) -> Value:
    if isinstance(value, Bottom):
        return value
    if isinstance(value, Scalar) and value.kind == "string":
        return Scalar(len(value.value))
    if isinstance(value, ListValue):
        return Scalar(len(value.items))
    if isinstance(value, Struct):
        return Scalar(len(value))
    return Bottom(f"len: invalid argument {describe(value)}")


BUILTIN_FUNCTIONS: Dict[str, Builtin] = {
    "len": Builtin("len", _length, 1),
}


# =============================================================================
# strings
# =============================================================================

@builtin("strings.ToUpper", "string")
def _to_upper(s):
    return s.upper()


@builtin("strings.ToLower", "string")
def _to_lower(s):
    return s.lower()


@builtin("strings.TrimSpace", "string")
def _trim_space(s):
    return s.strip()


@builtin("strings.Contains", "string", "string")
def _contains(s, sub):
    return sub in s


@builtin("strings.HasPrefix", "string", "string")
def _has_prefix(s, prefix):
    return s.startswith(prefix)


@builtin("strings.HasSuffix", "string", "string")
def _has_suffix(s, suffix):
    return s.endswith(suffix)


@builtin("strings.Split", "string", "string")
def _split(s, sep):
    if not sep:
        return list(s)
    return s.split(sep)


@builtin("strings.Join", "list", "string")
def _join(items, sep):
    if not all(isinstance(item, str) for item in items):
        raise ValueError("list elements must be strings")
    return sep.join(items)


@builtin("strings.Repeat", "string", "int")
def _repeat(s, count):
    if count < 0:
        raise ValueError("negative repeat count")
    return s * count


# =============================================================================
# math
# =============================================================================

@builtin("math.Floor", "number")
def _floor(x):
    return math.floor(x)


@builtin("math.Ceil", "number")
def _ceil(x):
    return math.ceil(x)


@builtin("math.Abs", "number")
def _abs(x):
    return abs(x)


@builtin("math.Sqrt", "number")
def _sqrt(x):
    if x < 0:
        raise ValueError("square root of negative number")
    return math.sqrt(x)


# =============================================================================
# list
# =============================================================================

def _numbers(items):
    if not all(isinstance(i, (int, float)) and not isinstance(i, bool) for i in items):
        raise ValueError("list elements must be numbers")
    return items


@builtin("list.Sum", "list")
def _sum(items):
    return sum(_numbers(items))


@builtin("list.Max", "list")
def _max(items):
    if not items:
        raise ValueError("empty list")
    return max(_numbers(items))


@builtin("list.Min", "list")
def _min(items):
    if not items:
        raise ValueError("empty list")
    return min(_numbers(items))


PACKAGES: Dict[str, Package] = {
    "strings": Package("strings", {
        "ToUpper": _to_upper,
        "ToLower": _to_lower,
        "TrimSpace": _trim_space,
        "Contains": _contains,
        "HasPrefix": _has_prefix,
        "HasSuffix": _has_suffix,
        "Split": _split,
        "Join": _join,
        "Repeat": _repeat,
    }),
    "math": Package("math", {
        "Pi": Scalar(math.pi),
        "Floor": _floor,
        "Ceil": _ceil,
        "Abs": _abs,
        "Sqrt": _sqrt,
    }),
    "list": Package("list", {
        "Sum": _sum,
        "Max": _max,
        "Min": _min,
    }),
}


def load_package(path: str) -> Optional[Package]:
    """Return the builtin package for an import path, if there is one."""
    return PACKAGES.get(path)

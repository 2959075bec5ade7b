"""Shared utilities for building relation solvers from expression strings."""

from __future__ import annotations

import math
from typing import Any, Callable, Hashable, Mapping, Sequence

import sympy as sp
from sympy.parsing.sympy_parser import parse_expr

_SYMBOLS: dict[str, sp.Symbol] = {}


def symbol(name: str) -> sp.Symbol:
    """Get a stable Sympy symbol for a variable name."""
    # Cache symbols to keep identity stable across relations.
    sym = _SYMBOLS.get(name)
    if sym is None:
        sym = sp.Symbol(name, real=True)
        _SYMBOLS[name] = sym
    return sym


def numeric_value(val: Any) -> float | None:
    """Return a finite real float for Sympy expressions or Python numbers."""
    if isinstance(val, sp.Expr):
        if val.free_symbols:
            return None
        try:
            evaluated = val.evalf(chop=True)
        except Exception:
            return None
        if evaluated.is_real is False:
            return None
        try:
            number = float(evaluated)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None
    if isinstance(val, complex):
        return None
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return float(val) if math.isfinite(val) else None
    return None


def parse_expression(text: str, variables: Sequence[str]) -> sp.Expr:
    """Parse an expression string using the relation's variables as symbols."""
    if not isinstance(text, str):
        raise ValueError(f"Expression must be a string; got {type(text).__name__}")
    local_dict = {name: symbol(name) for name in variables}
    try:
        expr = parse_expr(text, local_dict=local_dict)
    except Exception as exc:
        raise ValueError(f"Cannot parse expression {text!r}: {exc}") from exc
    if not isinstance(expr, sp.Expr):
        raise ValueError(f"Expression {text!r} must evaluate to a number")
    return expr


def expression_solver(
    text: str,
    target: str,
    variables: Sequence[str],
) -> Callable[[Mapping[Hashable, Any]], float | None]:
    """Compile ``text`` into a solver callback for ``target``.

    The expression may reference the relation's other variables only. The
    callback returns None when the result is not a finite real number.
    """
    others = [name for name in variables if name != target]
    expr = parse_expression(text, others)
    # parse_expr creates fresh symbols for names outside local_dict.
    stray = sorted(sym.name for sym in expr.free_symbols if sym.name not in others)
    if stray:
        raise ValueError(
            f"Expression for {target!r} references undeclared variable(s): {', '.join(stray)}"
        )
    arg_names = tuple(sorted(sym.name for sym in expr.free_symbols))
    fn = sp.lambdify([symbol(name) for name in arg_names], expr, "math")

    def solve(known: Mapping[Hashable, Any]) -> float | None:
        args = [known[name] for name in arg_names]
        try:
            result = fn(*args)
        except (ArithmeticError, ValueError):
            # math domain errors and divisions by zero mean no value here.
            return None
        return numeric_value(result)

    solve.__name__ = f"solve_{target}"
    return solve

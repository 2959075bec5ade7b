"""Shared numeric and utility helpers for the orbitsolve package.

This module provides common utility functions for:
- YAML file loading
- Float coercion
- Evaluating the small ratio expressions used for orbit portions
"""
from __future__ import annotations

from functools import reduce
import math
import operator
from pathlib import Path
import yaml

# Checked in this order; the first operator present splits the expression.
_RATIO_OPERATORS = (
    ("+", operator.add),
    ("-", operator.sub),
    ("/", operator.truediv),
    ("*", operator.mul),
)


def safe_float(value: object) -> float | None:
    """Convert value to float, returning None if conversion fails or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
        return result if math.isfinite(result) else None
    except (TypeError, ValueError):
        return None


def load_yaml(path: Path | str) -> dict:
    """Load and parse a YAML file into a dictionary.

    Args:
        path: Path to YAML file.

    Returns:
        Dictionary containing parsed YAML content.
        Returns empty dict if file is empty or contains only None.

    Raises:
        FileNotFoundError: If path doesn't exist.
        yaml.YAMLError: If YAML parsing fails.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def eval_ratio(text: str) -> float:
    """Evaluate a small arithmetic expression such as ``"1/2"`` or ``"3*1/4"``.

    The expression is split on the first of ``+``, ``-``, ``/``, ``*`` that it
    contains (checked in that order), each part is evaluated the same way and
    the results are folded left to right. Parentheses are not supported.

    Args:
        text: Expression made of plain numbers and the four operators.

    Returns:
        The evaluated value.

    Raises:
        ValueError: If a leaf is not a number.
        ZeroDivisionError: If a division by zero occurs.

    Example:
        >>> eval_ratio("1/2")
        0.5
        >>> eval_ratio("2*3/4")
        1.5
    """
    for symbol, func in _RATIO_OPERATORS:
        if symbol in text:
            return reduce(func, (eval_ratio(part) for part in text.split(symbol)))
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"Cannot evaluate {text!r} as a number") from None

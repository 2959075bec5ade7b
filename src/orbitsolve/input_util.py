"""
Input utilities: binding strings, named values, insertion-orbit shortcuts.

Every number accepted from the user may also be given by name, using the
constants registered in ``registry/constants.yaml``:

- gravitational parameters: ``GM-kerbin``, ``GM-earth``, ``GM-Mun``
- radii: ``geosync-kerbin``, ``geostationary``

Example:
    >>> from orbitsolve.input_util import parse_binding
    >>> parse_binding("Rp=geostationary")
    ('Rp', 35786000.0)
"""
from __future__ import annotations

import math
import re
from typing import Callable, Sequence

from orbitsolve.registry import DEFAULT_GM_NAME, gravitational_parameter, named_radius, named_value
from orbitsolve.relations.orbit import GM, PERI_RAD, PERIOD
from orbitsolve.utils import eval_ratio

_BINDING_SEPARATORS = re.compile(r"[=:]")


def _parse_number(text: str, lookup: Callable[[str], float | None], label: str) -> float:
    text = text.strip()
    value = lookup(text)
    if value is not None:
        return value
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"{label} must be a number or a registered name; got {text!r}") from None


def parse_value(text: str) -> float:
    """Parse a number or any registered constant name."""
    return _parse_number(text, named_value, "Value")


def parse_gm(text: str) -> float:
    """Parse a gravitational parameter (number or registered GM name)."""
    return _parse_number(text, gravitational_parameter, "Gravitational parameter")


def parse_radius(text: str) -> float:
    """Parse an orbit radius (number or registered radius name)."""
    return _parse_number(text, named_radius, "Radius")


def parse_binding(text: str) -> tuple[str, float]:
    """Parse ``name=value`` or ``name:value`` into a binding.

    Raises:
        ValueError: If the separator or the name is missing, or the value is not numeric.
    """
    parts = _BINDING_SEPARATORS.split(text.strip())
    if len(parts) < 2:
        raise ValueError(f"Expected name=value or name:value; got {text!r}")
    name = parts[0].strip()
    if not name:
        raise ValueError(f"Missing variable name in {text!r}")
    return name, parse_value(parts[1])


def parse_insertion_args(args: Sequence[str]) -> list[tuple[str, float]]:
    """Return bindings for an insertion orbit into a circular orbit.

    Args:
        args: ``[radius, portion]`` or ``[radius, portion, GM]``. The periapsis
            sits at the starting circular radius and the period is ``portion``
            (a ratio expression such as ``"2/3"``) times the circular period.
            GM defaults to Kerbin's.

    Returns:
        ``[(Rp, radius), (GM, gm), (period, portion * circular_period)]``
    """
    if not 2 <= len(args) <= 3:
        raise ValueError(f"Insertion orbit needs 'radius portion [GM]'; got {len(args)} argument(s)")
    start_radius = parse_radius(args[0])
    gm_value = parse_gm(args[2] if len(args) > 2 else DEFAULT_GM_NAME)
    base_period = math.sqrt(4 * math.pi**2 * start_radius**3 / gm_value)
    return [
        (PERI_RAD, start_radius),
        (GM, gm_value),
        (PERIOD, base_period * eval_ratio(args[1].strip())),
    ]

"""Registry module for named constants."""
from __future__ import annotations

from pathlib import Path
import logging

from ..utils import load_yaml, safe_float

logger = logging.getLogger(__name__)

# Registry paths
REGISTRY_PATH = Path(__file__).resolve().parent
CONSTANTS_PATH = REGISTRY_PATH / "constants.yaml"

GM_SECTION = "gravitational_parameters"
RADIUS_SECTION = "radii"
DEFAULT_GM_NAME = "GM-kerbin"

# Private caches
_CONSTANTS: dict[str, dict[str, float]] | None = None


def load_constants() -> dict[str, dict[str, float]]:
    """Load named constants from YAML. Args: none. Returns: dict of section -> {name: value}."""
    global _CONSTANTS
    if _CONSTANTS is None:
        data = load_yaml(CONSTANTS_PATH)
        constants: dict[str, dict[str, float]] = {}
        for section in (GM_SECTION, RADIUS_SECTION):
            raw = data.get(section) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"'{section}' must be a mapping in {CONSTANTS_PATH}")
            values: dict[str, float] = {}
            for name, value in raw.items():
                number = safe_float(value)
                if number is None:
                    raise ValueError(f"Constant {name!r} in {CONSTANTS_PATH} is not numeric: {value!r}")
                values[str(name)] = number
            constants[section] = values
        logger.debug("Loaded %s named constants", sum(len(v) for v in constants.values()))
        _CONSTANTS = constants
    return _CONSTANTS


def gravitational_parameter(name: str) -> float | None:
    """Return a named gravitational parameter (m^3/s^2), or None if unknown."""
    return load_constants()[GM_SECTION].get(name)


def named_radius(name: str) -> float | None:
    """Return a named orbit radius (m), or None if unknown."""
    return load_constants()[RADIUS_SECTION].get(name)


def named_value(name: str) -> float | None:
    """Return a named constant from any section, or None if unknown."""
    value = gravitational_parameter(name)
    return value if value is not None else named_radius(name)


# Public constants loaded from the registry
GM_KERBIN = gravitational_parameter(DEFAULT_GM_NAME)

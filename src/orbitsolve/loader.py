from pathlib import Path
from typing import Any

import yaml

from .input_util import parse_value
from .relation_class import TabulatedRelation
from .relation_util import expression_solver
from .utils import safe_float


def _load_mapping(path: Path, *, label: str) -> dict[str, Any]:
    if not path.is_file():
        raise FileNotFoundError(f"{label} not found at {path}")

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{label} at {path} must contain a mapping at the top level")
    return data


def load_bindings_yaml(path: Path) -> list[tuple[str, float]]:
    """Load ``name: value`` bindings; values may be numbers or registered names."""
    path = Path(path)
    data = _load_mapping(path, label="Bindings file")

    bindings: list[tuple[str, float]] = []
    for name, raw in data.items():
        number = safe_float(raw)
        if number is None:
            if not isinstance(raw, str):
                raise ValueError(f"Value for {name!r} in {path} must be a number; got {raw!r}")
            try:
                number = parse_value(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid value for {name!r} in {path}: {exc}") from exc
        bindings.append((str(name), number))
    return bindings


def load_relations_yaml(path: Path) -> list[TabulatedRelation]:
    """Load relations whose solvers are written as expressions.

    Expected layout::

        relations:
          - name: Circular velocity
            variables: [GM, r, Vc]
            solves:
              Vc: sqrt(GM / r)
              r: GM / Vc**2
    """
    path = Path(path)
    data = _load_mapping(path, label="Relations file")

    entries = data.get("relations") or []
    if not isinstance(entries, list):
        raise ValueError(f"'relations' must be a list in {path}")

    relations: list[TabulatedRelation] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Relation #{idx} in {path} must be a mapping")
        name = entry.get("name") or f"relation_{idx}"
        variables = entry.get("variables")
        if not isinstance(variables, list) or not variables:
            raise ValueError(f"Relation {name!r} in {path} needs a non-empty 'variables' list")
        variables = [str(var) for var in variables]
        solves = entry.get("solves") or {}
        if not isinstance(solves, dict):
            raise ValueError(f"'solves' of relation {name!r} in {path} must be a mapping")

        rel = TabulatedRelation(variables, name=str(name))
        for target, expr in solves.items():
            target = str(target)
            if target not in variables:
                raise ValueError(f"Relation {name!r} in {path} has no variable {target!r} to solve for")
            rel.add_solve(target, expression_solver(str(expr), target, variables))
        relations.append(rel)
    return relations

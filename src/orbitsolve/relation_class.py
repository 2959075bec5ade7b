"""Relations for orbitsolve.

Core ideas:
- A relation covers a fixed, ordered set of variable names.
- It can be solved once at most one of its variables is unknown.
- Solving yields a single new binding, or nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Container, Hashable, Iterable, Mapping

SolveFunc = Callable[[Mapping[Hashable, Any]], Any]


def _no_value(known: Mapping[Hashable, Any]) -> None:
    """Solver placeholder for variables without a registered solve."""
    return None


class Relation(ABC):
    """Constraint over named variables that can compute one of them from the rest."""

    def __init__(self, variables: Iterable[Hashable], *, name: str | None = None) -> None:
        self.variables = tuple(variables)
        if not self.variables:
            raise ValueError("A relation needs at least one variable")
        self.name = name or "relation(" + ", ".join(str(v) for v in self.variables) + ")"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, variables={self.variables!r})"

    def can_solve(self, known: Container[Hashable]) -> bool:
        """Return True if at most one variable is missing from ``known``.

        A fully known relation counts as solvable so it can be retired.
        """
        overlap = sum(1 for name in self.variables if name in known)
        return overlap >= len(self.variables) - 1

    def unknown(self, known: Container[Hashable]) -> Hashable | None:
        """Return the last declared variable absent from ``known``, or None."""
        missing = None
        for name in self.variables:
            if name not in known:
                missing = name
        return missing

    @abstractmethod
    def solve(self, known: Mapping[Hashable, Any]) -> tuple[Hashable, Any] | None:
        """Compute the single unknown variable, returning ``(name, value)`` or None."""


class TabulatedRelation(Relation):
    """Relation with one solver callback per declared variable.

    Example:
        >>> rel = TabulatedRelation(("a", "Ra", "Rp"))
        >>> rel.add_solve("a", lambda v: (v["Ra"] + v["Rp"]) / 2)
        >>> rel.solve({"Ra": 3.0, "Rp": 1.0})
        ('a', 2.0)
    """

    def __init__(
        self,
        variables: Iterable[Hashable],
        solves: Mapping[Hashable, SolveFunc] | None = None,
        *,
        name: str | None = None,
    ) -> None:
        super().__init__(variables, name=name)
        self._solves: dict[Hashable, SolveFunc] = {var: _no_value for var in self.variables}
        for var, func in (solves or {}).items():
            self.add_solve(var, func)

    @property
    def solves(self) -> dict[Hashable, SolveFunc]:
        """Return a copy of the variable -> solver table in declared order."""
        return {var: self._solves[var] for var in self.variables}

    def _check_declared(self, variable: Hashable) -> None:
        if variable not in self._solves:
            raise ValueError(
                f"Variable {variable!r} is not registered within {self.name!r}; "
                f"declared variables: {', '.join(str(v) for v in self.variables)}"
            )

    def add_solve(self, variable: Hashable, func: SolveFunc) -> None:
        """Register ``func`` as the way to compute ``variable`` from the others."""
        self._check_declared(variable)
        self._solves[variable] = func

    def remove_solve(self, variable: Hashable) -> None:
        """Forget the solver for ``variable``; it stays a declared variable."""
        self._check_declared(variable)
        self._solves[variable] = _no_value

    def solve(self, known: Mapping[Hashable, Any]) -> tuple[Hashable, Any] | None:
        if not self.can_solve(known):
            return None
        target = self.unknown(known)
        if target is None:
            return None
        value = self._solves[target](known)
        if value is None:
            return None
        return target, value

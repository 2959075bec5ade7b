"""RelationSystem class to saturate a set of relations."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from collections.abc import Mapping
from typing import Any, Hashable, Iterable
import logging

from .relation_class import Relation

logger = logging.getLogger(__name__)


@dataclass
class RelationSystem:
    """Known bindings plus the relations not yet consumed, driven to a fixed point.

    Each ``add`` merges new bindings and then repeatedly scans the pending
    relations. Any relation with at most one unknown is solved against the
    live bindings (so a value derived early in a scan is visible later in the
    same scan) and consumed, whether or not it produced a value.

    ``relations`` keeps the relations the system was built with; the ones still
    waiting to be solved are in ``pending_relations``.
    """
    relations: list
    verbose: bool = False
    _known: dict[Hashable, Any] = field(init=False, default_factory=dict, repr=False)
    _pending: list[Relation] = field(init=False, default_factory=list, repr=False)
    _log: logging.LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize pending relations and logger. Args: none. Returns: None."""
        base_logger = logger.getChild(self.__class__.__name__)
        base_logger.setLevel(logging.INFO if self.verbose else logging.WARNING)
        self._log = logging.LoggerAdapter(base_logger, {"system_id": id(self), "pass_id": None})

        self.relations = list(self.relations)
        self._pending = list(self.relations)
        self._log.debug("RelationSystem.__post_init__: n_relations=%s", len(self._pending))

    @property
    def known_variables(self) -> Mapping[Hashable, Any]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._known)

    @property
    def pending_relations(self) -> tuple[Relation, ...]:
        """Relations that have not been consumed yet, in scan order."""
        return tuple(self._pending)

    def add(self, new_bindings: Iterable[tuple[Hashable, Any]] | Mapping[Hashable, Any]) -> bool:
        """Merge bindings and derive as many unknowns as possible.

        Args:
            new_bindings: ``(name, value)`` pairs (or a mapping); later pairs win.

        Returns:
            True if at least one relation was solvable during this call. This
            includes relations whose solver gave no value or that were
            already fully known.
        """
        pairs = new_bindings.items() if isinstance(new_bindings, Mapping) else new_bindings
        for name, value in pairs:
            if name in self._known:
                self._log.debug("Overwriting %s: %s -> %s", name, self._known[name], value)
            self._known[name] = value

        found_solvable = False
        produced_value = True
        pass_id = 0
        while produced_value:
            produced_value = False
            self._log.extra["pass_id"] = pass_id
            consumed: list[Relation] = []
            for rel in self._pending:
                if not rel.can_solve(self._known):
                    continue
                found_solvable = True
                solved = rel.solve(self._known)
                if solved is not None:
                    name, value = solved
                    self._known[name] = value
                    produced_value = True
                    self._log.info("%s solved %s = %s", rel.name, name, value)
                else:
                    self._log.debug("%s retired without a value", rel.name)
                consumed.append(rel)

            consumed_ids = {id(rel) for rel in consumed}
            self._pending = [rel for rel in self._pending if id(rel) not in consumed_ids]
            self._log.debug(
                "Pass %s: consumed %s relations, %s pending, new value=%s",
                pass_id,
                len(consumed),
                len(self._pending),
                produced_value,
            )
            pass_id += 1

        self._log.extra["pass_id"] = None
        return found_solvable

    def set(self, name: Hashable, value: Any) -> bool:
        """Bind a single variable; same as ``add([(name, value)])``."""
        return self.add([(name, value)])

import itertools
import math

import pytest

from orbitsolve.relation_class import TabulatedRelation
from orbitsolve.relationsystem_class import RelationSystem


def _vis_viva() -> TabulatedRelation:
    return TabulatedRelation(
        ("GM", "Vp", "Rp", "Ra"),
        {"Vp": lambda v: math.sqrt(2 * v["GM"] * v["Ra"] / (v["Rp"] * (v["Rp"] + v["Ra"])))},
        name="Vis-viva",
    )


def _apsis_sum() -> TabulatedRelation:
    return TabulatedRelation(("Ra", "Rp", "a"), {"a": lambda v: (v["Ra"] + v["Rp"]) / 2}, name="Apsis sum")


class CountingRelation(TabulatedRelation):
    """Tabulated relation recording how often it was solved."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.solve_calls = 0

    def solve(self, known):
        self.solve_calls += 1
        return super().solve(known)


def test_saturation_derives_chained_values() -> None:
    system = RelationSystem([_vis_viva(), _apsis_sum()])
    system.add([("GM", 3.5316e12), ("Rp", 600000.0), ("Ra", 8000000.0)])

    assert system.add([]) is False
    known = system.known_variables
    assert set(known) == {"GM", "Rp", "Ra", "Vp", "a"}
    assert math.isclose(known["a"], 4300000.0)
    assert math.isclose(known["Vp"], math.sqrt(2 * 3.5316e12 * 8e6 / (6e5 * 8.6e6)))


def test_same_pass_chain_uses_live_bindings() -> None:
    # y is derived before z's relation is scanned, so one pass resolves both.
    first = CountingRelation(("x", "y"), {"y": lambda v: v["x"] + 1})
    second = CountingRelation(("y", "z"), {"z": lambda v: v["y"] * 2})
    system = RelationSystem([first, second])

    assert system.set("x", 1.0) is True
    assert dict(system.known_variables) == {"x": 1.0, "y": 2.0, "z": 4.0}
    assert system.pending_relations == ()


def test_later_pass_revisits_relations_unlocked_later_in_scan() -> None:
    second = TabulatedRelation(("y", "z"), {"z": lambda v: v["y"] * 2})
    first = TabulatedRelation(("x", "y"), {"y": lambda v: v["x"] + 1})
    system = RelationSystem([second, first])

    system.set("x", 1.0)
    assert dict(system.known_variables) == {"x": 1.0, "y": 2.0, "z": 4.0}


def test_add_returns_true_when_solvable_relation_gives_no_value() -> None:
    rel = TabulatedRelation(("x", "y"))
    system = RelationSystem([rel])

    assert system.set("x", 1.0) is True
    assert dict(system.known_variables) == {"x": 1.0}
    assert system.pending_relations == ()


def test_add_returns_false_when_nothing_is_solvable() -> None:
    system = RelationSystem([_vis_viva()])
    assert system.set("GM", 1.0) is False
    assert len(system.pending_relations) == 1


def test_fully_known_relation_is_retired() -> None:
    rel = _apsis_sum()
    system = RelationSystem([rel])

    assert system.add({"Ra": 3.0, "Rp": 1.0, "a": 5.0}) is True
    assert system.known_variables["a"] == 5.0
    assert system.pending_relations == ()


def test_no_value_relation_is_never_retried() -> None:
    calls = []

    def never(known):
        calls.append(dict(known))
        return None

    rel = CountingRelation(("x", "y"), {"y": never})
    system = RelationSystem([rel])

    system.set("x", 1.0)
    assert len(calls) == 1
    assert rel not in system.pending_relations

    system.set("y", 2.0)
    system.set("x", 3.0)
    assert len(calls) == 1
    assert rel.solve_calls == 1


def test_each_relation_is_solved_at_most_once() -> None:
    relations = [
        CountingRelation(("x", "y"), {"y": lambda v: v["x"] + 1}),
        CountingRelation(("y", "z"), {"z": lambda v: v["y"] + 1}),
        CountingRelation(("z", "w"), {"w": lambda v: v["z"] + 1}),
    ]
    system = RelationSystem(list(reversed(relations)))

    system.set("x", 0.0)
    system.set("x", 10.0)
    system.add([])

    assert [rel.solve_calls for rel in relations] == [1, 1, 1]
    assert system.known_variables["w"] == 3.0


def test_add_after_saturation_is_idempotent() -> None:
    system = RelationSystem([_vis_viva(), _apsis_sum(), TabulatedRelation(("p", "q", "r"))])
    system.add({"GM": 3.5316e12, "Rp": 600000.0, "Ra": 8000000.0})
    known_before = dict(system.known_variables)
    pending_before = system.pending_relations

    assert system.add([]) is False
    assert dict(system.known_variables) == known_before
    assert system.pending_relations == pending_before


def test_later_bindings_overwrite_without_checks() -> None:
    system = RelationSystem([])
    system.add([("x", 1.0), ("x", 2.0)])
    assert system.known_variables["x"] == 2.0

    system.set("x", 3.0)
    assert system.known_variables["x"] == 3.0


def test_known_variables_is_read_only() -> None:
    system = RelationSystem([])
    system.set("x", 1.0)
    with pytest.raises(TypeError):
        system.known_variables["x"] = 2.0  # type: ignore[index]


def test_failing_solver_keeps_earlier_bindings_of_the_pass() -> None:
    def boom(known):
        raise ZeroDivisionError("bad input")

    ok = TabulatedRelation(("x", "y"), {"y": lambda v: v["x"] + 1})
    failing = TabulatedRelation(("y", "z"), {"z": boom})
    system = RelationSystem([ok, failing])

    with pytest.raises(ZeroDivisionError):
        system.set("x", 1.0)
    assert dict(system.known_variables) == {"x": 1.0, "y": 2.0}


def test_final_bindings_do_not_depend_on_how_inputs_are_split() -> None:
    bindings = [("GM", 3.5316e12), ("Rp", 600000.0), ("Ra", 8000000.0)]

    reference = RelationSystem([_vis_viva(), _apsis_sum()])
    reference.add(bindings)
    expected = dict(reference.known_variables)

    for order in itertools.permutations(bindings):
        system = RelationSystem([_vis_viva(), _apsis_sum()])
        for binding in order:
            system.add([binding])
        assert dict(system.known_variables) == expected


def test_relations_keeps_initial_list_while_pending_shrinks() -> None:
    vis_viva, apsis_sum = _vis_viva(), _apsis_sum()
    system = RelationSystem((vis_viva, apsis_sum))

    system.add({"Ra": 8000000.0, "Rp": 600000.0})

    assert system.relations == [vis_viva, apsis_sum]
    assert system.pending_relations == (vis_viva,)

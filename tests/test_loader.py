import math
from pathlib import Path

import pytest

from orbitsolve.loader import load_bindings_yaml, load_relations_yaml
from orbitsolve.relations.orbit import build_orbit_system


def _write_relations(tmp_path: Path) -> Path:
    path = tmp_path / "relations.yaml"
    path.write_text(
        "\n".join(
            [
                "relations:",
                "  - name: Circular velocity",
                "    variables: [GM, r, Vc]",
                "    solves:",
                "      Vc: sqrt(GM / r)",
                "      r: GM / Vc**2",
                "  - name: Escape velocity",
                "    variables: [Vc, Vesc]",
                "    solves:",
                "      Vesc: sqrt(2) * Vc",
            ]
        )
    )
    return path


def test_load_bindings_yaml(tmp_path: Path) -> None:
    path = tmp_path / "orbit.yaml"
    path.write_text(
        "\n".join(
            [
                "Rp: 600000",
                "Ra: 8.0e+6",
                "e_guess: 6e5",
                "GM: GM-kerbin",
            ]
        )
    )

    bindings = load_bindings_yaml(path)

    assert bindings == [("Rp", 600000.0), ("Ra", 8000000.0), ("e_guess", 600000.0), ("GM", 3.5316e12)]


def test_load_bindings_yaml_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_bindings_yaml(tmp_path / "missing.yaml")


@pytest.mark.parametrize("content", ["- 1\n- 2", "Rp: far away", "Rp: true", "Rp: [1, 2]"])
def test_load_bindings_yaml_rejects_bad_content(tmp_path: Path, content: str) -> None:
    path = tmp_path / "orbit.yaml"
    path.write_text(content)
    with pytest.raises(ValueError):
        load_bindings_yaml(path)


def test_load_relations_yaml(tmp_path: Path) -> None:
    relations = load_relations_yaml(_write_relations(tmp_path))

    assert [rel.name for rel in relations] == ["Circular velocity", "Escape velocity"]
    circular = relations[0]
    assert circular.variables == ("GM", "r", "Vc")

    name, value = circular.solve({"GM": 4.0, "r": 1.0})
    assert name == "Vc"
    assert math.isclose(value, 2.0)

    name, value = circular.solve({"GM": 4.0, "Vc": 2.0})
    assert name == "r"
    assert math.isclose(value, 1.0)

    # No expression was given for GM.
    assert circular.solve({"r": 1.0, "Vc": 2.0}) is None


def test_loaded_relation_math_errors_give_no_value(tmp_path: Path) -> None:
    circular = load_relations_yaml(_write_relations(tmp_path))[0]
    assert circular.solve({"GM": -4.0, "r": 1.0}) is None
    assert circular.solve({"GM": 4.0, "Vc": 0.0}) is None


def test_loaded_relations_extend_orbit_system(tmp_path: Path) -> None:
    system = build_orbit_system(load_relations_yaml(_write_relations(tmp_path)))
    system.add({"GM": 3.5316e12, "r": 700000.0})

    known = system.known_variables
    assert math.isclose(known["Vc"], math.sqrt(3.5316e12 / 700000.0))
    assert math.isclose(known["Vesc"], math.sqrt(2) * known["Vc"])


@pytest.mark.parametrize(
    "entry",
    [
        ["  - name: Bad target", "    variables: [x, y]", "    solves:", "      z: x + 1"],
        ["  - name: Stray symbol", "    variables: [x, y]", "    solves:", "      y: x + w"],
        ["  - name: Self reference", "    variables: [x, y]", "    solves:", "      y: y + 1"],
        ["  - name: No variables", "    variables: []"],
        ["  - name: Syntax", "    variables: [x, y]", "    solves:", "      y: x +* (1"],
    ],
)
def test_load_relations_yaml_rejects_invalid_entries(tmp_path: Path, entry: list[str]) -> None:
    path = tmp_path / "relations.yaml"
    path.write_text("\n".join(["relations:", *entry]))
    with pytest.raises(ValueError):
        load_relations_yaml(path)

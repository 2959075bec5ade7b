"""Two-body orbit relations (vis-viva, Kepler's third law, apsis identities)."""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from orbitsolve.relation_class import Relation, TabulatedRelation
from orbitsolve.relationsystem_class import RelationSystem

PERIOD = "period"
PERI_RAD = "Rp"
PERI_VEL = "Vp"
APO_RAD = "Ra"
APO_VEL = "Va"
ECCENTRICITY = "e"
SEMI_MAJOR = "a"
GM = "GM"

ORBIT_VARIABLES = (PERIOD, PERI_RAD, PERI_VEL, APO_RAD, APO_VEL, ECCENTRICITY, SEMI_MAJOR, GM)

Known = Mapping[str, float]


def _ratio(num: float, den: float) -> float | None:
    """Return num / den, or None for a zero denominator."""
    if den == 0:
        return None
    return num / den


def _sqrt(value: float | None) -> float | None:
    if value is None or value < 0:
        return None
    return math.sqrt(value)


########################################################################################################################
#                                                                                                           VIS-VIVA
########################################################################################################################
def periapsis_velocity(v: Known) -> float | None:
    """Vp = sqrt(2 GM Ra / (Rp (Rp + Ra)))"""
    return _sqrt(_ratio(2 * v[GM] * v[APO_RAD], v[PERI_RAD] * (v[PERI_RAD] + v[APO_RAD])))


def gm_from_periapsis_velocity(v: Known) -> float | None:
    return _ratio(v[PERI_VEL] ** 2 * v[PERI_RAD] * (v[PERI_RAD] + v[APO_RAD]), 2 * v[APO_RAD])


def apoapsis_velocity(v: Known) -> float | None:
    """Va = sqrt(2 GM Rp / (Ra (Ra + Rp)))"""
    return _sqrt(_ratio(2 * v[GM] * v[PERI_RAD], v[APO_RAD] * (v[APO_RAD] + v[PERI_RAD])))


def gm_from_apoapsis_velocity(v: Known) -> float | None:
    return _ratio(v[APO_VEL] ** 2 * v[APO_RAD] * (v[APO_RAD] + v[PERI_RAD]), 2 * v[PERI_RAD])


########################################################################################################################
#                                                                                                 KEPLER'S THIRD LAW
########################################################################################################################
def semi_major_axis_from_period(v: Known) -> float | None:
    """a = (GM T^2 / (4 pi^2))^(1/3)"""
    cube = v[GM] * v[PERIOD] ** 2 / (4 * math.pi**2)
    if cube < 0:
        return None
    return cube ** (1 / 3)


def period_from_semi_major_axis(v: Known) -> float | None:
    """T = 2 pi sqrt(a^3 / GM)"""
    root = _sqrt(_ratio(v[SEMI_MAJOR] ** 3, v[GM]))
    return None if root is None else 2 * math.pi * root


def gm_from_period(v: Known) -> float | None:
    return _ratio(4 * math.pi**2 * v[SEMI_MAJOR] ** 3, v[PERIOD] ** 2)


########################################################################################################################
#                                                                                                  APSIS IDENTITIES
########################################################################################################################
def periapsis_from_apsis_sum(v: Known) -> float:
    return v[SEMI_MAJOR] * 2 - v[APO_RAD]


def apoapsis_from_apsis_sum(v: Known) -> float:
    return v[SEMI_MAJOR] * 2 - v[PERI_RAD]


def semi_major_axis_from_apsides(v: Known) -> float:
    return (v[APO_RAD] + v[PERI_RAD]) / 2


def periapsis_from_eccentricity(v: Known) -> float:
    """Rp = a (1 - e)"""
    return v[SEMI_MAJOR] * (1 - v[ECCENTRICITY])


def semi_major_axis_from_periapsis(v: Known) -> float | None:
    """a = Rp / (1 - e); parabolic orbits have no semi-major axis."""
    return _ratio(v[PERI_RAD], 1 - v[ECCENTRICITY])


def eccentricity_from_periapsis(v: Known) -> float | None:
    return _ratio(v[SEMI_MAJOR] - v[PERI_RAD], v[SEMI_MAJOR])


def eccentricity_from_apsides(v: Known) -> float | None:
    """e = 1 - 2 / (Ra / Rp + 1)"""
    apsis_ratio = _ratio(v[APO_RAD], v[PERI_RAD])
    if apsis_ratio is None:
        return None
    denominator = _ratio(2, apsis_ratio + 1)
    return None if denominator is None else 1 - denominator


def apoapsis_from_eccentricity(v: Known) -> float | None:
    """Ra = Rp (1 + e) / (1 - e); only bound orbits have an apoapsis."""
    if v[ECCENTRICITY] >= 1:
        return None
    return _ratio(v[PERI_RAD] * (1 + v[ECCENTRICITY]), 1 - v[ECCENTRICITY])


def periapsis_from_apoapsis(v: Known) -> float | None:
    """Rp = Ra (1 - e) / (1 + e)"""
    if v[ECCENTRICITY] >= 1:
        return None
    return _ratio(v[APO_RAD] * (1 - v[ECCENTRICITY]), 1 + v[ECCENTRICITY])


########################################################################################################################
#                                                                                                      CONFIGURATION
########################################################################################################################
# (name, declared variables, {variable: solver}) in scan order.
ORBIT_RELATION_SPECS = (
    (
        "Vis-viva at periapsis",
        (GM, PERI_VEL, PERI_RAD, APO_RAD),
        {PERI_VEL: periapsis_velocity, GM: gm_from_periapsis_velocity},
    ),
    (
        "Vis-viva at apoapsis",
        (GM, PERI_RAD, APO_RAD, APO_VEL),
        {APO_VEL: apoapsis_velocity, GM: gm_from_apoapsis_velocity},
    ),
    (
        "Kepler's third law",
        (GM, PERIOD, SEMI_MAJOR),
        {SEMI_MAJOR: semi_major_axis_from_period, PERIOD: period_from_semi_major_axis, GM: gm_from_period},
    ),
    (
        "Apsis sum",
        (SEMI_MAJOR, APO_RAD, PERI_RAD),
        {
            PERI_RAD: periapsis_from_apsis_sum,
            APO_RAD: apoapsis_from_apsis_sum,
            SEMI_MAJOR: semi_major_axis_from_apsides,
        },
    ),
    (
        "Periapsis from eccentricity",
        (PERI_RAD, SEMI_MAJOR, ECCENTRICITY),
        {
            PERI_RAD: periapsis_from_eccentricity,
            SEMI_MAJOR: semi_major_axis_from_periapsis,
            ECCENTRICITY: eccentricity_from_periapsis,
        },
    ),
    (
        "Eccentricity from apsis ratio",
        (ECCENTRICITY, APO_RAD, PERI_RAD),
        {
            ECCENTRICITY: eccentricity_from_apsides,
            APO_RAD: apoapsis_from_eccentricity,
            PERI_RAD: periapsis_from_apoapsis,
        },
    ),
)


def build_orbit_relations() -> list[TabulatedRelation]:
    """Return fresh orbit relations; each system must own its own instances."""
    relations = []
    for name, variables, solves in ORBIT_RELATION_SPECS:
        rel = TabulatedRelation(variables, name=name)
        for var, func in solves.items():
            rel.add_solve(var, func)
        relations.append(rel)
    return relations


def build_orbit_system(extra_relations: Iterable[Relation] = (), *, verbose: bool = False) -> RelationSystem:
    """Return a RelationSystem over the orbit relations followed by ``extra_relations``."""
    return RelationSystem([*build_orbit_relations(), *extra_relations], verbose=verbose)

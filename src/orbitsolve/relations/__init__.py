"""Relation configurations grouped by domain."""

from .orbit import (
    APO_RAD,
    APO_VEL,
    ECCENTRICITY,
    GM,
    ORBIT_VARIABLES,
    PERI_RAD,
    PERI_VEL,
    PERIOD,
    SEMI_MAJOR,
    build_orbit_relations,
    build_orbit_system,
)

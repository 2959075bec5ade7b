from .relation_class import Relation, TabulatedRelation
from .relationsystem_class import RelationSystem
from .registry import DEFAULT_GM_NAME, GM_KERBIN, gravitational_parameter, named_radius, named_value
from .relations.orbit import build_orbit_relations, build_orbit_system
from .input_util import parse_binding, parse_insertion_args, parse_value
from .loader import load_bindings_yaml, load_relations_yaml
from .utils import eval_ratio

__all__ = [
    "Relation",
    "TabulatedRelation",
    "RelationSystem",
    "build_orbit_relations",
    "build_orbit_system",
    "DEFAULT_GM_NAME",
    "GM_KERBIN",
    "gravitational_parameter",
    "named_radius",
    "named_value",
    "parse_binding",
    "parse_insertion_args",
    "parse_value",
    "load_bindings_yaml",
    "load_relations_yaml",
    "eval_ratio",
]

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Mapping

from .input_util import parse_binding, parse_insertion_args
from .loader import load_bindings_yaml, load_relations_yaml
from .registry import GM_KERBIN
from .relations.orbit import GM, build_orbit_system
from .relationsystem_class import RelationSystem

logger = logging.getLogger(__name__)

ReadFunc = Callable[[str], str]

INSERTION_QUESTION = (
    "Do you want to calculate an insertion orbit of another orbit? "
    "(Yes/No), No will let you specify all parameters by yourself: "
)
INSERTION_HELP = (
    "Please specify your parameters in the format:\n"
    '"radius period_portion GM".\n'
    "If you don't provide a GM, Kerbin's is used: "
)
BINDINGS_HELP = (
    "Type the variables with their values in the format name:value or name=value.\n"
    'Type "exit" when you are done.'
)


def _format_known(known: Mapping[str, float]) -> str:
    if not known:
        return "(no variables)"
    width = max(len(str(name)) for name in known)
    return "\n".join(f"{str(name).ljust(width)} = {value}" for name, value in known.items())


def _ask(read: ReadFunc, prompt: str) -> str:
    """Prompt on stderr so stdout only carries the result."""
    print(prompt, end="", file=sys.stderr, flush=True)
    return read("")


def _prompt_bindings(system: RelationSystem, read: ReadFunc = input) -> None:
    """Feed the system from an interactive session until ``exit`` or end of input."""
    try:
        answer = _ask(read, INSERTION_QUESTION)
    except EOFError:
        return
    if answer.strip().lower() == "yes":
        try:
            line = _ask(read, INSERTION_HELP)
        except EOFError:
            return
        system.add(parse_insertion_args(line.split()))
        return

    print(BINDINGS_HELP, file=sys.stderr)
    while True:
        try:
            line = _ask(read, "> ")
        except EOFError:
            break
        if line.strip().lower() == "exit":
            break
        if not line.strip():
            continue
        try:
            name, value = parse_binding(line)
        except ValueError as exc:
            # One bad line should not end the session.
            print(f"Error: {exc}", file=sys.stderr)
            continue
        system.set(name, value)


def run(argv: list[str] | None = None, read: ReadFunc = input) -> int:
    """Run the CLI and return the exit status."""
    parser = argparse.ArgumentParser(
        prog="orbitsolve",
        description="Derive orbit parameters from the ones you know.",
    )
    parser.add_argument(
        "bindings",
        nargs="*",
        metavar="NAME=VALUE",
        help="Known variables as name=value or name:value (e.g. Rp=600000 Ra=geostationary).",
    )
    parser.add_argument(
        "--deploy-orbit",
        "-do",
        nargs="+",
        metavar="ARG",
        help="Insertion orbit from 'radius portion [GM]', e.g. -do geosync-kerbin 2/3.",
    )
    parser.add_argument("--input", "-i", type=Path, help="YAML file with name: value bindings.")
    parser.add_argument("--relations", "-r", type=Path, help="YAML file with additional relations.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s - %(message)s")

    try:
        extra = load_relations_yaml(args.relations) if args.relations else []
        system = build_orbit_system(extra, verbose=args.verbose)

        if args.input:
            system.add(load_bindings_yaml(args.input))
        if args.deploy_orbit:
            system.add(parse_insertion_args(args.deploy_orbit))
        # Command-line bindings are fed one at a time, in order.
        for binding in args.bindings:
            name, value = parse_binding(binding)
            system.set(name, value)
        if not (args.input or args.deploy_orbit or args.bindings):
            _prompt_bindings(system, read)

        if GM not in system.known_variables:
            logger.info("No %s given, using Kerbin's", GM)
            system.set(GM, GM_KERBIN)
    except (ValueError, ArithmeticError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    known = dict(system.known_variables)
    if args.json:
        print(json.dumps(known, indent=2))
    else:
        print(_format_known(known))
    return 0


def main() -> None:
    """Entry point for the orbitsolve command-line interface."""
    sys.exit(run())


if __name__ == "__main__":
    main()

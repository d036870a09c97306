from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, TextIO

from .config import get_cost_factor, parse_cost_factor
from .errors import DuplicateNode, UnknownNode
from .graph import LocationGraph
from .pathfinding import shortest_paths_from, traverse_from

logger = logging.getLogger(__name__)

MENU = """
=== Delivery Path Optimizer ===
  add-location NAME
  remove-location NAME
  add-route FROM TO COST
  remove-route FROM TO
  locations
  plan START
  simulate START
  help
  exit
Quote names that contain spaces, e.g. add-location "North Depot".
"""

EXIT_COMMANDS = {"exit", "quit"}


class CommandError(Exception):
    """Raised for a malformed command line; the loop reports it and continues."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan delivery routes between locations")
    parser.add_argument("--script", help="Read commands from this file instead of stdin")
    parser.add_argument(
        "--cost-factor",
        help="Multiplier turning shortest distance into cost (defaults to DELIVERY_COST_FACTOR or 5)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s %(message)s")
    try:
        cost_factor = (
            parse_cost_factor(args.cost_factor, source="--cost-factor")
            if args.cost_factor is not None
            else get_cost_factor()
        )
    except ValueError as exc:
        parser.error(str(exc))

    graph = LocationGraph()
    if args.script:
        script = Path(args.script)
        if not script.is_file():
            parser.error(f"--script file not found: {args.script}")
        with script.open("r", encoding="utf-8") as handle:
            run_commands(graph, handle, cost_factor)
        return
    interactive = sys.stdin.isatty()
    if interactive:
        print(MENU)
    run_commands(graph, sys.stdin, cost_factor, prompt="> " if interactive else None)


def run_commands(
    graph: LocationGraph,
    lines: Iterable[str],
    cost_factor: int,
    out: Optional[TextIO] = None,
    prompt: Optional[str] = None,
) -> None:
    """Execute one command per line until ``exit`` or end of input."""

    out = out or sys.stdout
    if prompt:
        print(prompt, end="", file=out, flush=True)
    for raw in lines:
        line = raw.strip()
        if line and not line.startswith("#"):
            try:
                tokens = shlex.split(line)
            except ValueError as exc:
                print(f"Invalid input: {exc}.", file=out)
                tokens = []
            if tokens:
                command, arguments = tokens[0].lower(), tokens[1:]
                if command in EXIT_COMMANDS:
                    print("Exiting...", file=out)
                    return
                handler = COMMANDS.get(command)
                if handler is None:
                    print("Invalid choice. Try again.", file=out)
                else:
                    try:
                        handler(graph, arguments, out, cost_factor)
                    except CommandError as exc:
                        print(str(exc), file=out)
        if prompt:
            print(prompt, end="", file=out, flush=True)


def _handle_add_location(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    name = _single_name(arguments, "add-location NAME")
    try:
        graph.add_node(name)
    except DuplicateNode:
        print("Location already exists.", file=out)
        return
    print(f"Location '{name}' added.", file=out)


def _handle_remove_location(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    name = _single_name(arguments, "remove-location NAME")
    try:
        graph.remove_node(name)
    except UnknownNode:
        print("Location not found.", file=out)
        return
    print(f"Location '{name}' removed.", file=out)


def _handle_add_route(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    if len(arguments) != 3:
        raise CommandError("Usage: add-route FROM TO COST")
    source, target, raw_cost = arguments
    cost = _parse_cost(raw_cost)
    try:
        graph.add_edge(source, target, cost)
    except UnknownNode:
        print("One or both locations not found.", file=out)
        return
    print(f"Route from '{source}' to '{target}' added with cost {cost}.", file=out)


def _handle_remove_route(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    if len(arguments) != 2:
        raise CommandError("Usage: remove-route FROM TO")
    source, target = arguments
    try:
        graph.remove_edge(source, target)
    except UnknownNode:
        print("One or both locations not found.", file=out)
        return
    print(f"Route between '{source}' and '{target}' removed.", file=out)


def _handle_locations(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    print("Locations:", file=out)
    for name in graph.list_nodes():
        print(f"- {name}", file=out)


def _handle_plan(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    start = _single_name(arguments, "plan START")
    try:
        estimates = shortest_paths_from(graph, start, cost_factor=cost_factor)
    except UnknownNode:
        print("Starting location not found.", file=out)
        return
    print(f"--- Optimized Delivery Plan from '{start}' ---", file=out)
    for estimate in estimates:
        if estimate.reachable:
            print(f"{estimate.name}: ETA = {estimate.distance}, Cost = {estimate.cost}", file=out)
        else:
            print(f"{estimate.name}: Unreachable", file=out)


def _handle_simulate(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    start = _single_name(arguments, "simulate START")
    try:
        order = traverse_from(graph, start)
    except UnknownNode:
        print("Starting location not found.", file=out)
        return
    print("--- Route Simulation ---", file=out)
    for name in order:
        print(f"Delivering to: {name}", file=out)


def _handle_help(graph: LocationGraph, arguments: List[str], out: TextIO, cost_factor: int) -> None:
    print(MENU.strip("\n"), file=out)


COMMANDS: Dict[str, Callable[[LocationGraph, List[str], TextIO, int], None]] = {
    "add-location": _handle_add_location,
    "remove-location": _handle_remove_location,
    "add-route": _handle_add_route,
    "remove-route": _handle_remove_route,
    "locations": _handle_locations,
    "plan": _handle_plan,
    "simulate": _handle_simulate,
    "help": _handle_help,
}


def _single_name(arguments: List[str], usage: str) -> str:
    if len(arguments) != 1 or not arguments[0].strip():
        raise CommandError(f"Usage: {usage}")
    return arguments[0]


def _parse_cost(raw: str) -> int:
    try:
        cost = int(raw)
    except ValueError:
        logger.debug("rejected_cost value=%s", raw)
        raise CommandError("Invalid cost input.") from None
    if cost < 0:
        raise CommandError("Invalid cost input.")
    return cost


if __name__ == "__main__":
    main()

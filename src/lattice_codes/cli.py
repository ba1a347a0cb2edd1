"""
Command Line
============

    lattice-codes rect <rows> <cols> <mode> <goal>
    lattice-codes geo <shape-file> <mode> <goal>
    lattice-codes finite <graph-file> <old|red|det|err> <count>
    lattice-codes theo <mode> <threshold>

MODE:   "{tag}:{family}", e.g. old:king, ic:hex, edom:grid
GOAL:   fraction in (0, 1] (meet or beat), or an exact integer count for
        edom/eodom

EXIT CODES:
    0  success, including "no solution found"
    1  usage error
    3  torus side < 2
    4  unknown mode
    5  shape/graph file failed to load
    6  finite count is 0 or exceeds the vertex count
    7  unparsable or out-of-range number

Results go to stdout; errors and logs to stderr.
"""

import argparse
import sys
from typing import List, Optional

from .analysis.discharging import LowerBoundSearcher
from .analysis.graph_solver import GraphSolver
from .analysis.tiling_solver import TilingSolver
from .analysis.torus_solver import TorusSolver
from .builders.graph import load_graph
from .builders.tiling import load_shape
from .builders.torus import RectangularTorus
from .log import get_logger, setup_logging
from .operators.modes import Mode, UnknownModeError, parse_graph_mode, parse_mode
from .spec.constants import (
    DEFAULT_LOG_LEVEL,
    EXIT_INVALID_COUNT,
    EXIT_INVALID_NUMBER,
    EXIT_LOAD_FAILURE,
    EXIT_OK,
    EXIT_TINY_DIMENSIONS,
    EXIT_UNKNOWN_MODE,
    EXIT_USAGE,
    LOG_FORMATS,
    MIN_TORUS_SIDE,
)
from .spec.errors import LoadError, FILE_OPEN, TESSELLATION
from .spec.structures import Goal, reduced_fraction

logger = get_logger("lattice_codes.cli")


class CliError(Exception):
    """An input error that ends the run with a specific exit code."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class _ArgumentParser(argparse.ArgumentParser):
    """argparse, but usage errors exit with EXIT_USAGE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


# =============================================================================
# Argument parsing helpers
# =============================================================================

def _parse_side(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{text}' as uint")


def _parse_fraction(text: str) -> float:
    try:
        v = float(text)
    except ValueError:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{text}' as float")
    if not 0.0 < v <= 1.0:
        raise CliError(EXIT_INVALID_NUMBER, f"thresh {v} was outside valid range (0, 1]")
    return v


def _parse_exact(text: str, max_count: int) -> int:
    try:
        v = int(text)
    except ValueError:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{text}' as uint")
    if v < 0:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{text}' as uint")
    if v > max_count:
        raise CliError(EXIT_INVALID_NUMBER, f"count {v} exceeded max {max_count}")
    return v


def _parse_share(text: str) -> float:
    try:
        v = float(text)
    except ValueError:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{text}' as float")
    if not v > 0.0:
        raise CliError(EXIT_INVALID_NUMBER, f"share {v} was outside valid range (0, inf)")
    return v


def _parse_goal(mode: Mode, text: str, size: int) -> Goal:
    if mode.exact_goal:
        return Goal.exactly(_parse_exact(text, size))
    return Goal.meet_or_beat(_parse_fraction(text))


def _resolve_mode(text: str, allow_exact: bool = True) -> Mode:
    try:
        return parse_mode(text, allow_exact=allow_exact)
    except UnknownModeError as e:
        raise CliError(EXIT_UNKNOWN_MODE, str(e))


def _load_failure(path: str, err: LoadError) -> CliError:
    if err.reason == FILE_OPEN:
        message = err.message
    elif err.reason == TESSELLATION:
        message = f"file {path} had a tessellation failure: {err.message}"
    else:
        message = f"file {path} was invalid format: {err.message}"
    return CliError(EXIT_LOAD_FAILURE, message)


def _report(found: Optional[int], size: int, rendering: str) -> None:
    if found is None:
        print("no solution found")
        return
    k, n = reduced_fraction(found, size)
    print(f"found a {k}/{n} ({found / size}) solution:\n{rendering}")


# =============================================================================
# Subcommands
# =============================================================================

def cmd_rect(args) -> int:
    rows = _parse_side(args.rows)
    cols = _parse_side(args.cols)
    if rows < MIN_TORUS_SIDE or cols < MIN_TORUS_SIDE:
        raise CliError(
            EXIT_TINY_DIMENSIONS,
            "1x1, 1xn, nx1 are not supported to avoid branch conditions\n"
            "they also cannot result in lower than 2/3",
        )
    mode = _resolve_mode(args.mode)
    torus = RectangularTorus(rows, cols)
    goal = _parse_goal(mode, args.goal, torus.size)

    found = TorusSolver(torus, mode).try_satisfy(goal)
    _report(found, torus.size, str(torus))
    return EXIT_OK


def cmd_geo(args) -> int:
    try:
        tiled = load_shape(args.shape)
    except LoadError as e:
        raise _load_failure(args.shape, e)
    print(f"loaded geometry:\n{tiled}")

    mode = _resolve_mode(args.mode)
    goal = _parse_goal(mode, args.goal, tiled.size)

    found = TilingSolver(tiled, mode).try_satisfy(goal)
    _report(found, tiled.size, str(tiled))
    return EXIT_OK


def cmd_finite(args) -> int:
    try:
        graph = load_graph(args.graph)
    except LoadError as e:
        raise _load_failure(args.graph, e)

    try:
        count = int(args.count)
    except ValueError:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{args.count}' as positive integer")
    if count < 0:
        raise CliError(EXIT_INVALID_NUMBER, f"failed to parse '{args.count}' as positive integer")
    if count == 0:
        raise CliError(EXIT_INVALID_COUNT, "count cannot be zero")
    if count > len(graph):
        raise CliError(EXIT_INVALID_COUNT, "count cannot be larger than graph size")

    try:
        policy = parse_graph_mode(args.mode)
    except UnknownModeError as e:
        raise CliError(EXIT_UNKNOWN_MODE, str(e))

    if GraphSolver(graph, policy).find_solution(count):
        labels = ", ".join(f'"{label}"' for label in graph.solution())
        print(f"found solution:\n[{labels}]")
    else:
        print("no solution found")
    return EXIT_OK


def cmd_theo(args) -> int:
    thresh = _parse_share(args.threshold)
    mode = _resolve_mode(args.mode, allow_exact=False)

    bound = LowerBoundSearcher(mode).calc(thresh, pipe=sys.stdout)
    if not bound.is_feasible:
        print("no locally valid configuration")
    else:
        print(f"found theo lower bound {bound.numerator}/{bound.denominator} ({bound.reciprocal})")
    return EXIT_OK


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="lattice-codes",
        description="Covering codes on lattices and graphs: exact search and discharging lower bounds",
    )
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL,
                        choices=["debug", "info", "warning", "error"], help="Log level (stderr)")
    parser.add_argument("--log-format", default="console", choices=LOG_FORMATS, help="Log renderer")

    sub = parser.add_subparsers(dest="command", metavar="{rect,geo,finite,theo}")
    sub.required = True

    p = sub.add_parser("rect", help="Solve on a rows x cols torus")
    p.add_argument("rows")
    p.add_argument("cols")
    p.add_argument("mode", help="tag:family, e.g. old:king")
    p.add_argument("goal", help="fraction in (0, 1], or exact count for edom/eodom")
    p.set_defaults(func=cmd_rect)

    p = sub.add_parser("geo", help="Solve on a tiled shape file")
    p.add_argument("shape", help="Shape file (basis header + cell grid)")
    p.add_argument("mode", help="tag:family, e.g. old:king")
    p.add_argument("goal", help="fraction in (0, 1], or exact count for edom/eodom")
    p.set_defaults(func=cmd_geo)

    p = sub.add_parser("finite", help="Solve on a finite graph file")
    p.add_argument("graph", help="Edge list file (a:b tokens)")
    p.add_argument("mode", help="old, red, det or err")
    p.add_argument("count", help="Exact number of detectors")
    p.set_defaults(func=cmd_finite)

    p = sub.add_parser("theo", help="Discharging lower bound on the infinite lattice")
    p.add_argument("mode", help="tag:family (no edom/eodom)")
    p.add_argument("threshold", help="Discharging threshold > 0")
    p.set_defaults(func=cmd_theo)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    setup_logging(args.log_level, args.log_format)
    logger.debug("command_started", command=args.command)

    try:
        return args.func(args)
    except CliError as e:
        print(e.message, file=sys.stderr)
        logger.debug("command_failed", command=args.command, exit_code=e.code)
        return e.code


if __name__ == "__main__":
    sys.exit(main())

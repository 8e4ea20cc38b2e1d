"""CLI entry point: `matchain 30x35 35x15 15x5` or `python -m matchain`."""

import logging
import sys

from .chain import UNSET, optimize
from .config import configure_logging
from .expr import ExprError, mul, operand, transpose
from .printer import format_table, walk
from .properties import PropertyError, as_property
from .utils import count_nodes, get_graph_io

TEXTBOOK_SHAPES = ["30x35", "35x15", "15x5", "5x10", "10x20", "20x25"]


def parse_shape(text):
    try:
        rows, cols = text.lower().split("x")
        return (int(rows), int(cols))
    except ValueError:
        raise ExprError(f"bad shape '{text}', expected ROWSxCOLS") from None


def parse_props(entries, n):
    declared = {}
    for entry in entries:
        index, _, names = entry.partition("=")
        try:
            index = int(index)
        except ValueError:
            raise ExprError(f"bad property '{entry}', expected INDEX=NAME[,NAME]") from None
        if not 1 <= index <= n:
            raise ExprError(f"property index {index} is outside 1..{n}")
        props = declared.setdefault(index, set())
        props.update(as_property(name.strip()) for name in names.split(",") if name.strip())
    return declared


def build_chain(shapes, props):
    factors = [
        operand(f"A{i}", parse_shape(shape), props.get(i, ()))
        for i, shape in enumerate(shapes, start=1)
    ]
    return mul(*factors)


def build_spd_demo():
    a = operand("A", (20, 20), ["FULL_RANK"])
    b = operand("B", (20, 15))
    return mul(mul(transpose(a), a), b)


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog="matchain", description="Find the cheapest evaluation order of a matrix chain."
    )
    parser.add_argument("shapes", nargs="*", help="factor shapes as ROWSxCOLS (default: textbook chain)")
    parser.add_argument("--prop", action="append", default=[], metavar="I=NAME[,NAME]",
                        help="declare properties on factor I, e.g. 1=LOWER_TRIANGULAR")
    parser.add_argument("--demo", choices=["textbook", "spd"], default="textbook",
                        help="built-in chain used when no shapes are given")
    parser.add_argument("--tree", action="store_true", help="print the optimal expression tree")
    parser.add_argument("--tables", action="store_true", help="print the cost and split tables")
    parser.add_argument("--stats", action="store_true", help="print node counts of the optimal tree")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else None)

    try:
        if args.shapes:
            expr = build_chain(args.shapes, parse_props(args.prop, len(args.shapes)))
        elif args.demo == "spd":
            if args.prop:
                raise ExprError("--prop cannot be combined with --demo spd")
            expr = build_spd_demo()
        else:
            expr = build_chain(TEXTBOOK_SHAPES, parse_props(args.prop, len(TEXTBOOK_SHAPES)))
        solution = optimize(expr)
    except (ExprError, PropertyError) as e:
        sys.stderr.write(f"matchain: error: {e}\n")
        return 1

    print(f"order: {solution.parenthesize()}")
    print(f"flops: {solution.cost}")
    print(f"kernels: {', '.join(k.name for k in solution.kernels()) or '-'}")
    if args.tree:
        print(walk(solution.expression))
    if args.tables:
        print("costs:")
        print(format_table(solution.costs, unset=UNSET))
        print("splits:")
        print(format_table(solution.splits, unset=0))
    if args.stats:
        counts = count_nodes(solution.expression)
        print("inputs: " + ", ".join(m.name for m in get_graph_io([solution.expression])))
        print(", ".join(f"#{kind.value}: {count}" for kind, count in sorted(
            counts.items(), key=lambda item: item[0].value)))
    return 0


if __name__ == "__main__":
    sys.exit(main())

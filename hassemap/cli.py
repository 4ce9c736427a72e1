"""
Command-line entry point.

Reads JSON records (array or NDJSON) from a file or stdin, infers the poset of
their field orderings and prints the topological order, Hasse edges and
ambiguities.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from hassemap.exceptions import HasseMapError
from hassemap.io import format_report, parse_rows
from hassemap.poset import DUPLICATE_POLICIES, Poset

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hassemap",
        description="Infer the partial order of field names from JSON records.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Input file with a JSON array or NDJSON. Reads from stdin if not provided.",
    )
    parser.add_argument(
        "--duplicates",
        choices=DUPLICATE_POLICIES,
        default="first",
        help="How to treat a field name repeated within one record (default: first).",
    )
    parser.add_argument(
        "--plot",
        metavar="PATH",
        help="Save a drawing of the Hasse diagram to PATH.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for info, -vv for debug).",
    )
    return parser


def _save_plot(poset: Poset, path: str) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from hassemap.visualization import HasseVisualizer

    ax = HasseVisualizer.plot_hasse(poset, show_incomparable=True)
    ax.figure.savefig(path, bbox_inches="tight")
    plt.close(ax.figure)
    logger.info("Saved Hasse diagram to %s", path)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line tool.

    Returns:
        0 on success, 1 if a cycle prevents a topological order, 2 on
        unreadable or invalid input.
    """
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(int(args.verbose), 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.path:
            with open(args.path, "r", encoding="utf-8") as fh:
                text = fh.read()
        else:
            text = sys.stdin.read()
        rows = parse_rows(text)
        poset = Poset.from_rows(rows, duplicates=args.duplicates)
    except OSError as exc:
        print(f"hassemap: {args.path}: {exc.strerror}", file=sys.stderr)
        return 2
    except UnicodeDecodeError as exc:
        print(f"hassemap: {args.path or '<stdin>'}: {exc.reason} at byte {exc.start}", file=sys.stderr)
        return 2
    except HasseMapError as exc:
        print(f"hassemap: {exc}", file=sys.stderr)
        return 2

    print(format_report(poset))
    if args.plot:
        _save_plot(poset, args.plot)
    return 0 if poset.topological_order().ok else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

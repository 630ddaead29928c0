"""
Command-line interface for lhef.

Usage:
    lhef info events.lhe.gz [--json]
    lhef cat events.lhe -o normalized.lhe [--lhef-version 3.0]
    lhef dump events.lhe --max-events 10
    lhef to-parquet events.lhe events.parquet [--columnar]
"""

from __future__ import annotations

import argparse
import itertools
import json
import logging
import sys

import lhef
from lhef.errors import LHEFError
from lhef.syntax import SUPPORTED_VERSIONS

logger = logging.getLogger("lhef.cli")

_ERRORS = (LHEFError, OSError, ImportError)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lhef",
        description="Read, check and rewrite Les Houches Event Files.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {lhef.__version__}"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- info ---
    info_parser = subparsers.add_parser(
        "info",
        help="Show run information and event statistics",
    )
    info_parser.add_argument("input", help="Input file path (.lhe or .lhe.gz)")
    info_parser.add_argument(
        "--json", dest="as_json", action="store_true",
        help="Output as JSON",
    )

    # --- cat ---
    cat_parser = subparsers.add_parser(
        "cat",
        help="Parse and re-serialize an event file",
        description="Parse an event file and write it back out. Numbers are "
        "normalized to their shortest exact representation.",
    )
    cat_parser.add_argument("input", help="Input file path")
    cat_parser.add_argument(
        "-o", "--output", default=None,
        help="Output file path (stdout if omitted)",
    )
    cat_parser.add_argument(
        "--lhef-version", dest="lhef_version", choices=SUPPORTED_VERSIONS, default=None,
        help="Version tag of the output (default: same as input)",
    )
    cat_parser.add_argument(
        "--max-events", type=int, default=-1,
        help="Maximum number of events to write (-1 for all)",
    )

    # --- dump ---
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print run information and events as JSON lines",
    )
    dump_parser.add_argument("input", help="Input file path")
    dump_parser.add_argument(
        "--max-events", type=int, default=-1,
        help="Maximum number of events to print (-1 for all)",
    )

    # --- to-parquet ---
    pq_parser = subparsers.add_parser(
        "to-parquet",
        help="Export events to Parquet (requires pyarrow)",
    )
    pq_parser.add_argument("input", help="Input file path")
    pq_parser.add_argument("output", help="Output Parquet file")
    pq_parser.add_argument(
        "--columnar", action="store_true",
        help="One row per event with a list of particles instead of one row per particle",
    )

    return parser


def _cmd_info(args: argparse.Namespace) -> int:
    from .convert import info

    try:
        result = info(args.input)
    except _ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.as_json:
        print(json.dumps(result, indent=2))
        return 0

    print(f"LHEF version:        {result['version']}")
    print(f"Events:              {result['n_events']}")
    print(f"Total particles:     {result['total_particles']}")
    print(f"Avg particles/event: {result['avg_particles_per_event']:.1f}")
    print(f"Beam PDG IDs:        {tuple(result['beam_pdg_id'])}")
    print(f"Beam energies:       {tuple(result['beam_energy'])} GeV")
    print(f"PDF group/set:       {tuple(result['pdf_group'])} / {tuple(result['pdf_set'])}")
    print(f"Weight scheme:       {result['weight_scheme']}")
    if result["xml_header_children"]:
        print(f"Header blocks:       {result['xml_header_children']}")
    if result["subprocesses"]:
        print("Subprocesses:")
        for sp in result["subprocesses"]:
            print(f"  {sp['id']:>6d}: xsec = {sp['xsec']:.6g} +- {sp['xerr']:.3g} pb (max weight {sp['xmax']:.6g})")
    if result["status_counts"]:
        print(f"Status codes:        {result['status_counts']}")
    if result["top_particles"]:
        print("Top particles:")
        for name, count in result["top_particles"][:10]:
            print(f"  {name:>20s}: {count}")
    return 0


def _cmd_cat(args: argparse.Namespace) -> int:
    from .convert import copy

    try:
        if args.output is not None:
            copy(args.input, args.output, version=args.lhef_version, max_events=args.max_events)
            return 0
        with lhef.open_reader(args.input) as reader:
            with lhef.Writer(sys.stdout, args.lhef_version or reader.version) as writer:
                if reader.header:
                    writer.header(reader.header)
                if reader.xml_header is not None:
                    writer.xml_header(reader.xml_header)
                writer.heprup(reader.heprup())
                events = itertools.islice(reader, args.max_events) if args.max_events >= 0 else reader
                for event in events:
                    writer.hepeup(event)
                writer.finish()
    except _ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    from .serialize import event_to_dict, run_info_to_dict, stable_json_dumps

    try:
        with lhef.open_reader(args.input) as reader:
            print(stable_json_dumps({"version": reader.version, "run_info": run_info_to_dict(reader.heprup())}))
            events = itertools.islice(reader, args.max_events) if args.max_events >= 0 else reader
            for event in events:
                print(stable_json_dumps(event_to_dict(event)))
    except _ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def _cmd_to_parquet(args: argparse.Namespace) -> int:
    from .io.parquet import write_parquet

    try:
        with lhef.open_reader(args.input) as reader:
            n = write_parquet(args.output, reader, reader.heprup(), columnar=args.columnar)
    except _ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Wrote {n} events to {args.output}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": _cmd_info,
        "cat": _cmd_cat,
        "dump": _cmd_dump,
        "to-parquet": _cmd_to_parquet,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    logger.debug("running %s on %s", args.command, args.input)
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

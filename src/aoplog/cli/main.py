"""Command line interface for aoplog."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import cast

from .generate_cmd import VerbosityArg, run_generate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aoplog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate logging modules for annotated classes"
    )
    generate_parser.add_argument(
        "root", type=Path, help="Source root (the directory on sys.path at run time)"
    )
    generate_parser.add_argument(
        "--verbosity",
        choices=["minimal", "standard", "full"],
        default="standard",
        help="Console report verbosity",
    )
    mode = generate_parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--check",
        action="store_true",
        help="Do not write; fail if any generated module is missing or out of date",
    )
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated modules instead of writing them",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit a machine-readable summary instead of the tree report",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "generate":
        return run_generate(
            args.root,
            cast(VerbosityArg, args.verbosity),
            check=args.check,
            as_json=args.json,
            dry_run=args.dry_run,
        )

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())

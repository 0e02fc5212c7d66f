#!/usr/bin/env python3
"""
CLI for parabatch: plan parallel test batches.

Modes:
  1) plan - print suites and their batches
  2) list - print one worker filter expression per batch

Usage:
  python parabatch_cli.py tests/
  python parabatch_cli.py --functional --max-batch-size 5 tests/
  python parabatch_cli.py -c parabatch.yaml --testsuite unit --exclude-group slow
  python parabatch_cli.py --mode list --format json --out plan.json tests/
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from cli.args.base import add_base_args
from cli.args.filters import add_filter_args
from cli.dispatch import dispatch
from parabatch.errors import ParaBatchError
from parabatch.wiring import configure_logging, env_defaults, load_env


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Plan parallel test batches from *Test.py modules.")
    add_base_args(parser, defaults=env_defaults())
    add_filter_args(parser)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    # Always load .env from the working directory so CI and terminal runs agree
    load_env()

    try:
        args = parse_args(argv)
        configure_logging(args.verbose)
        return dispatch(args)
    except ParaBatchError as exc:
        raise SystemExit(f"Error: {exc}")


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import json

from parabatch.io import write_plan
from parabatch.loader import SuiteLoader


def run_list(args, loader: SuiteLoader) -> int:
    """Print one line per batch: ``<path>\\t<filter expression>``."""

    suites = loader.load()
    batches = loader.get_test_methods()

    if args.format == "json":
        rows = [
            {"path": b.path, "filter": b.filter_expression(), "tests": list(b.tests)}
            for b in batches
        ]
        print(json.dumps(rows, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        for b in batches:
            print(f"{b.path}\t{b.filter_expression()}")

    if args.out:
        write_plan(args.out, suites)

    return 0

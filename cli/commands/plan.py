from __future__ import annotations

import logging
from typing import List

from parabatch.io import render_json, write_plan
from parabatch.loader import SuiteLoader
from parabatch.models import Suite, plan_to_dict

logger = logging.getLogger(__name__)


def _print_text(suites: List[Suite]) -> None:
    total_batches = 0
    total_tests = 0
    for suite in suites:
        print(f"{suite.class_name} ({suite.path})")
        for idx, batch in enumerate(suite.batches, start=1):
            print(f"  [{idx}] {', '.join(batch.tests)}")
        total_batches += len(suite.batches)
        total_tests += suite.test_count

    print(f"\n{len(suites)} suite(s), {total_batches} batch(es), {total_tests} test(s)")


def run_plan(args, loader: SuiteLoader) -> int:
    suites = loader.load()

    if args.format == "json":
        print(render_json(plan_to_dict(suites)), end="")
    else:
        _print_text(suites)

    if args.out:
        out = write_plan(args.out, suites)
        if args.format == "json":
            logger.info("Plan written to %s", out.resolve())
        else:
            print(f"Plan written to {out.resolve()}")

    return 0

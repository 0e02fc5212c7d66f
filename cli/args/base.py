from __future__ import annotations

import argparse
from collections.abc import Mapping

from parabatch.models import DependencyPolicy


def add_base_args(parser: argparse.ArgumentParser, *, defaults: Mapping[str, object]) -> None:
    """Register flags shared by every mode.

    This includes:
    - mode selection
    - where tests come from (paths / configuration / test suite)
    - batching knobs
    - output
    """

    parser.add_argument(
        "--mode",
        choices=["plan", "list"],
        default="plan",
        help="plan = print suites and batches, list = print one worker filter per batch",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Test directories or files. If omitted, suites come from --configuration.",
    )

    parser.add_argument(
        "--configuration",
        "-c",
        default=defaults.get("configuration"),
        help="Project configuration YAML (env: PARABATCH_CONFIGURATION).",
    )
    parser.add_argument(
        "--testsuite",
        help="Only load the named test suite from the configuration.",
    )

    # Batching
    parser.add_argument(
        "--functional",
        action="store_true",
        default=bool(defaults.get("functional")),
        help=(
            "Functional mode: batch up to --max-batch-size tests per worker and expand data providers "
            "(env: PARABATCH_FUNCTIONAL)."
        ),
    )
    parser.add_argument(
        "--max-batch-size",
        type=int,
        default=int(defaults.get("max_batch_size") or 0),
        help="(functional mode) Maximum independent tests per batch (env: PARABATCH_MAX_BATCH_SIZE).",
    )
    parser.add_argument(
        "--on-unresolved-dependency",
        choices=[p.value for p in DependencyPolicy],
        default=DependencyPolicy.DROP.value,
        help="What to do when a @depends target is not batched (default: drop).",
    )

    # Output
    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format")
    parser.add_argument("--out", help="Also write the JSON plan to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

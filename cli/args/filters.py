from __future__ import annotations

import argparse


def add_filter_args(parser: argparse.ArgumentParser) -> None:
    """Register test selection flags (groups, name filter, annotations)."""

    parser.add_argument(
        "--group",
        dest="groups",
        help="Comma-separated groups; only tests in one of them run (untagged tests always run).",
    )
    parser.add_argument(
        "--exclude-group",
        dest="exclude_groups",
        help="Comma-separated groups to skip (merged with the configuration's excluded groups).",
    )
    parser.add_argument(
        "--filter",
        help="Regular expression searched in 'Class::test'. '/re/flags' form is accepted.",
    )
    parser.add_argument(
        "--annotation",
        dest="annotations",
        action="append",
        default=[],
        help="Select methods tagged '@name value'. Format: name=v1,v2 (repeatable).",
    )

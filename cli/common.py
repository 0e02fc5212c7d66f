from __future__ import annotations

"""cli.common

Small shared helpers for CLI command modules.

The CLI is split by mode (plan/list). Turning parsed flags into
:class:`~parabatch.models.LoaderOptions` is shared by every mode; keeping it
here avoids two modes interpreting the same flag differently.
"""

import argparse
from typing import Dict, List, Optional

from parabatch.config import load_config_yaml
from parabatch.errors import InvalidConfiguration
from parabatch.models import DependencyPolicy, LoaderOptions


def parse_csv(raw: Optional[str]) -> list[str]:
    """Parse a comma-separated list value into a list of non-empty strings."""
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


def parse_annotations(raw: List[str]) -> Dict[str, str]:
    """Parse repeated ``name=v1,v2`` flags into ``{name: "v1,v2"}``."""
    out: Dict[str, str] = {}
    for item in raw or []:
        name, sep, values = item.partition("=")
        if not sep or not name.strip() or not parse_csv(values):
            raise InvalidConfiguration(f"Annotation must look like name=value[,value]: {item!r}")
        key = name.strip()
        joined = ",".join(parse_csv(values))
        out[key] = f"{out[key]},{joined}" if key in out else joined
    return out


def build_options(args: argparse.Namespace) -> LoaderOptions:
    configuration = load_config_yaml(args.configuration) if args.configuration else None

    return LoaderOptions(
        paths=tuple(args.paths or ()),
        functional=bool(args.functional),
        max_batch_size=int(args.max_batch_size),
        groups=tuple(parse_csv(args.groups)),
        exclude_groups=tuple(parse_csv(args.exclude_groups)),
        filter=args.filter or None,
        annotations=parse_annotations(args.annotations),
        testsuite=args.testsuite or None,
        configuration=configuration,
        on_unresolved_dependency=DependencyPolicy(args.on_unresolved_dependency),
    )

from __future__ import annotations

import argparse
from typing import Optional

from cli.commands.list_tests import run_list
from cli.commands.plan import run_plan
from cli.common import build_options
from parabatch.loader import SuiteLoader
from parabatch.wiring import build_loader


def dispatch(args: argparse.Namespace, loader: Optional[SuiteLoader] = None) -> int:
    """Route parsed args to a mode handler.

    ``loader`` is only passed by tests; the CLI builds one from the flags.
    """

    if loader is None:
        # .env was already loaded by the entrypoint.
        loader = build_loader(build_options(args), load_dotenv_file=False)

    if args.mode == "list":
        return int(run_list(args, loader))
    return int(run_plan(args, loader))

"""parabatch.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- load configuration / environment variables (``.env``)
- configure logging
- choose real vs stub collaborators (useful for testing)
- build the suite loader

Keeping this wiring in one place prevents configuration and dependency setup
from being duplicated across entrypoints (CLI, scripts, CI).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

from parabatch.data_providers import DataProviderSource
from parabatch.errors import InvalidConfiguration
from parabatch.loader import SuiteLoader
from parabatch.models import LoaderOptions
from parabatch.parser import SourceParser

ENV_MAX_BATCH_SIZE = "PARABATCH_MAX_BATCH_SIZE"
ENV_FUNCTIONAL = "PARABATCH_FUNCTIONAL"
ENV_CONFIGURATION = "PARABATCH_CONFIGURATION"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"", "0", "false", "no", "off"}


def load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load ``.env`` (default: working directory) into ``os.environ``; variables already set win."""
    dotenv_path = dotenv_path or Path.cwd() / ".env"
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=False)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
    )


def env_defaults() -> Dict[str, object]:
    """Run defaults taken from the environment (after ``load_env``)."""

    raw_size = os.environ.get(ENV_MAX_BATCH_SIZE, "").strip()
    try:
        max_batch_size = int(raw_size) if raw_size else 0
    except ValueError as exc:
        raise InvalidConfiguration(f"{ENV_MAX_BATCH_SIZE} must be an integer, got {raw_size!r}") from exc

    raw_functional = os.environ.get(ENV_FUNCTIONAL, "").strip().lower()
    if raw_functional not in _TRUE | _FALSE:
        raise InvalidConfiguration(f"{ENV_FUNCTIONAL} must be a boolean, got {raw_functional!r}")

    return {
        "max_batch_size": max_batch_size,
        "functional": raw_functional in _TRUE,
        "configuration": os.environ.get(ENV_CONFIGURATION) or None,
    }


def build_loader(
    options: Optional[LoaderOptions] = None,
    *,
    parser: Optional[SourceParser] = None,
    data_provider_source: Optional[DataProviderSource] = None,
    load_dotenv_file: bool = True,
) -> SuiteLoader:
    """Build a :class:`SuiteLoader` with the default collaborators."""

    if load_dotenv_file:
        load_env()

    return SuiteLoader(options, parser=parser, data_provider_source=data_provider_source)

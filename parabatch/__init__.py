"""parabatch

Plan parallel test runs: discover ``*Test.py`` modules, filter their test
methods, expand data providers and pack the resulting units into batches that
keep dependent tests together.

The CLI (``parabatch_cli.py``) is a thin composition root over
:class:`parabatch.loader.SuiteLoader`; programmatic callers should build the
loader through :func:`parabatch.wiring.build_loader`.
"""

from __future__ import annotations

from parabatch.errors import (
    DataProviderError,
    InvalidConfiguration,
    NoClassFound,
    NoTestsDiscovered,
    ParaBatchError,
    ParseFailure,
    PathNotFound,
    UnresolvedDependency,
)
from parabatch.loader import SuiteLoader
from parabatch.models import Batch, DependencyPolicy, LoaderOptions, Suite, SuitePath

__all__ = [
    "Batch",
    "DataProviderError",
    "DependencyPolicy",
    "InvalidConfiguration",
    "LoaderOptions",
    "NoClassFound",
    "NoTestsDiscovered",
    "ParaBatchError",
    "ParseFailure",
    "PathNotFound",
    "Suite",
    "SuiteLoader",
    "SuitePath",
    "UnresolvedDependency",
]

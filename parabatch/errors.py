"""parabatch.errors

Error kinds raised while loading a batch plan.

Every fatal error aborts the whole load: the caller either receives a complete
plan or one of these exceptions. ``NoClassFound`` is the only kind the loader
recovers from (the offending file is skipped).

Where a builtin exception already describes the failure, the error also
derives from it so callers that only know about builtins still catch it.
"""

from __future__ import annotations

__all__ = [
    "ParaBatchError",
    "InvalidConfiguration",
    "PathNotFound",
    "NoTestsDiscovered",
    "ParseFailure",
    "NoClassFound",
    "DataProviderError",
    "UnresolvedDependency",
]


class ParaBatchError(Exception):
    """Base class for every error raised by parabatch."""


class InvalidConfiguration(ParaBatchError, ValueError):
    """Options, patterns or project configuration are unusable."""


class PathNotFound(ParaBatchError, FileNotFoundError):
    """A configured root (or configuration file) does not exist."""


class NoTestsDiscovered(ParaBatchError, RuntimeError):
    """No file matched across all configured roots."""


class ParseFailure(ParaBatchError):
    """The source parser could not read a file."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Unable to parse {path}: {reason}")
        self.path = path
        self.reason = reason


class NoClassFound(ParaBatchError):
    """The file defines no (concrete) test class. Callers skip the file."""

    def __init__(self, path: str, reason: str = "no test class defined") -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path


class DataProviderError(ParaBatchError):
    """A data provider could not be evaluated."""


class UnresolvedDependency(ParaBatchError):
    """A ``@depends`` target was not found in any existing batch."""

    def __init__(self, method: str, target: str) -> None:
        super().__init__(
            f"Method '{method}' depends on '{target}', which is not in any batch "
            "(filtered out, unknown, or declared later)."
        )
        self.method = method
        self.target = target

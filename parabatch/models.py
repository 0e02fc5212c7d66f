"""parabatch.models

Lightweight data structures used across the loader.

These dataclasses provide a small, explicit vocabulary for:
- what a source file declares (ClassDescriptor / MethodDescriptor / DocMetadata)
- where tests are looked for (SuitePath)
- how a run is configured (LoaderOptions)
- what is handed to the execution engine (Batch / Suite)

Everything here is frozen. The batch plan is a read-only value once built.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:
    from parabatch.config import ProjectConfig


# Uses the *Test.py naming convention for test modules.
TEST_PATTERN = r".+Test\.py$"

# Matches any Python source file.
FILE_PATTERN = r".+\.py$"

DATA_SET_MARKER = " with data set "


@dataclass(frozen=True)
class DocMetadata:
    """Tags resolved from a docstring."""

    groups: Tuple[str, ...] = ()
    depends_on: Optional[str] = None
    data_provider: Optional[str] = None


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    doc: str = ""
    metadata: DocMetadata = field(default_factory=DocMetadata)


@dataclass(frozen=True)
class ClassDescriptor:
    """A test class as reported by the source parser.

    ``methods`` keeps declaration order; the batcher relies on it.
    """

    name: str
    doc: str = ""
    metadata: DocMetadata = field(default_factory=DocMetadata)
    methods: Tuple[MethodDescriptor, ...] = ()


@dataclass(frozen=True)
class SuitePath:
    """A root to scan together with the filename pattern used below it."""

    path: str
    pattern: str = TEST_PATTERN

    @staticmethod
    def from_suffix(path: str, suffix: str) -> "SuitePath":
        return SuitePath(path=path, pattern=re.escape(suffix) + "$")


PathLike = Union[str, SuitePath]


class DependencyPolicy(str, Enum):
    """What to do when a ``@depends`` target is in no batch."""

    DROP = "drop"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class LoaderOptions:
    """Run configuration consumed by :class:`parabatch.loader.SuiteLoader`.

    Notes
    -----
    - ``max_batch_size`` only applies in functional mode. Outside it the
      effective batch size is 0 (one independent unit per batch) and data
      providers are not expanded.
    - ``exclude_groups`` is merged with the project configuration's excluded
      groups at load time.
    """

    paths: Tuple[PathLike, ...] = ()
    functional: bool = False
    max_batch_size: int = 0
    groups: Tuple[str, ...] = ()
    exclude_groups: Tuple[str, ...] = ()
    filter: Optional[str] = None
    annotations: Mapping[str, str] = field(default_factory=dict)
    testsuite: Optional[str] = None
    configuration: Optional["ProjectConfig"] = None
    on_unresolved_dependency: DependencyPolicy = DependencyPolicy.DROP

    @property
    def batch_size(self) -> int:
        return self.max_batch_size if self.functional else 0

    @property
    def expand_data_providers(self) -> bool:
        return self.batch_size != 0


@dataclass(frozen=True)
class Batch:
    """Test units that run together in one worker invocation."""

    path: str
    tests: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.tests)

    def filter_expression(self) -> str:
        """Regular expression selecting exactly the units of this batch.

        The expression is searched in ``Class::test``. Each name starts right
        after the ``::`` separator so ``test_a`` does not select ``test_test_a``.
        Plain method names end at a word boundary so ``testA`` does not select
        ``testAB``; data-set variants are anchored at the end of the name.
        """
        parts = []
        for test in self.tests:
            tail = "$" if DATA_SET_MARKER in test else r"\b"
            parts.append(re.escape(test) + tail)
        return "::(?:" + "|".join(parts) + ")"


@dataclass(frozen=True)
class Suite:
    """All batches for one source file / test class."""

    path: str
    class_name: str
    batches: Tuple[Batch, ...]

    @property
    def test_count(self) -> int:
        return sum(len(b) for b in self.batches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "class_name": self.class_name,
            "batches": [list(b.tests) for b in self.batches],
        }


def plan_to_dict(suites: List[Suite]) -> Dict[str, Any]:
    """Serializable view of a batch plan (no timestamps, stable order)."""
    return {"suites": [s.to_dict() for s in suites]}

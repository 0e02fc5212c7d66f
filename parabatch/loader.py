"""parabatch.loader

Turn a tree of test modules into an ordered batch plan.

Pipeline
--------

  roots  ->  scanner  ->  parser  ->  filters / data providers  ->  batcher  ->  Suites

Root resolution (first match wins):

1. the ``path`` passed to :meth:`SuiteLoader.load`;
2. ``LoaderOptions.paths``;
3. the configured test suite named by ``LoaderOptions.testsuite``;
4. every test suite of the project configuration, in order.

The load is all-or-nothing. A file without a concrete test class is skipped;
every other error propagates and leaves the loader without suites, even when an
earlier load succeeded.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from parabatch.batcher import MethodUnits, build_batches
from parabatch.config import ProjectConfig
from parabatch.data_providers import DataProviderSource, ModuleDataProviderSource, expand_method
from parabatch.errors import InvalidConfiguration, NoClassFound
from parabatch.filters import FilterCriteria
from parabatch.metadata import has_annotation
from parabatch.models import (
    Batch,
    ClassDescriptor,
    DependencyPolicy,
    LoaderOptions,
    MethodDescriptor,
    PathLike,
    Suite,
)
from parabatch.parser import PythonSourceParser, SourceParser
from parabatch.scanner import dedupe, scan_paths

logger = logging.getLogger(__name__)


def _merge_groups(*group_lists: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dedupe(g for groups in group_lists for g in groups))


class SuiteLoader:
    """Load suites from paths or a project configuration.

    Collaborators default to the Python implementations and can be swapped
    (tests pass fakes).
    """

    def __init__(
        self,
        options: Optional[LoaderOptions] = None,
        *,
        parser: Optional[SourceParser] = None,
        data_provider_source: Optional[DataProviderSource] = None,
    ) -> None:
        if options is not None and not isinstance(options, LoaderOptions):
            raise InvalidConfiguration("SuiteLoader options must be None or of type LoaderOptions")

        self.options = options or LoaderOptions()

        size = self.options.max_batch_size
        if not isinstance(size, int) or size < 0:
            raise InvalidConfiguration(f"max_batch_size must be a non-negative integer, got {size!r}")

        try:
            self._policy = DependencyPolicy(self.options.on_unresolved_dependency)
        except ValueError as exc:
            raise InvalidConfiguration(
                f"Unknown unresolved-dependency policy: {self.options.on_unresolved_dependency!r}"
            ) from exc

        self._parser = parser or PythonSourceParser()
        self._source = data_provider_source or ModuleDataProviderSource()
        self._files: List[str] = []
        self._suites: Dict[str, Suite] = {}

    # ----------------------------
    # Results
    # ----------------------------

    def get_files(self) -> List[str]:
        return list(self._files)

    def get_suites(self) -> Dict[str, Suite]:
        """Loaded suites keyed by path, in discovery order."""
        return dict(self._suites)

    def get_test_methods(self) -> List[Batch]:
        """Every batch of every suite, flattened in plan order."""
        return [batch for suite in self._suites.values() for batch in suite.batches]

    # ----------------------------
    # Loading
    # ----------------------------

    def load(self, path: Union[None, PathLike, Sequence[PathLike]] = None) -> List[Suite]:
        self._files = []
        self._suites = {}

        config = self.options.configuration or ProjectConfig()
        criteria = FilterCriteria.build(
            groups=self.options.groups,
            exclude_groups=_merge_groups(self.options.exclude_groups, config.exclude_groups),
            name_filter=self.options.filter,
        )

        files = scan_paths(self._roots(path, config))

        suites: Dict[str, Suite] = {}
        for file_path in files:
            try:
                cls = self._parser.parse(file_path)
            except NoClassFound as exc:
                logger.debug("Skipping %s", exc)
                continue

            suite = self._create_suite(file_path, cls, criteria)
            if suite is not None:
                suites[file_path] = suite

        self._files = files
        self._suites = suites
        logger.info(
            "Loaded %d suite(s), %d batch(es) from %d file(s)",
            len(suites),
            sum(len(s.batches) for s in suites.values()),
            len(files),
        )
        return list(suites.values())

    def _roots(
        self,
        path: Union[None, PathLike, Sequence[PathLike]],
        config: ProjectConfig,
    ) -> List[PathLike]:
        if path:
            if isinstance(path, (list, tuple)):
                return list(path)
            return [path]  # type: ignore[list-item]
        if self.options.paths:
            return list(self.options.paths)
        if self.options.testsuite:
            return list(config.get_suite_by_name(self.options.testsuite))
        return [p for suite in config.get_suites() for p in suite]

    def _select_methods(self, cls: ClassDescriptor) -> Tuple[MethodDescriptor, ...]:
        annotations = self.options.annotations
        if not annotations:
            return cls.methods

        selected = tuple(
            m
            for m in cls.methods
            if any(
                has_annotation(m.doc, name, value.strip())
                for name, values in annotations.items()
                for value in str(values).split(",")
                if value.strip()
            )
        )
        return selected or cls.methods

    def _create_suite(self, path: str, cls: ClassDescriptor, criteria: FilterCriteria) -> Optional[Suite]:
        method_units: List[MethodUnits] = []
        for method in self._select_methods(cls):
            tests = expand_method(
                path=path,
                class_name=cls.name,
                method=method,
                groups=_merge_groups(cls.metadata.groups, method.metadata.groups),
                criteria=criteria,
                source=self._source,
                use_data_provider=self.options.expand_data_providers,
            )
            method_units.append(
                MethodUnits(name=method.name, units=tuple(tests), depends_on=method.metadata.depends_on)
            )

        batches = build_batches(
            method_units,
            max_batch_size=self.options.batch_size,
            path=path,
            policy=self._policy,
        )
        if not batches:
            logger.debug("No batches for %s (%s): everything filtered out", path, cls.name)
            return None
        return Suite(path=path, class_name=cls.name, batches=tuple(batches))

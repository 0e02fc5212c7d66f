"""parabatch.data_providers

Expand data-driven test methods into one unit per dataset.

A method tagged ``@dataProvider additions`` runs once per dataset returned by
``additions()``. Each run is a separate unit named::

    test_add with data set #0          (integer key)
    test_add with data set "negative"  (any other key)

The loader never instantiates test classes itself; it asks a
:class:`DataProviderSource` for the keys. The default source imports the test
module from its path and calls the provider on a fresh instance.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterable, Iterator, List, Protocol, Sequence

from parabatch.errors import DataProviderError
from parabatch.filters import FilterCriteria, matches
from parabatch.models import DATA_SET_MARKER, MethodDescriptor

logger = logging.getLogger(__name__)


class DataProviderSource(Protocol):
    def keys(self, path: str, class_name: str, provider_name: str) -> Sequence[Any]:
        ...


def format_data_set(method_name: str, key: Any) -> str:
    if isinstance(key, int) and not isinstance(key, bool):
        label = f"#{key}"
    else:
        label = f'"{key}"'
    return f"{method_name}{DATA_SET_MARKER}{label}"


def _load_module_from_path(path: Path) -> ModuleType:
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Test module not found: {p}")
    mod_name = f"parabatch_src_{p.stem}_{abs(hash(str(p)))}"
    spec = importlib.util.spec_from_file_location(mod_name, str(p))
    if spec is None or spec.loader is None:
        raise ImportError(f"Unable to import test module: {p}")
    mod = importlib.util.module_from_spec(spec)
    # Registered before exec: dataclasses and pickling look the module up by name.
    sys.modules[mod_name] = mod
    try:
        spec.loader.exec_module(mod)  # type: ignore[assignment]
    except BaseException:
        sys.modules.pop(mod_name, None)
        raise
    return mod


@contextmanager
def _import_root(directory: Path) -> Iterator[None]:
    """Make sibling modules of a test file importable while it runs."""
    entry = str(directory)
    added = entry not in sys.path
    if added:
        sys.path.insert(0, entry)
    try:
        yield
    finally:
        if added and entry in sys.path:
            sys.path.remove(entry)


def _dataset_keys(datasets: Any) -> List[Any]:
    if isinstance(datasets, Mapping):
        return list(datasets.keys())
    return list(range(len(list(datasets))))


class ModuleDataProviderSource:
    """Evaluate providers by importing the test module (once per path)."""

    def __init__(self) -> None:
        self._modules: Dict[str, ModuleType] = {}

    def _module(self, path: str) -> ModuleType:
        if path not in self._modules:
            self._modules[path] = _load_module_from_path(Path(path))
        return self._modules[path]

    def keys(self, path: str, class_name: str, provider_name: str) -> Sequence[Any]:
        try:
            with _import_root(Path(path).expanduser().resolve().parent):
                test_class = getattr(self._module(path), class_name)
                instance = test_class()
                datasets = getattr(instance, provider_name)()
                keys = _dataset_keys(datasets)
        except Exception as exc:
            raise DataProviderError(
                f"Data provider {class_name}.{provider_name} in {path} failed: {exc}"
            ) from exc

        logger.debug("%s.%s yielded %d dataset(s)", class_name, provider_name, len(keys))
        return keys


def expand_method(
    *,
    path: str,
    class_name: str,
    method: MethodDescriptor,
    groups: Iterable[str],
    criteria: FilterCriteria,
    source: DataProviderSource,
    use_data_provider: bool,
) -> List[str]:
    """Return the surviving unit names for one method.

    Without a provider tag (or with expansion off) this is the bare method
    name, if it passes the filters.
    """

    groups = tuple(groups)
    provider = method.metadata.data_provider

    if use_data_provider and provider:
        units = [format_data_set(method.name, key) for key in source.keys(path, class_name, provider)]
    else:
        units = [method.name]

    return [u for u in units if matches(class_name, u, groups, criteria)]

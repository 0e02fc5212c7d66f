"""parabatch.batcher

Group test units into batches for parallel workers.

Policy
------
Methods are processed in declaration order (no reordering).

1. A method with no surviving units contributes nothing.
2. A method with ``@depends target`` has its units appended to *every*
   existing batch that already holds a unit named ``target`` (creation order).
   The size cap does not apply to dependents. When no batch holds the target
   the units go nowhere; :class:`~parabatch.models.DependencyPolicy` decides
   whether that is silent, logged, or an error.
3. Any other unit is appended to the last batch while that batch is below
   ``max_batch_size``; otherwise it starts a new batch. A size of 0 therefore
   gives every independent unit its own batch.

This is a greedy streaming fill, not best-fit bin packing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from parabatch.errors import UnresolvedDependency
from parabatch.models import Batch, DependencyPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodUnits:
    """Units produced by one method plus its optional dependency target."""

    name: str
    units: Tuple[str, ...]
    depends_on: Optional[str] = None


def _add_dependent_units(
    batches: List[List[str]],
    method: MethodUnits,
    policy: DependencyPolicy,
) -> None:
    attached = False
    for batch in batches:
        if method.depends_on in batch:
            batch.extend(method.units)
            attached = True

    if attached:
        return

    if policy is DependencyPolicy.ERROR:
        raise UnresolvedDependency(method.name, str(method.depends_on))
    if policy is DependencyPolicy.WARN:
        logger.warning(
            "Dropping %d unit(s) of %s: dependency %s is not batched",
            len(method.units),
            method.name,
            method.depends_on,
        )
    else:
        logger.debug("Dropped %s: dependency %s is not batched", method.name, method.depends_on)


def _add_units(batches: List[List[str]], units: Iterable[str], max_batch_size: int) -> None:
    for unit in units:
        if batches and len(batches[-1]) < max_batch_size:
            batches[-1].append(unit)
        else:
            batches.append([unit])


def build_batches(
    methods: Iterable[MethodUnits],
    *,
    max_batch_size: int,
    path: str = "",
    policy: DependencyPolicy = DependencyPolicy.DROP,
) -> List[Batch]:
    """Partition method units into ordered batches."""

    batches: List[List[str]] = []
    for method in methods:
        if not method.units:
            continue
        if method.depends_on is not None:
            _add_dependent_units(batches, method, policy)
        else:
            _add_units(batches, method.units, max_batch_size)

    return [Batch(path=path, tests=tuple(b)) for b in batches]

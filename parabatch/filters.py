"""parabatch.filters

Decide whether a candidate test survives the run's filters.

Two gates, both must pass:

- group gate: a test without groups always passes. Otherwise it must intersect
  the include set (when one is configured) and must not intersect the exclude
  set (when one is configured).
- name gate: when a name filter is configured, it must be found in
  ``ClassName::testName``.

Data-set variants are matched one by one with their parent method's groups.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Pattern

from parabatch.errors import InvalidConfiguration

_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def compile_name_filter(raw: str) -> Pattern[str]:
    """Compile a name filter.

    ``/body/flags`` is taken as a delimited pattern; anything else is the
    pattern body itself.
    """

    body, flags = raw, 0
    if raw.startswith("/"):
        end = raw.rfind("/")
        if end == 0:
            raise InvalidConfiguration(f"Unterminated delimited filter: {raw!r}")
        body = raw[1:end]
        for ch in raw[end + 1 :]:
            if ch not in _FLAGS:
                raise InvalidConfiguration(f"Unsupported filter modifier {ch!r} in {raw!r}")
            flags |= _FLAGS[ch]

    try:
        return re.compile(body, flags)
    except re.error as exc:
        raise InvalidConfiguration(f"Invalid filter pattern {raw!r}: {exc}") from exc


@dataclass(frozen=True)
class FilterCriteria:
    groups: FrozenSet[str] = frozenset()
    exclude_groups: FrozenSet[str] = frozenset()
    name_pattern: Optional[Pattern[str]] = None

    @staticmethod
    def build(
        *,
        groups: Iterable[str] = (),
        exclude_groups: Iterable[str] = (),
        name_filter: Optional[str] = None,
    ) -> "FilterCriteria":
        return FilterCriteria(
            groups=frozenset(groups),
            exclude_groups=frozenset(exclude_groups),
            name_pattern=compile_name_filter(name_filter) if name_filter else None,
        )


def matches_groups(groups: Iterable[str], criteria: FilterCriteria) -> bool:
    group_set = set(groups)
    if not group_set:
        return True
    if criteria.groups and not (group_set & criteria.groups):
        return False
    if criteria.exclude_groups and (group_set & criteria.exclude_groups):
        return False
    return True


def matches_name(class_name: str, name: str, criteria: FilterCriteria) -> bool:
    if criteria.name_pattern is None:
        return True
    return criteria.name_pattern.search(f"{class_name}::{name}") is not None


def matches(class_name: str, name: str, groups: Iterable[str], criteria: FilterCriteria) -> bool:
    return matches_groups(groups, criteria) and matches_name(class_name, name, criteria)

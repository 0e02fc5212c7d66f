"""parabatch.config

Project configuration: named test suites and excluded groups.

File format (YAML)::

    testsuites:
      unit:
        - tests/unit                  # default suffix: Test.py
        - path: tests/legacy
          suffix: Check.py
      integration:
        - path: tests/integration
          pattern: '.+IT\\.py$'
    groups:
      exclude: [slow]

Relative suite paths are anchored at the configuration file's directory, so
a project file means the same thing wherever the CLI is started from.

Design goals
------------
- Be permissive: a suite entry may be a bare string.
- Fail loudly on shapes we cannot interpret (InvalidConfiguration).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from parabatch.errors import InvalidConfiguration, PathNotFound
from parabatch.models import TEST_PATTERN, SuitePath


@dataclass(frozen=True)
class ProjectConfig:
    """Suites (ordered) and configuration-level excluded groups."""

    suites: Dict[str, Tuple[SuitePath, ...]] = field(default_factory=dict)
    exclude_groups: Tuple[str, ...] = ()
    source: Optional[str] = None

    def get_suites(self) -> List[Tuple[SuitePath, ...]]:
        return list(self.suites.values())

    def get_suite_by_name(self, name: str) -> Tuple[SuitePath, ...]:
        if name not in self.suites:
            known = ", ".join(self.suites) or "none"
            raise InvalidConfiguration(f"Unknown test suite '{name}' (configured: {known})")
        return self.suites[name]

    # ----------------------------
    # Conversions
    # ----------------------------

    @staticmethod
    def from_dict(raw: Dict[str, Any], *, base_dir: str = ".") -> "ProjectConfig":
        raw = raw or {}

        suites_raw = raw.get("testsuites") or {}
        if not isinstance(suites_raw, dict):
            raise InvalidConfiguration("'testsuites' must be a mapping of suite name -> paths")

        suites: Dict[str, Tuple[SuitePath, ...]] = {}
        for name, entries in suites_raw.items():
            if isinstance(entries, (str, dict)):
                entries = [entries]
            if not isinstance(entries, list):
                raise InvalidConfiguration(f"Test suite '{name}' must list its paths")
            suites[str(name)] = tuple(_suite_path(e, base_dir=base_dir, suite=str(name)) for e in entries)

        groups_raw = raw.get("groups") or {}
        if not isinstance(groups_raw, dict):
            raise InvalidConfiguration("'groups' must be a mapping")
        exclude = groups_raw.get("exclude") or []
        if isinstance(exclude, str):
            exclude = [g.strip() for g in exclude.split(",") if g.strip()]

        return ProjectConfig(suites=suites, exclude_groups=tuple(str(g) for g in exclude))


def _suite_path(entry: Any, *, base_dir: str, suite: str) -> SuitePath:
    if isinstance(entry, str):
        entry = {"path": entry}
    if not isinstance(entry, dict) or not entry.get("path"):
        raise InvalidConfiguration(f"Test suite '{suite}' has an entry without a path: {entry!r}")

    path = os.path.join(base_dir, os.path.expanduser(str(entry["path"])))
    if entry.get("pattern"):
        return SuitePath(path=path, pattern=str(entry["pattern"]))
    suffix = entry.get("suffix")
    if suffix:
        return SuitePath.from_suffix(path, str(suffix))
    return SuitePath(path=path, pattern=TEST_PATTERN)


# ----------------------------
# YAML IO
# ----------------------------

def load_config_yaml(path: str | Path) -> ProjectConfig:
    """Load a project configuration from YAML."""
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise PathNotFound(f"Configuration not found: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"Malformed configuration {p}: {exc}") from exc
    if not isinstance(raw, dict):
        raise InvalidConfiguration(f"Configuration YAML must be a mapping/object at top level: {p}")

    cfg = ProjectConfig.from_dict(raw, base_dir=str(p.parent))
    return ProjectConfig(suites=cfg.suites, exclude_groups=cfg.exclude_groups, source=str(p))

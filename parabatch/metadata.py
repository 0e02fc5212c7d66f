"""parabatch.metadata

Pure helpers that read test tags out of docstrings.

Tag grammar
-----------
Tags are case-sensitive keywords prefixed by ``@``. Each tag consumes the rest
of its line up to the last word boundary::

    @group slow
    @group db
    @depends test_login
    @dataProvider additions

* ``@group`` may repeat; every occurrence yields one label (in order).
* ``@depends`` and ``@dataProvider`` yield the first match only. Later
  occurrences are ignored.

Absent tags yield no value; nothing here raises.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from parabatch.models import DocMetadata

__all__ = [
    "docblock_groups",
    "method_dependency",
    "method_data_provider",
    "has_annotation",
    "resolve_metadata",
]


_GROUP_RE = re.compile(r"@\bgroup\b \b(.*)\b")
_DEPENDS_RE = re.compile(r"@\bdepends\b \b(.*)\b")
_DATA_PROVIDER_RE = re.compile(r"@\bdataProvider\b \b(.*)\b")


def docblock_groups(doc: Optional[str]) -> Tuple[str, ...]:
    return tuple(_GROUP_RE.findall(doc or ""))


def method_dependency(doc: Optional[str]) -> Optional[str]:
    m = _DEPENDS_RE.search(doc or "")
    return m.group(1) if m else None


def method_data_provider(doc: Optional[str]) -> Optional[str]:
    m = _DATA_PROVIDER_RE.search(doc or "")
    return m.group(1) if m else None


def has_annotation(doc: Optional[str], name: str, value: str) -> bool:
    """True when ``doc`` carries ``@<name> <value>``."""
    pattern = "@" + re.escape(name) + r"\s+" + re.escape(value)
    return re.search(pattern, doc or "") is not None


def resolve_metadata(doc: Optional[str]) -> DocMetadata:
    """Resolve every supported tag at once."""
    return DocMetadata(
        groups=docblock_groups(doc),
        depends_on=method_dependency(doc),
        data_provider=method_data_provider(doc),
    )

"""parabatch.io

Atomic, stable writers for the batch plan.

A plan file is read by the execution engine while workers are being
scheduled, so a partially written file must never be observable. The JSON
text is rendered first, then written to a temp file in the target directory
and moved into place with ``os.replace()``. Formatting is fixed (sorted keys,
2-space indent, trailing newline): two runs over the same inputs produce
byte-identical files.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Union

from parabatch.models import Suite, plan_to_dict

PathArg = Union[str, Path]


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def write_json_atomic(path: PathArg, data: Any) -> Path:
    """Render ``data`` and replace ``path`` with it in one step.

    Rendering errors surface before anything touches the disk.
    """

    text = render_json(data)
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target


def write_plan(path: PathArg, suites: Iterable[Suite]) -> Path:
    return write_json_atomic(path, plan_to_dict(list(suites)))


def read_json(path: PathArg) -> Any:
    return json.loads(Path(path).expanduser().read_text(encoding="utf-8"))


def read_plan(path: PathArg) -> Dict[str, Any]:
    """Read a plan written by :func:`write_plan`."""
    data = read_json(path)
    if not isinstance(data, dict) or not isinstance(data.get("suites"), list):
        raise ValueError(f"Not a batch plan: {path}")
    return data

import ast
import unittest
from pathlib import Path
from typing import Iterable, List, Tuple


REPO_ROOT = Path(__file__).resolve().parents[1]

# Dependency rules:
# - the library (parabatch/) must not depend on the CLI layer
# - only the composition root may import python-dotenv
FORBIDDEN_IMPORTS = {
    "parabatch": ("cli", "parabatch_cli"),
}
DOTENV_ALLOWED = {Path("parabatch") / "wiring.py"}


def iter_py_files(package_dir: Path) -> Iterable[Path]:
    for p in package_dir.rglob("*.py"):
        if any(part.startswith(".") for part in p.parts):
            continue
        if "__pycache__" in p.parts:
            continue
        yield p


def imported_roots(py_file: Path) -> List[Tuple[str, str]]:
    """(root, full module name) for every absolute import in ``py_file``."""
    src = py_file.read_text(encoding="utf-8", errors="ignore")
    tree = ast.parse(src, filename=str(py_file))

    found: List[Tuple[str, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                found.append((alias.name.split(".", 1)[0], alias.name))
        elif isinstance(node, ast.ImportFrom):
            # Relative imports are within-package by definition.
            if node.level != 0 or not node.module:
                continue
            found.append((node.module.split(".", 1)[0], node.module))
    return found


class TestDependencyBoundaries(unittest.TestCase):
    def test_dependency_direction_is_enforced(self) -> None:
        problems: List[str] = []

        for pkg, forbidden in FORBIDDEN_IMPORTS.items():
            for py_file in iter_py_files(REPO_ROOT / pkg):
                bad = [mod for root, mod in imported_roots(py_file) if root in forbidden]
                if bad:
                    rel = py_file.relative_to(REPO_ROOT)
                    problems.append(f"{rel} imports forbidden modules: {bad}")

        if problems:
            self.fail(
                "Forbidden imports detected (violates dependency direction):\n" + "\n".join(problems)
            )

    def test_dotenv_is_only_loaded_by_the_composition_root(self) -> None:
        offenders = []
        for py_file in iter_py_files(REPO_ROOT / "parabatch"):
            rel = py_file.relative_to(REPO_ROOT)
            if rel in DOTENV_ALLOWED:
                continue
            if any(root == "dotenv" for root, _ in imported_roots(py_file)):
                offenders.append(str(rel))

        self.assertEqual([], offenders)


if __name__ == "__main__":
    unittest.main()

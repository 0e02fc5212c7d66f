"""parabatch.parser

Source parser for Python test modules.

The parser reads a file with :mod:`ast` and reports the test class it declares
as a :class:`~parabatch.models.ClassDescriptor`. It never imports the module:
discovery must not execute test code. Only data-provider expansion does that
(see :mod:`parabatch.data_providers`).

Which class is the test class
-----------------------------
1. The top-level class named after the file stem (``FooTest.py`` ->
   ``FooTest``), when present.
2. Otherwise the first top-level class of the file.

Abstract classes are not test classes: a class with an ``ABC``/``ABCMeta``
base or metaclass, an ``@abstractmethod`` member, or ``__test__ = False``
raises :class:`~parabatch.errors.NoClassFound` just like a file with no class.

Which methods are tests
-----------------------
Public methods named ``test*`` or carrying ``@test`` in their docstring, in
declaration order. Methods inherited from base classes declared in the same
file follow the class's own methods, unless overridden.
"""

from __future__ import annotations

import ast
import os
import re
from typing import Dict, List, Optional, Protocol, Set

from parabatch.errors import NoClassFound, ParseFailure
from parabatch.metadata import resolve_metadata
from parabatch.models import ClassDescriptor, MethodDescriptor

_TEST_TAG_RE = re.compile(r"@test\b")

_ABSTRACT_BASES = {"ABC", "abc.ABC"}
_ABSTRACT_METACLASSES = {"ABCMeta", "abc.ABCMeta"}
_ABSTRACT_DECORATORS = {"abstractmethod", "abc.abstractmethod"}

_FunctionNode = (ast.FunctionDef, ast.AsyncFunctionDef)


class SourceParser(Protocol):
    """Boundary the loader talks to. ``parse`` raises NoClassFound or ParseFailure."""

    def parse(self, path: str) -> ClassDescriptor:
        ...


def _dotted_name(node: ast.expr) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return f"{_dotted_name(node.value)}.{node.attr}"
    if isinstance(node, ast.Call):
        return _dotted_name(node.func)
    return ""


def _is_abstract(cls: ast.ClassDef) -> bool:
    if any(_dotted_name(b) in _ABSTRACT_BASES for b in cls.bases):
        return True
    for kw in cls.keywords:
        if kw.arg == "metaclass" and _dotted_name(kw.value) in _ABSTRACT_METACLASSES:
            return True

    for node in cls.body:
        if isinstance(node, _FunctionNode):
            if any(_dotted_name(d) in _ABSTRACT_DECORATORS for d in node.decorator_list):
                return True
        elif isinstance(node, ast.Assign):
            names = [t.id for t in node.targets if isinstance(t, ast.Name)]
            if "__test__" in names and isinstance(node.value, ast.Constant) and node.value.value is False:
                return True
    return False


def _is_test_method(node: ast.AST) -> bool:
    if not isinstance(node, _FunctionNode) or node.name.startswith("_"):
        return False
    if node.name.startswith("test"):
        return True
    return bool(_TEST_TAG_RE.search(ast.get_docstring(node) or ""))


def _method_descriptor(node: ast.AST) -> MethodDescriptor:
    doc = ast.get_docstring(node) or ""
    return MethodDescriptor(name=node.name, doc=doc, metadata=resolve_metadata(doc))


class PythonSourceParser:
    """Parse ``*Test.py`` modules into class descriptors."""

    def parse(self, path: str) -> ClassDescriptor:
        try:
            with open(path, "r", encoding="utf-8") as f:
                source = f.read()
            tree = ast.parse(source, filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as exc:
            raise ParseFailure(str(path), str(exc)) from exc

        classes: Dict[str, ast.ClassDef] = {}
        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                classes.setdefault(node.name, node)

        if not classes:
            raise NoClassFound(str(path))

        stem = os.path.splitext(os.path.basename(path))[0]
        cls = classes.get(stem) or next(iter(classes.values()))
        if _is_abstract(cls):
            raise NoClassFound(str(path), f"class {cls.name} is abstract")

        doc = ast.get_docstring(cls) or ""
        return ClassDescriptor(
            name=cls.name,
            doc=doc,
            metadata=resolve_metadata(doc),
            methods=tuple(_method_descriptor(n) for n in self._test_methods(cls, classes)),
        )

    def _test_methods(
        self,
        cls: ast.ClassDef,
        classes: Dict[str, ast.ClassDef],
        visited: Optional[Set[str]] = None,
    ) -> List[ast.AST]:
        visited = visited if visited is not None else set()
        visited.add(cls.name)

        methods: List[ast.AST] = [n for n in cls.body if _is_test_method(n)]
        seen = {m.name for m in methods}

        for base in cls.bases:
            base_cls = classes.get(_dotted_name(base))
            if base_cls is None or base_cls.name in visited:
                continue
            for inherited in self._test_methods(base_cls, classes, visited):
                if inherited.name not in seen:
                    seen.add(inherited.name)
                    methods.append(inherited)
        return methods

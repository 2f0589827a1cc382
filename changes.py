"""
Working-tree change detection and the module selection fed to ``mvn -pl``.

A change is mapped to the Maven module that owns it:

  moduleA/src/main/java/Foo.java  → moduleA
  parent/child/pom.xml            → parent/child
  pom.xml                         → .
  moduleA/README.md               → nearest ancestor with a pom.xml, else .
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

import git as gitutil

ROOT_MODULE = "."
SOURCE_DIR = "src"
DESCRIPTOR = "pom.xml"


@dataclass(frozen=True)
class Change:
    status: str
    path: str
    orig_path: Optional[str] = None

    def paths(self) -> list[str]:
        """Every path this change touches, original path first for renames."""
        return [self.orig_path, self.path] if self.orig_path else [self.path]


_ESCAPE = re.compile(r'((?:\\[0-7]{3})+)|\\(.)')
_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "a": "\a", "b": "\b", "f": "\f", "v": "\v",
    '"': '"', "\\": "\\",
}


def _unescape(match: re.Match) -> str:
    octal, simple = match.groups()
    if octal:
        raw = bytes(int(octal[i + 1:i + 4], 8) for i in range(0, len(octal), 4))
        return raw.decode("utf-8", "replace")
    return _SIMPLE_ESCAPES.get(simple, simple)


def _unquote(path: str) -> str:
    # git C-quotes unusual paths, non-ASCII bytes as octal: "caf\303\251.txt"
    if len(path) < 2 or not (path[0] == path[-1] == '"'):
        return path
    return _ESCAPE.sub(_unescape, path[1:-1])


def parse_status(output: str) -> list[Change]:
    """Parse ``git status --porcelain`` (v1) output into Change entries."""
    changes: list[Change] = []
    for line in output.splitlines():
        if len(line) < 4 or line.startswith("??"):
            continue
        code, rest = line[:2], line[3:]
        orig = None
        if " -> " in rest and ("R" in code or "C" in code):
            orig, rest = rest.split(" -> ", 1)
            orig = _unquote(orig)
        changes.append(Change(status=code, path=_unquote(rest), orig_path=orig))
    return changes


def module_for(path: str, root: Optional[Path] = None) -> str:
    """
    Return the module directory owning *path* (relative to the repo root).

    Only ancestors of *path* are inspected on disk, so deleted files resolve
    the same way as existing ones.
    """
    parts = PurePosixPath(path).parts
    if SOURCE_DIR in parts[:-1]:
        head = parts[: parts.index(SOURCE_DIR)]
        return "/".join(head) if head else ROOT_MODULE
    if parts and parts[-1] == DESCRIPTOR:
        head = parts[:-1]
        return "/".join(head) if head else ROOT_MODULE
    if root is not None:
        for depth in range(len(parts) - 1, 0, -1):
            candidate = "/".join(parts[:depth])
            if (root / candidate / DESCRIPTOR).is_file():
                return candidate
    return ROOT_MODULE


def select_modules(changes: Iterable[Change], root: Optional[Path] = None) -> list[str]:
    """Owning modules of *changes*, first-seen order, without duplicates."""
    selected: dict[str, None] = {}
    for change in changes:
        for path in change.paths():
            selected.setdefault(module_for(path, root), None)
    return list(selected)


def module_filter(modules: Iterable[str]) -> str:
    return ",".join(modules)


def updated_modules(root: Path) -> list[str]:
    """
    Modules with uncommitted changes to tracked files.

    *root* must be the work-tree top level: porcelain paths are relative to it.
    """
    return select_modules(parse_status(gitutil.status_porcelain(root)), root)

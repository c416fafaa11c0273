"""Enumerate function definitions and report the ones never seen at runtime."""

from __future__ import annotations

import ast
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from tracking.runtime import used_functions

PROJECT_ROOT = Path(__file__).resolve().parents[1]
OUTPUT_FILE = PROJECT_ROOT / "tracking" / "all_functions.txt"

EXCLUDED_DIRS = frozenset({".git", "__pycache__", "venv", ".venv", "tracking", "tests", "logs", "data"})


def iter_python_files(root: Path, *, excluded_dirs: Iterable[str] = EXCLUDED_DIRS) -> Iterator[Path]:
    """Yield Python files beneath ``root`` skipping excluded directories."""

    excluded = set(excluded_dirs)
    for path in sorted(root.rglob("*.py")):
        if any(part in excluded for part in path.relative_to(root).parts):
            continue
        yield path


class FunctionCollector(ast.NodeVisitor):
    """Collect dotted names of every function, scoped by class and outer function."""

    def __init__(self, module: str) -> None:
        super().__init__()
        self.module = module
        self.scope: List[str] = []
        self.functions: Set[str] = set()

    @contextmanager
    def scoped(self, name: str) -> Iterator[None]:
        self.scope.append(name)
        try:
            yield
        finally:
            self.scope.pop()

    def visit_ClassDef(self, node: ast.ClassDef) -> None:  # type: ignore[override]
        with self.scoped(node.name):
            self.generic_visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:  # type: ignore[override]
        self._record(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:  # type: ignore[override]
        self._record(node)

    def _record(self, node: ast.AST) -> None:
        name = getattr(node, "name", None)
        if not name:
            return
        parts = [self.module] if self.module else []
        parts.extend(self.scope)
        parts.append(name)
        self.functions.add(".".join(parts))

        with self.scoped(name):
            self.generic_visit(node)


def module_name_for(path: Path, root: Path = PROJECT_ROOT) -> str:
    return ".".join(
        part
        for part in path.relative_to(root).with_suffix("").parts
        if part != "__init__"
    )


def collect_functions(path: Path, root: Path = PROJECT_ROOT) -> Set[str]:
    text = path.read_text(encoding="utf-8")
    try:
        tree = ast.parse(text, filename=str(path))
    except SyntaxError as exc:
        print(f"Skipping {path}: failed to parse ({exc})")
        return set()

    collector = FunctionCollector(module=module_name_for(path, root))
    collector.visit(tree)
    return collector.functions


def build_inventory(root: Path = PROJECT_ROOT) -> Set[str]:
    all_functions: Set[str] = set()
    for file_path in iter_python_files(root):
        all_functions.update(collect_functions(file_path, root))
    return all_functions


def unused_functions(inventory: Set[str], used: Optional[Set[str]] = None) -> List[str]:
    """Return inventory entries that never showed up in the runtime log."""

    seen = used if used is not None else used_functions()
    return sorted(name for name in inventory if name not in seen)


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    inventory = build_inventory()

    OUTPUT_FILE.parent.mkdir(parents=True, exist_ok=True)
    with OUTPUT_FILE.open("w", encoding="utf-8") as handle:
        for name in sorted(inventory):
            handle.write(f"{name}\n")
    print(f"Wrote {len(inventory)} functions to {OUTPUT_FILE.relative_to(PROJECT_ROOT)}")

    if "--unused" in args:
        for name in unused_functions(inventory):
            print(name)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

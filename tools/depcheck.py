from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

SRC_DIR = Path(__file__).resolve().parents[1] / "src" / "bizcard"

_OUTER_LAYERS = {"bizcard.api", "bizcard.infrastructure"}
_IO_LIBRARIES = {
    "fastapi",
    "starlette",
    "sqlalchemy",
    "alembic",
    "psycopg",
    "redis",
    "httpx",
    "requests",
    "opentelemetry",
}

# Imports each layer may not reach for. The application layer validates with
# pydantic and counts with prometheus_client, the domain layer does neither.
LAYER_RULES: dict[str, set[str]] = {
    "domain": _OUTER_LAYERS
    | _IO_LIBRARIES
    | {"bizcard.application", "pydantic", "prometheus_client"},
    "application": _OUTER_LAYERS | _IO_LIBRARIES,
}


@dataclass(frozen=True)
class Violation:
    file_path: Path
    line: int
    module: str


def _python_files(root: Path) -> Iterable[Path]:
    if root.is_file() and root.suffix == ".py":
        yield root
    elif root.is_dir():
        yield from sorted(root.rglob("*.py"))


def _is_forbidden(module: str, forbidden: set[str]) -> bool:
    return any(module == name or module.startswith(f"{name}.") for name in forbidden)


def _imported_modules(tree: ast.AST) -> Iterable[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.lineno, node.module


def scan_file(file_path: Path, forbidden: set[str]) -> list[Violation]:
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    return [
        Violation(file_path=file_path, line=line, module=module)
        for line, module in _imported_modules(tree)
        if _is_forbidden(module, forbidden)
    ]


def find_violations(paths: Sequence[Path], layer: str) -> list[Violation]:
    forbidden = LAYER_RULES[layer]
    violations: list[Violation] = []
    for path in paths:
        for file_path in _python_files(path):
            violations.extend(scan_file(file_path, forbidden))
    return violations


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import policy check for the inner bizcard layers."
    )
    parser.add_argument(
        "--layer",
        choices=sorted(LAYER_RULES),
        action="append",
        default=[],
        help="Layer whose rules apply (repeatable). Defaults to every layer.",
    )
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Path to scan instead of src/bizcard/<layer> (repeatable).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    layers = args.layer or sorted(LAYER_RULES)
    if args.path and len(layers) != 1:
        # Explicit paths are checked against the strictest rules.
        layers = ["domain"]

    violations: list[Violation] = []
    for layer in layers:
        paths = [Path(item) for item in args.path] or [SRC_DIR / layer]
        violations.extend(find_violations(paths, layer))

    if not violations:
        print("depcheck passed")
        return 0

    print("depcheck failed: forbidden imports detected")
    for violation in violations:
        print(f"{violation.file_path}:{violation.line} -> {violation.module}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

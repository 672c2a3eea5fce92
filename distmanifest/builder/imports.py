"""Import collection — gather the module specifiers a bundle refers to.

Two sources feed the collector: bundler hooks that report resolved module
ids (``add``), and emitted JavaScript files scanned with regular
expressions (``collect_from_bundle``). The regex scan is best-effort: it
sees string-literal specifiers only, so computed ``require(name)`` calls
are missed.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable

import structlog

log = structlog.get_logger("distmanifest.imports")

BUNDLE_SUFFIXES = (".js", ".mjs", ".cjs")

_QUOTED = r"""(['"])([^'"\n]+)\1"""

# import x from "y" / import {a} from "y" / export * from "y"
_FROM_RE = re.compile(r"\b(?:import|export)\b[^'\";]*?\bfrom\s*" + _QUOTED)

# import "y"
_SIDE_EFFECT_RE = re.compile(r"(?:^|[;\s})])import\s*" + _QUOTED, re.MULTILINE)

# import("y") / require("y")
_CALL_RE = re.compile(r"\b(?:import|require)\s*\(\s*" + _QUOTED + r"\s*\)")


def extract_specifiers(source: str) -> set[str]:
    """Return the string-literal module specifiers referenced by *source*."""
    found: set[str] = set()
    for pattern in (_FROM_RE, _SIDE_EFFECT_RE, _CALL_RE):
        for m in pattern.finditer(source):
            found.add(m.group(2))
    return found


def _is_within(path_like: str, directory: Path) -> bool:
    try:
        Path(path_like).resolve().relative_to(directory)
    except (ValueError, OSError):
        return False
    return True


class ImportCollector:
    """Accumulates external import specifiers for one build.

    Ids that point inside *input_dir* (the package being built) are
    ignored, as are bundler-virtual ids starting with ``\\0``.
    """

    def __init__(self, input_dir: Path | None = None) -> None:
        self._input_dir = Path(input_dir).resolve() if input_dir is not None else None
        self._specifiers: set[str] = set()

    @property
    def specifiers(self) -> frozenset[str]:
        return frozenset(self._specifiers)

    def __len__(self) -> int:
        return len(self._specifiers)

    def add(self, imported_ids: Iterable[str]) -> None:
        for imported_id in imported_ids:
            if not imported_id or imported_id.startswith("\0"):
                continue
            if (
                self._input_dir is not None
                and os.path.isabs(imported_id)
                and _is_within(imported_id, self._input_dir)
            ):
                continue
            self._specifiers.add(imported_id)

    def add_source(self, source: str) -> None:
        self.add(extract_specifiers(source))

    def collect_from_bundle(self, paths: Iterable[Path]) -> None:
        """Scan bundle files (directories are walked) for import specifiers."""
        for path in paths:
            path = Path(path)
            if path.is_dir():
                files = sorted(
                    p for p in path.rglob("*") if p.is_file() and p.suffix in BUNDLE_SUFFIXES
                )
            else:
                files = [path]
            for file_path in files:
                content = file_path.read_text(encoding="utf-8", errors="replace")
                before = len(self._specifiers)
                self.add_source(content)
                log.debug(
                    "imports.file_scanned",
                    path=str(file_path),
                    new_specifiers=len(self._specifiers) - before,
                )


def read_imports_file(path: Path) -> list[str]:
    """Read one specifier per line; blank lines and ``#`` comments are skipped."""
    specifiers: list[str] = []
    for raw_line in Path(path).read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        specifiers.append(line)
    return specifiers

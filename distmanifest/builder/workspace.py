"""Sibling version lookup — resolve workspace placeholders to published versions."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path

import structlog

log = structlog.get_logger("distmanifest.workspace")

MANIFEST_NAME = "package.json"

# `*`, `workspace:<anything>` or `portal:<anything>`
WORKSPACE_VERSION_RE = re.compile(r"^(?:\*|workspace:.+|portal:.+)$")

_EXCLUDED_DIRS = frozenset({"node_modules"})


def is_workspace_version(version: object) -> bool:
    """Return True if *version* is a workspace placeholder."""
    return isinstance(version, str) and WORKSPACE_VERSION_RE.match(version) is not None


def _read_name_version(path: Path) -> tuple[str, str] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.debug("workspace.sibling_skipped", path=str(path), reason=str(exc))
        return None
    if not isinstance(data, dict):
        log.debug("workspace.sibling_skipped", path=str(path), reason="not an object")
        return None
    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not isinstance(version, str) or not name or not version:
        log.debug("workspace.sibling_skipped", path=str(path), reason="missing name/version")
        return None
    return name, version


def scan_package_versions(packages_root: Path) -> dict[str, str]:
    """Walk *packages_root* and index every ``package.json`` as name -> version.

    ``node_modules`` and hidden (dot) directories are never entered.
    Directories are visited in sorted order and the first manifest declaring
    a name wins.
    """
    versions: dict[str, str] = {}
    root = Path(packages_root)
    if not root.is_dir():
        log.debug("workspace.root_missing", packages_root=str(root))
        return versions

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if d not in _EXCLUDED_DIRS and not d.startswith(".")
        )
        if MANIFEST_NAME not in filenames:
            continue
        entry = _read_name_version(Path(dirpath) / MANIFEST_NAME)
        if entry is None:
            continue
        name, version = entry
        versions.setdefault(name, version)
    return versions


class VersionIndex:
    """Name -> version index over one packages root, built on first lookup."""

    def __init__(self, packages_root: Path) -> None:
        self._packages_root = Path(packages_root)
        self._versions: dict[str, str] | None = None

    @property
    def packages_root(self) -> Path:
        return self._packages_root

    @property
    def built(self) -> bool:
        return self._versions is not None

    def _ensure(self) -> dict[str, str]:
        if self._versions is None:
            self._versions = scan_package_versions(self._packages_root)
            log.info(
                "workspace.index_built",
                packages_root=str(self._packages_root),
                packages=len(self._versions),
            )
        return self._versions

    def get(self, name: str) -> str | None:
        return self._ensure().get(name)

    def as_dict(self) -> dict[str, str]:
        return dict(self._ensure())

    def substitute(self, dependencies: dict[str, str]) -> tuple[dict[str, str], list[str]]:
        """Replace placeholder versions in *dependencies* in place.

        Returns ``(substituted, unresolved)``: the name -> concrete version
        pairs that were replaced, and the names left as placeholders.
        """
        substituted: dict[str, str] = {}
        unresolved: list[str] = []
        for name, version in dependencies.items():
            if not is_workspace_version(version):
                continue
            concrete = self.get(name)
            if concrete is None:
                log.warning("workspace.sibling_not_found", package=name, version=version)
                unresolved.append(name)
                continue
            dependencies[name] = concrete
            substituted[name] = concrete
        return substituted, unresolved

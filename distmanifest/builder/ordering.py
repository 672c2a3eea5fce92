"""Canonical ``package.json`` key ordering."""

from __future__ import annotations

from typing import Any

# Well-known keys in conventional order; anything else follows alphabetically
CANONICAL_KEYS: tuple[str, ...] = (
    "$schema",
    "name",
    "displayName",
    "version",
    "private",
    "description",
    "categories",
    "keywords",
    "homepage",
    "bugs",
    "repository",
    "funding",
    "license",
    "author",
    "maintainers",
    "contributors",
    "publisher",
    "sideEffects",
    "type",
    "imports",
    "exports",
    "main",
    "svelte",
    "umd:main",
    "jsdelivr",
    "unpkg",
    "module",
    "source",
    "jsnext:main",
    "browser",
    "react-native",
    "types",
    "typesVersions",
    "typings",
    "style",
    "example",
    "examplestyle",
    "assets",
    "bin",
    "man",
    "directories",
    "files",
    "workspaces",
    "binary",
    "scripts",
    "betterScripts",
    "config",
    "overrides",
    "resolutions",
    "dependencies",
    "bundleDependencies",
    "bundledDependencies",
    "peerDependencies",
    "peerDependenciesMeta",
    "optionalDependencies",
    "devDependencies",
    "engines",
    "engineStrict",
    "os",
    "cpu",
    "preferGlobal",
    "publishConfig",
    "packageManager",
)

# Object-valued fields whose own keys are sorted alphabetically
SORTED_VALUE_KEYS = frozenset(
    {
        "dependencies",
        "peerDependencies",
        "peerDependenciesMeta",
        "optionalDependencies",
        "devDependencies",
        "resolutions",
        "engines",
        "publishConfig",
    }
)

_RANK = {key: index for index, key in enumerate(CANONICAL_KEYS)}


def _sort_key(key: str) -> tuple[int, str]:
    return (_RANK.get(key, len(CANONICAL_KEYS)), key)


def sort_manifest(manifest: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *manifest* with keys in canonical order."""
    ordered: dict[str, Any] = {}
    for key in sorted(manifest, key=_sort_key):
        value = manifest[key]
        if key in SORTED_VALUE_KEYS and isinstance(value, dict):
            value = {k: value[k] for k in sorted(value)}
        ordered[key] = value
    return ordered

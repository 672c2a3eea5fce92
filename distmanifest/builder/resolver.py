"""Specifier resolver — map an import specifier to the declared package owning it."""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from distmanifest.builder.models import (
    DEFAULT_LOCAL_SUFFIXES,
    MATCH_DEPTH_ALL,
    MATCH_DEPTHS,
    DependencyTable,
)

_SEPARATOR_RE = re.compile(r"[/\\]")


def is_local_specifier(
    specifier: str, local_suffixes: Iterable[str] = DEFAULT_LOCAL_SUFFIXES
) -> bool:
    """Return True when *specifier* names a local or virtual module."""
    if specifier.startswith(("\0", ".", "/")):
        return True
    # Windows absolute paths such as C:\src\index.ts
    if len(specifier) > 2 and specifier[1] == ":" and specifier[2] in "/\\":
        return True
    return specifier.endswith(tuple(local_suffixes))


def _package_token_count(tokens: list[str]) -> int:
    """Number of leading tokens forming the package name itself."""
    if tokens[0].startswith("@") and len(tokens) > 1:
        return 2
    return 1


def resolve_specifier(
    specifier: str,
    declared: Mapping[str, str],
    *,
    match_depth: str = MATCH_DEPTH_ALL,
    local_suffixes: Iterable[str] = DEFAULT_LOCAL_SUFFIXES,
) -> str | None:
    """Return the declared package name that owns *specifier*, or None.

    Prefixes are tried longest first, so ``@scope/pkg/sub`` prefers a
    declared ``@scope/pkg/sub`` over ``@scope/pkg``. A scoped specifier never
    matches on its bare ``@scope`` token.
    """
    if match_depth not in MATCH_DEPTHS:
        raise ValueError(f"match_depth must be one of {MATCH_DEPTHS}, got {match_depth!r}")
    if not specifier or is_local_specifier(specifier, local_suffixes):
        return None

    tokens = [t for t in _SEPARATOR_RE.split(specifier) if t]
    if not tokens:
        return None
    if tokens[0].startswith("@") and len(tokens) == 1:
        return None

    shortest = _package_token_count(tokens)
    longest = len(tokens) if match_depth == MATCH_DEPTH_ALL else shortest
    for size in range(longest, shortest - 1, -1):
        candidate = "/".join(tokens[:size])
        if candidate in declared:
            return candidate
    return None


def resolve_dependencies(
    specifiers: Iterable[str],
    declared: Mapping[str, str],
    *,
    match_depth: str = MATCH_DEPTH_ALL,
    local_suffixes: Iterable[str] = DEFAULT_LOCAL_SUFFIXES,
) -> DependencyTable:
    """Resolve every distinct specifier and return the used subset of *declared*."""
    suffixes = tuple(local_suffixes)
    resolved: DependencyTable = {}
    for specifier in sorted(set(specifiers)):
        name = resolve_specifier(
            specifier, declared, match_depth=match_depth, local_suffixes=suffixes
        )
        if name is not None:
            resolved[name] = declared[name]
    return resolved

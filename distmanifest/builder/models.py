"""Data models for the manifest builder."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Union

from distmanifest.exceptions import ConfigurationError

Manifest = dict[str, Any]
DependencyTable = dict[str, str]
Processor = Callable[[Manifest], Manifest]

# Fields copied from the development manifest when the draft lacks them
DEFAULT_INHERIT_PROPS: tuple[str, ...] = (
    "name",
    "version",
    "description",
    "repository",
    "bugs",
    "homepage",
    "author",
    "contributors",
    "license",
    "type",
    "engines",
    "keywords",
)

# Suffixes marking a compiled local module rather than an external package
DEFAULT_LOCAL_SUFFIXES: tuple[str, ...] = (
    ".js",
    ".mjs",
    ".cjs",
    ".jsx",
    ".ts",
    ".mts",
    ".cts",
    ".tsx",
)

MATCH_DEPTH_ALL = "all"
MATCH_DEPTH_PACKAGE = "package"
MATCH_DEPTHS = (MATCH_DEPTH_ALL, MATCH_DEPTH_PACKAGE)


@dataclass(frozen=True)
class CategoryMapping:
    """One declared dependency category and the output field it lands in."""

    source: str
    output: str


@dataclass(frozen=True)
class StaticContent:
    """Base content given as a fixed partial manifest."""

    value: Mapping[str, Any]

    def render(self, dev_manifest: Manifest) -> Manifest:
        return copy.deepcopy(dict(self.value))


@dataclass(frozen=True)
class DerivedContent:
    """Base content computed from the development manifest."""

    factory: Callable[[Manifest], Mapping[str, Any]]

    def render(self, dev_manifest: Manifest) -> Manifest:
        produced = self.factory(copy.deepcopy(dev_manifest))
        if produced is None:
            return {}
        if not isinstance(produced, Mapping):
            raise ConfigurationError(
                f"content must produce a mapping, got {type(produced).__name__}"
            )
        return copy.deepcopy(dict(produced))


Content = Union[StaticContent, DerivedContent]


def as_content(value: Content | Mapping[str, Any] | Callable | None) -> Content:
    """Coerce a mapping, a callable or ``None`` into a content variant."""
    if isinstance(value, (StaticContent, DerivedContent)):
        return value
    if value is None:
        return StaticContent({})
    if isinstance(value, Mapping):
        return StaticContent(value)
    if callable(value):
        return DerivedContent(value)
    raise TypeError(f"content must be a mapping or a callable, got {type(value).__name__}")


def _as_tuple(value: str | Iterable[str]) -> tuple[str, ...]:
    # a lone string is one entry, not a sequence of characters
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass
class BuildOptions:
    """Options accepted by :class:`ManifestAssembler`.

    ``packages_root`` defaults to the parent of ``input_dir``; ``output_dir``
    defaults to whatever output location the build itself declares.
    ``category_strategy`` is a registered strategy name or an explicit
    sequence of :class:`CategoryMapping`.
    """

    content: Content = field(default_factory=lambda: StaticContent({}))
    inherit_props: tuple[str, ...] = DEFAULT_INHERIT_PROPS
    input_dir: Path = field(default_factory=Path.cwd)
    packages_root: Path | None = None
    output_dir: Path | None = None
    keep_workspace_dependencies: bool = False
    processor: Processor | None = None
    category_strategy: str | tuple[CategoryMapping, ...] = "fold-dev"
    match_depth: str = MATCH_DEPTH_ALL
    local_suffixes: tuple[str, ...] = DEFAULT_LOCAL_SUFFIXES

    def __post_init__(self) -> None:
        self.content = as_content(self.content)
        self.input_dir = Path(self.input_dir)
        if self.packages_root is not None:
            self.packages_root = Path(self.packages_root)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)
        self.inherit_props = _as_tuple(self.inherit_props)
        self.local_suffixes = _as_tuple(self.local_suffixes)
        if not isinstance(self.category_strategy, str):
            self.category_strategy = tuple(self.category_strategy)

    @property
    def resolved_packages_root(self) -> Path:
        if self.packages_root is not None:
            return self.packages_root
        return self.input_dir.resolve().parent


@dataclass
class AssemblyResult:
    """Outcome of one assembler run."""

    manifest: Manifest
    attributed: dict[str, str] = field(default_factory=dict)
    substituted: dict[str, str] = field(default_factory=dict)
    unresolved_placeholders: list[str] = field(default_factory=list)

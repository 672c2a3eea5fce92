"""Manifest builder — derive a trimmed package.json for a build output."""

from distmanifest.builder.assembler import (
    ManifestAssembler,
    assemble_manifest,
    build_dist_manifest,
)
from distmanifest.builder.imports import ImportCollector, extract_specifiers
from distmanifest.builder.models import (
    AssemblyResult,
    BuildOptions,
    CategoryMapping,
    DerivedContent,
    StaticContent,
    as_content,
)
from distmanifest.builder.resolver import resolve_dependencies, resolve_specifier
from distmanifest.builder.strategies import get_strategy, register_strategy
from distmanifest.builder.workspace import VersionIndex, is_workspace_version

__all__ = [
    "AssemblyResult",
    "BuildOptions",
    "CategoryMapping",
    "DerivedContent",
    "ImportCollector",
    "ManifestAssembler",
    "StaticContent",
    "VersionIndex",
    "as_content",
    "assemble_manifest",
    "build_dist_manifest",
    "extract_specifiers",
    "get_strategy",
    "is_workspace_version",
    "register_strategy",
    "resolve_dependencies",
    "resolve_specifier",
]

"""distmanifest: trimmed, dependency-accurate package.json for build outputs."""

__version__ = "0.1.0"

from distmanifest.builder import (
    AssemblyResult,
    BuildOptions,
    CategoryMapping,
    DerivedContent,
    ImportCollector,
    ManifestAssembler,
    StaticContent,
    VersionIndex,
    assemble_manifest,
    build_dist_manifest,
    resolve_specifier,
)
from distmanifest.exceptions import (
    ConfigurationError,
    DistManifestError,
    ManifestNotFoundError,
    ManifestParseError,
)

__all__ = [
    "AssemblyResult",
    "BuildOptions",
    "CategoryMapping",
    "ConfigurationError",
    "DerivedContent",
    "DistManifestError",
    "ImportCollector",
    "ManifestAssembler",
    "ManifestNotFoundError",
    "ManifestParseError",
    "StaticContent",
    "VersionIndex",
    "assemble_manifest",
    "build_dist_manifest",
    "resolve_specifier",
]

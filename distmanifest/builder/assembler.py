"""ManifestAssembler — derive the distributable manifest from the development one."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Iterable, Mapping

import structlog

from distmanifest.builder.manifest_io import read_manifest, write_manifest
from distmanifest.builder.models import (
    AssemblyResult,
    BuildOptions,
    CategoryMapping,
    DependencyTable,
    Manifest,
)
from distmanifest.builder.ordering import sort_manifest
from distmanifest.builder.resolver import resolve_dependencies
from distmanifest.builder.strategies import get_strategy
from distmanifest.builder.workspace import VersionIndex
from distmanifest.exceptions import ConfigurationError

log = structlog.get_logger("distmanifest.assembler")


def _declared_table(dev_manifest: Manifest, category: str) -> DependencyTable:
    """Return the string-valued entries of one declared category."""
    raw = dev_manifest.get(category)
    if not isinstance(raw, Mapping):
        return {}
    return {name: version for name, version in raw.items() if isinstance(version, str)}


def resolve_output_dir(
    options: BuildOptions,
    bundle_dir: Path | None = None,
    bundle_file: Path | None = None,
) -> Path:
    """Pick the output directory: explicit option, then bundle dir, then bundle file's dir."""
    if options.output_dir is not None:
        return options.output_dir
    if bundle_dir is not None:
        return Path(bundle_dir)
    if bundle_file is not None:
        return Path(bundle_file).parent
    raise ConfigurationError(
        "no output directory: set output_dir or give the bundle's output dir/file"
    )


class ManifestAssembler:
    """Builds one distributable manifest per :meth:`assemble` call.

    Every call gets its own :class:`VersionIndex`, so sibling versions are
    scanned at most once per run and never shared between runs.
    """

    def __init__(self, options: BuildOptions | None = None) -> None:
        self._options = options or BuildOptions()
        self._strategy: tuple[CategoryMapping, ...] = get_strategy(
            self._options.category_strategy
        )

    @property
    def options(self) -> BuildOptions:
        return self._options

    @property
    def strategy(self) -> tuple[CategoryMapping, ...]:
        return self._strategy

    # ── pure assembly ────────────────────────────────────────────────────

    def assemble(self, dev_manifest: Manifest, specifiers: Iterable[str]) -> AssemblyResult:
        """Run the resolution pipeline on an already-loaded development manifest."""
        opts = self._options
        imports = set(specifiers)
        draft = opts.content.render(dev_manifest)
        if not isinstance(draft, dict):
            raise ConfigurationError(
                f"content must produce a mapping, got {type(draft).__name__}"
            )

        index = VersionIndex(opts.resolved_packages_root)
        result = AssemblyResult(manifest=draft)

        # ── attribute each used package to exactly one output field ──────
        tables: dict[str, DependencyTable] = {}
        for mapping in self._strategy:
            declared = _declared_table(dev_manifest, mapping.source)
            resolved = resolve_dependencies(
                imports,
                declared,
                match_depth=opts.match_depth,
                local_suffixes=opts.local_suffixes,
            )
            table = tables.setdefault(mapping.output, {})
            for name, version in resolved.items():
                if name in result.attributed:
                    log.debug(
                        "assembler.duplicate_skipped",
                        package=name,
                        category=mapping.source,
                        kept=result.attributed[name],
                    )
                    continue
                result.attributed[name] = mapping.output
                table[name] = version

        # ── overrides, placeholders, write-back ──────────────────────────
        for output, table in tables.items():
            override = draft.get(output)
            if isinstance(override, Mapping):
                table.update(override)
            elif override is not None:
                log.warning(
                    "assembler.override_ignored",
                    field=output,
                    type=type(override).__name__,
                )

            if not opts.keep_workspace_dependencies:
                substituted, unresolved = index.substitute(table)
                result.substituted.update(substituted)
                result.unresolved_placeholders.extend(unresolved)

            if table:
                draft[output] = {name: table[name] for name in sorted(table)}
            else:
                draft.pop(output, None)

        # ── inherited top-level fields ───────────────────────────────────
        for prop in opts.inherit_props:
            if draft.get(prop) is None and dev_manifest.get(prop) is not None:
                draft[prop] = copy.deepcopy(dev_manifest[prop])

        if opts.processor is not None:
            processed = opts.processor(draft)
            if processed is not None:
                draft = processed
            if not isinstance(draft, dict):
                raise ConfigurationError(
                    f"processor must return a mapping, got {type(draft).__name__}"
                )

        result.manifest = sort_manifest(draft)
        log.info(
            "assembler.assembled",
            imports=len(imports),
            dependencies=len(result.attributed),
            substituted=len(result.substituted),
            index_built=index.built,
        )
        return result

    # ── file-backed run ──────────────────────────────────────────────────

    def load_dev_manifest(self) -> Manifest:
        return read_manifest(self._options.input_dir)

    def build(
        self,
        specifiers: Iterable[str],
        *,
        bundle_dir: Path | None = None,
        bundle_file: Path | None = None,
    ) -> Path:
        """Read the development manifest, assemble, and write ``package.json``.

        The output location is resolved before anything is read, so a
        configuration error never leaves a partial file behind.
        """
        output_dir = resolve_output_dir(self._options, bundle_dir, bundle_file)
        dev_manifest = self.load_dev_manifest()
        result = self.assemble(dev_manifest, specifiers)
        return write_manifest(output_dir, result.manifest)


def build_dist_manifest(
    specifiers: Iterable[str],
    options: BuildOptions | None = None,
    *,
    bundle_dir: Path | None = None,
    bundle_file: Path | None = None,
) -> Path:
    """One-shot helper: assemble and write the distributable manifest."""
    return ManifestAssembler(options).build(
        specifiers, bundle_dir=bundle_dir, bundle_file=bundle_file
    )


def assemble_manifest(
    dev_manifest: Mapping[str, Any],
    specifiers: Iterable[str],
    options: BuildOptions | None = None,
) -> Manifest:
    """Return the distributable manifest for an in-memory development manifest."""
    return ManifestAssembler(options).assemble(dict(dev_manifest), specifiers).manifest

"""CLI entry point: dist-manifest.

Subcommands:
    dist-manifest build --bundle dist/         # write dist/package.json
    dist-manifest build --bundle dist/ --dry-run
    dist-manifest resolve lodash/fp            # which declared package owns it
    dist-manifest versions --packages-root ..  # sibling workspace versions
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from distmanifest.builder.assembler import ManifestAssembler, resolve_output_dir
from distmanifest.builder.imports import ImportCollector, read_imports_file
from distmanifest.builder.manifest_io import dump_manifest, read_manifest, write_manifest
from distmanifest.builder.models import MATCH_DEPTHS
from distmanifest.builder.resolver import resolve_specifier
from distmanifest.builder.strategies import CATEGORY_PRIORITY, STRATEGY_REGISTRY
from distmanifest.builder.workspace import VersionIndex
from distmanifest.core.config import DistManifestConfig, load_config
from distmanifest.core.logging import setup_logging
from distmanifest.exceptions import DistManifestError


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer (default: $DISTMANIFEST_LOG_FORMAT or console)",
)
def main(verbose: bool, log_format: str | None) -> None:
    """dist-manifest: write a trimmed package.json next to a build's output."""
    setup_logging("DEBUG" if verbose else None, log_format)


@main.command("build")
@click.option("--input-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding the development package.json (default: cwd)")
@click.option("--bundle", "bundles", multiple=True,
              type=click.Path(exists=True, path_type=Path),
              help="Emitted bundle file or directory to scan for imports (repeatable)")
@click.option("--import", "imports", multiple=True, help="Extra import specifier (repeatable)")
@click.option("--imports-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="File listing import specifiers, one per line")
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Where to write package.json (default: the bundle's directory)")
@click.option("--packages-root", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Root scanned for sibling workspace packages (default: parent of input dir)")
@click.option("--keep-workspace-deps/--resolve-workspace-deps", default=None,
              help="Leave workspace version placeholders untouched")
@click.option("--strategy", type=click.Choice(sorted(STRATEGY_REGISTRY)), default=None,
              help="Category strategy (default: fold-dev)")
@click.option("--match-depth", type=click.Choice(MATCH_DEPTHS), default=None,
              help="Sub-path matching policy")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="JSON config file")
@click.option("--dry-run", is_flag=True, help="Print the manifest instead of writing it")
def build(
    input_dir: Path | None,
    bundles: tuple[Path, ...],
    imports: tuple[str, ...],
    imports_file: Path | None,
    output_dir: Path | None,
    packages_root: Path | None,
    keep_workspace_deps: bool | None,
    strategy: str | None,
    match_depth: str | None,
    config_path: Path | None,
    dry_run: bool,
) -> None:
    """Assemble the distributable package.json for a build."""
    try:
        if config_path is not None:
            config = load_config(config_path)
            base_dir = config_path.resolve().parent
        else:
            config = DistManifestConfig()
            base_dir = None

        options = config.to_options(
            base_dir,
            input_dir=input_dir,
            output_dir=output_dir,
            packages_root=packages_root,
            keep_workspace_dependencies=keep_workspace_deps,
            category_strategy=strategy,
            match_depth=match_depth,
        )

        collector = ImportCollector(options.input_dir)
        collector.collect_from_bundle(bundles)
        collector.add(imports)
        if imports_file is not None:
            collector.add(read_imports_file(imports_file))

        assembler = ManifestAssembler(options)
        if dry_run:
            result = assembler.assemble(assembler.load_dev_manifest(), collector.specifiers)
            click.echo(dump_manifest(result.manifest), nl=False)
            return

        bundle_dir = next((b for b in bundles if b.is_dir()), None)
        bundle_file = next((b for b in bundles if b.is_file()), None)
        target = resolve_output_dir(options, bundle_dir, bundle_file)
        result = assembler.assemble(assembler.load_dev_manifest(), collector.specifiers)
        path = write_manifest(target, result.manifest)
    except DistManifestError as exc:
        _fail(exc)
        return

    deps = len(result.attributed)
    click.echo(f"Wrote {path} ({deps} dependenc{'y' if deps == 1 else 'ies'})")
    for name in result.unresolved_placeholders:
        click.echo(f"  unresolved workspace dependency: {name}", err=True)


@main.command("resolve")
@click.argument("specifier")
@click.option("--input-dir", type=click.Path(file_okay=False, path_type=Path),
              default=Path("."), help="Directory holding the development package.json")
@click.option("--match-depth", type=click.Choice(MATCH_DEPTHS), default="all")
def resolve(specifier: str, input_dir: Path, match_depth: str) -> None:
    """Show which declared package owns SPECIFIER."""
    try:
        dev_manifest = read_manifest(input_dir)
    except DistManifestError as exc:
        _fail(exc)
        return

    for category in CATEGORY_PRIORITY:
        declared = dev_manifest.get(category)
        if not isinstance(declared, dict):
            continue
        name = resolve_specifier(specifier, declared, match_depth=match_depth)
        if name is not None:
            click.echo(f"{name} {declared[name]} ({category})")
            return

    click.echo(f"{specifier}: not a declared dependency", err=True)
    sys.exit(1)


@main.command("versions")
@click.option("--packages-root", type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=Path(".."), help="Root scanned for package.json files")
def versions(packages_root: Path) -> None:
    """Print the sibling package version index as JSON."""
    index = VersionIndex(packages_root)
    click.echo(json.dumps(dict(sorted(index.as_dict().items())), indent=2))


if __name__ == "__main__":
    main()

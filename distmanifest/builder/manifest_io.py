"""Reading the development manifest and writing the distributable one."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from distmanifest.exceptions import ManifestNotFoundError, ManifestParseError

log = structlog.get_logger("distmanifest.io")

MANIFEST_NAME = "package.json"


def read_manifest(input_dir: Path) -> dict[str, Any]:
    """Load ``package.json`` from *input_dir*.

    Raises :class:`ManifestNotFoundError` when the file is missing or
    unreadable and :class:`ManifestParseError` when it is not a JSON object.
    """
    path = Path(input_dir) / MANIFEST_NAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestNotFoundError(str(path)) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestNotFoundError(str(path), str(exc)) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(str(path), str(exc)) from exc
    if not isinstance(data, dict):
        raise ManifestParseError(str(path), "top-level value is not an object")
    return data


def dump_manifest(manifest: dict[str, Any]) -> str:
    """Serialize *manifest* with two-space indentation and a trailing newline."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifest(output_dir: Path, manifest: dict[str, Any]) -> Path:
    """Write *manifest* to ``<output_dir>/package.json`` and return the path."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / MANIFEST_NAME
    path.write_text(dump_manifest(manifest), encoding="utf-8")
    log.info("io.manifest_written", path=str(path), keys=len(manifest))
    return path

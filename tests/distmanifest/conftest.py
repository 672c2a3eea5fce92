"""Shared fixtures for distmanifest tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def write_json():
    def _write(path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def dev_manifest() -> dict:
    return {
        "name": "@acme/app",
        "version": "1.4.0",
        "description": "Demo application",
        "license": "MIT",
        "type": "module",
        "scripts": {"build": "rollup -c"},
        "dependencies": {
            "left-pad": "^1.0.0",
            "@scope/util": "^2.0.0",
            "my-sibling": "workspace:*",
        },
        "peerDependencies": {"react": "^18.0.0"},
        "devDependencies": {
            "rollup": "^4.0.0",
            "lodash": "^4.17.21",
            "left-pad": "^0.9.0",
        },
    }


@pytest.fixture
def workspace(tmp_path, write_json, dev_manifest) -> Path:
    """A packages/ root holding the app being built plus two siblings.

    Returns the app directory.
    """
    root = tmp_path / "packages"
    app = root / "app"
    write_json(app / "package.json", dev_manifest)
    write_json(root / "my-sibling" / "package.json", {"name": "my-sibling", "version": "3.2.1"})
    write_json(root / "other" / "package.json", {"name": "other", "version": "0.0.7"})
    return app

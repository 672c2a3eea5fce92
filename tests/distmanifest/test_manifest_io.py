"""Tests for manifest reading, writing and canonical ordering."""

from __future__ import annotations

import json

import pytest

from distmanifest.builder.manifest_io import dump_manifest, read_manifest, write_manifest
from distmanifest.builder.ordering import CANONICAL_KEYS, sort_manifest
from distmanifest.exceptions import ManifestNotFoundError, ManifestParseError


class TestReadManifest:
    def test_reads_object(self, tmp_path, write_json):
        write_json(tmp_path / "package.json", {"name": "pkg"})
        assert read_manifest(tmp_path) == {"name": "pkg"}

    def test_missing(self, tmp_path):
        with pytest.raises(ManifestNotFoundError) as exc_info:
            read_manifest(tmp_path)
        assert exc_info.value.path.endswith("package.json")

    def test_invalid_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{nope", encoding="utf-8")
        with pytest.raises(ManifestParseError):
            read_manifest(tmp_path)

    def test_top_level_array(self, tmp_path, write_json):
        write_json(tmp_path / "package.json", ["not", "an", "object"])
        with pytest.raises(ManifestParseError, match="not an object"):
            read_manifest(tmp_path)


class TestWriteManifest:
    def test_creates_directory(self, tmp_path):
        target = tmp_path / "dist" / "nested"
        path = write_manifest(target, {"name": "pkg"})
        assert path == target / "package.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {"name": "pkg"}

    def test_format(self):
        text = dump_manifest({"name": "pkg", "dependencies": {"a": "1.0.0"}})
        assert text == '{\n  "name": "pkg",\n  "dependencies": {\n    "a": "1.0.0"\n  }\n}\n'

    def test_non_ascii_kept(self):
        assert "Zoë" in dump_manifest({"author": "Zoë"})


class TestSortManifest:
    def test_canonical_keys_first(self):
        manifest = {
            "dependencies": {},
            "zzz-custom": 1,
            "version": "1.0.0",
            "aaa-custom": 2,
            "name": "pkg",
            "license": "MIT",
        }
        assert list(sort_manifest(manifest)) == [
            "name",
            "version",
            "license",
            "dependencies",
            "aaa-custom",
            "zzz-custom",
        ]

    def test_dependency_maps_sorted(self):
        out = sort_manifest({"dependencies": {"b": "1", "a": "2"}, "scripts": {"z": "", "a": ""}})
        assert list(out["dependencies"]) == ["a", "b"]
        # scripts keep author order
        assert list(out["scripts"]) == ["z", "a"]

    def test_input_not_mutated(self):
        manifest = {"version": "1", "name": "pkg"}
        sort_manifest(manifest)
        assert list(manifest) == ["version", "name"]

    def test_canonical_keys_unique(self):
        assert len(CANONICAL_KEYS) == len(set(CANONICAL_KEYS))

"""Tests for the sibling version lookup."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from distmanifest.builder import workspace
from distmanifest.builder.workspace import (
    VersionIndex,
    is_workspace_version,
    scan_package_versions,
)


# ── placeholder grammar ──────────────────────────────────────────────────


class TestIsWorkspaceVersion:
    @pytest.mark.parametrize(
        "version",
        ["*", "workspace:*", "workspace:^", "workspace:^1.2.0", "portal:../lib"],
    )
    def test_placeholders(self, version):
        assert is_workspace_version(version)

    @pytest.mark.parametrize(
        "version",
        ["^1.0.0", "1.0.0", "workspace:", "portal:", "**", "latest", "file:../x", ""],
    )
    def test_not_placeholders(self, version):
        assert not is_workspace_version(version)

    def test_non_string(self):
        assert not is_workspace_version(None)
        assert not is_workspace_version({"version": "*"})


# ── scan_package_versions ────────────────────────────────────────────────


class TestScanPackageVersions:
    def test_indexes_nested_manifests(self, tmp_path, write_json):
        write_json(tmp_path / "a" / "package.json", {"name": "a", "version": "1.0.0"})
        write_json(tmp_path / "group" / "b" / "package.json", {"name": "b", "version": "2.0.0"})
        assert scan_package_versions(tmp_path) == {"a": "1.0.0", "b": "2.0.0"}

    def test_skips_node_modules(self, tmp_path, write_json):
        write_json(tmp_path / "a" / "package.json", {"name": "a", "version": "1.0.0"})
        write_json(
            tmp_path / "a" / "node_modules" / "dep" / "package.json",
            {"name": "dep", "version": "9.9.9"},
        )
        assert scan_package_versions(tmp_path) == {"a": "1.0.0"}

    def test_skips_hidden_directories(self, tmp_path, write_json):
        write_json(tmp_path / "sib" / "package.json", {"name": "sib", "version": "2.0.0"})
        write_json(
            tmp_path / ".cache" / "sib" / "package.json",
            {"name": "sib", "version": "0.0.1-stale"},
        )
        write_json(tmp_path / ".git" / "x" / "package.json", {"name": "x", "version": "1.0.0"})
        assert scan_package_versions(tmp_path) == {"sib": "2.0.0"}

    def test_malformed_manifest_skipped(self, tmp_path, write_json):
        (tmp_path / "broken").mkdir()
        (tmp_path / "broken" / "package.json").write_text("{not json")
        write_json(tmp_path / "ok" / "package.json", {"name": "ok", "version": "1.0.0"})
        assert scan_package_versions(tmp_path) == {"ok": "1.0.0"}

    def test_non_object_and_incomplete_skipped(self, tmp_path, write_json):
        write_json(tmp_path / "list" / "package.json", ["a"])
        write_json(tmp_path / "noversion" / "package.json", {"name": "x"})
        write_json(tmp_path / "badname" / "package.json", {"name": 3, "version": "1.0.0"})
        assert scan_package_versions(tmp_path) == {}

    def test_first_in_sorted_order_wins(self, tmp_path, write_json):
        write_json(tmp_path / "a" / "package.json", {"name": "dup", "version": "1.0.0"})
        write_json(tmp_path / "b" / "package.json", {"name": "dup", "version": "2.0.0"})
        assert scan_package_versions(tmp_path) == {"dup": "1.0.0"}

    def test_missing_root(self, tmp_path):
        assert scan_package_versions(tmp_path / "nope") == {}


# ── VersionIndex ─────────────────────────────────────────────────────────


class TestVersionIndex:
    def test_lazy_build(self, tmp_path, write_json):
        write_json(tmp_path / "a" / "package.json", {"name": "a", "version": "1.0.0"})
        index = VersionIndex(tmp_path)
        assert not index.built
        assert index.get("a") == "1.0.0"
        assert index.built

    def test_scans_once(self, tmp_path):
        index = VersionIndex(tmp_path)
        with patch.object(
            workspace, "scan_package_versions", return_value={"a": "1.0.0"}
        ) as scan:
            index.get("a")
            index.get("b")
            index.as_dict()
        assert scan.call_count == 1

    def test_substitute(self, tmp_path, write_json):
        write_json(tmp_path / "s" / "package.json", {"name": "s", "version": "3.2.1"})
        deps = {"s": "workspace:*", "missing": "workspace:^", "x": "^1.0.0"}
        substituted, unresolved = VersionIndex(tmp_path).substitute(deps)
        assert deps == {"s": "3.2.1", "missing": "workspace:^", "x": "^1.0.0"}
        assert substituted == {"s": "3.2.1"}
        assert unresolved == ["missing"]

    def test_substitute_without_placeholders_skips_scan(self, tmp_path):
        index = VersionIndex(tmp_path)
        index.substitute({"x": "^1.0.0"})
        assert not index.built

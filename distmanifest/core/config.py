"""Config file schema — JSON options for the ``dist-manifest`` CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from distmanifest.builder.models import (
    DEFAULT_INHERIT_PROPS,
    DEFAULT_LOCAL_SUFFIXES,
    BuildOptions,
    CategoryMapping,
    StaticContent,
)
from distmanifest.exceptions import ConfigurationError


class CategoryMappingSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    output: str


class DistManifestConfig(BaseModel):
    """Options read from a JSON config file.

    Keys are camelCase in the file (``keepWorkspaceDependencies``); snake_case
    is accepted too. Relative paths are taken relative to the config file.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    content: dict[str, Any] = {}
    inherit_props: list[str] | None = None
    input_dir: Path | None = None
    packages_root: Path | None = None
    output_dir: Path | None = None
    keep_workspace_dependencies: bool = False
    category_strategy: str | list[CategoryMappingSchema] = "fold-dev"
    match_depth: Literal["all", "package"] = "all"
    local_suffixes: list[str] | None = None

    @field_validator("local_suffixes")
    @classmethod
    def _require_dot(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        for suffix in v:
            if not suffix.startswith("."):
                raise ValueError(f"suffix {suffix!r} must start with '.'")
        return v

    def to_options(self, base_dir: Path | None = None, **overrides: Any) -> BuildOptions:
        """Build :class:`BuildOptions`; non-None *overrides* win over file values."""

        def _path(value: Path | None) -> Path | None:
            if value is None or base_dir is None or value.is_absolute():
                return value
            return base_dir / value

        if isinstance(self.category_strategy, str):
            strategy: str | tuple[CategoryMapping, ...] = self.category_strategy
        else:
            strategy = tuple(
                CategoryMapping(source=m.source, output=m.output)
                for m in self.category_strategy
            )

        values: dict[str, Any] = {
            "content": StaticContent(self.content),
            "inherit_props": tuple(self.inherit_props)
            if self.inherit_props is not None
            else DEFAULT_INHERIT_PROPS,
            "input_dir": _path(self.input_dir) or Path.cwd(),
            "packages_root": _path(self.packages_root),
            "output_dir": _path(self.output_dir),
            "keep_workspace_dependencies": self.keep_workspace_dependencies,
            "category_strategy": strategy,
            "match_depth": self.match_depth,
            "local_suffixes": tuple(self.local_suffixes)
            if self.local_suffixes is not None
            else DEFAULT_LOCAL_SUFFIXES,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return BuildOptions(**values)


def load_config(path: Path) -> DistManifestConfig:
    """Read and validate a JSON config file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"config file not found: {path}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc

    try:
        return DistManifestConfig.model_validate(raw)
    except ValidationError as exc:
        messages = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"]) or "<root>"
            messages.append(f"{loc}: {err['msg']}")
        raise ConfigurationError(
            f"invalid config file {path}: " + "; ".join(messages)
        ) from None

"""Category strategy registry — which declared category feeds which output field."""

from __future__ import annotations

from typing import Iterable, Mapping

from distmanifest.builder.models import CategoryMapping
from distmanifest.exceptions import ConfigurationError, UnknownStrategyError

RUNTIME = "dependencies"
PEER = "peerDependencies"
OPTIONAL = "optionalDependencies"
DEVELOPMENT = "devDependencies"

# Priority order: the first category declaring a package claims it
CATEGORY_PRIORITY: tuple[str, ...] = (RUNTIME, PEER, OPTIONAL, DEVELOPMENT)

STRATEGY_REGISTRY: dict[str, tuple[CategoryMapping, ...]] = {}


def register_strategy(name: str, mappings: Iterable[CategoryMapping]) -> None:
    """Register a named strategy, replacing any previous one of that name."""
    STRATEGY_REGISTRY[name] = tuple(mappings)


def get_strategy(
    strategy: str | Iterable[CategoryMapping | Mapping[str, str]],
) -> tuple[CategoryMapping, ...]:
    """Return the mappings for a strategy name or an explicit mapping list.

    Explicit entries may be :class:`CategoryMapping` or ``{"source", "output"}``
    dicts. A source category listed twice is rejected.
    """
    if isinstance(strategy, str):
        try:
            return STRATEGY_REGISTRY[strategy]
        except KeyError:
            raise UnknownStrategyError(strategy, sorted(STRATEGY_REGISTRY)) from None

    mappings: list[CategoryMapping] = []
    seen: set[str] = set()
    for entry in strategy:
        if isinstance(entry, Mapping):
            try:
                entry = CategoryMapping(source=entry["source"], output=entry["output"])
            except KeyError as exc:
                raise ConfigurationError(
                    f"category mapping is missing the {exc.args[0]!r} key"
                ) from None
        if entry.source in seen:
            raise ConfigurationError(f"category '{entry.source}' is mapped more than once")
        seen.add(entry.source)
        mappings.append(entry)
    if not mappings:
        raise ConfigurationError("category strategy must map at least one category")
    return tuple(mappings)


register_strategy(
    "fold-dev",
    [
        CategoryMapping(RUNTIME, RUNTIME),
        CategoryMapping(PEER, PEER),
        CategoryMapping(OPTIONAL, OPTIONAL),
        CategoryMapping(DEVELOPMENT, RUNTIME),
    ],
)
register_strategy(
    "separate",
    [CategoryMapping(category, category) for category in CATEGORY_PRIORITY],
)
register_strategy(
    "runtime-only",
    [
        CategoryMapping(RUNTIME, RUNTIME),
        CategoryMapping(PEER, PEER),
        CategoryMapping(OPTIONAL, OPTIONAL),
    ],
)
register_strategy(
    "collapse",
    [CategoryMapping(category, RUNTIME) for category in CATEGORY_PRIORITY],
)

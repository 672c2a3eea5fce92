"""Custom exceptions for distmanifest."""


class DistManifestError(Exception):
    """Base exception for all distmanifest errors."""


class ConfigurationError(DistManifestError):
    """Raised when options or inputs make a build impossible."""


class ManifestNotFoundError(ConfigurationError):
    """Raised when the development manifest is missing or unreadable."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Development manifest not found at '{path}'{detail}")


class ManifestParseError(ConfigurationError):
    """Raised when the development manifest is not a JSON object."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Development manifest '{path}' is invalid: {reason}")


class UnknownStrategyError(ConfigurationError):
    """Raised when a category strategy name is not registered."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown category strategy '{name}'. Available: {', '.join(available)}"
        )

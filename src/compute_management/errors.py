"""Error types raised while resolving configuration and constructing clients."""

from __future__ import annotations


class ComputeManagementError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationMissingError(ComputeManagementError, LookupError):
    """No usable configuration could be resolved."""


class InvalidConfigurationError(ComputeManagementError, ValueError):
    """A configuration failed validation.

    ``errors`` holds one entry per problem found, so callers can report all of
    them at once instead of fixing one field per attempt.
    """

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        detail = "; ".join(self.errors)
        super().__init__(f"Invalid compute configuration: {detail}")

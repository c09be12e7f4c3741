"""Exceptions raised by the resolution engine."""


class ResolutionError(Exception):
    """Base class for unrecoverable resolution errors."""


class UnsupportedVersionError(ResolutionError, ValueError):
    """A version string contains a token that is not a plain integer."""

    def __init__(self, version: str, token: str):
        super().__init__(
            f"Unsupported version '{version}': component '{token}' is not numeric"
        )
        self.version = version
        self.token = token


class LockGroupConfigError(ResolutionError):
    """A version lock group definition is incomplete or not a valid regex."""


class RepositoryError(ResolutionError):
    """A repository location cannot be used."""

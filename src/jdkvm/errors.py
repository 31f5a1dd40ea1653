from __future__ import annotations


class JdkvmError(Exception):
    """Base exception with user-facing remediation text."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def format(self) -> str:
        if self.hint:
            return f"{self.message} {self.hint}"
        return self.message


class ValidationError(JdkvmError):
    """Bad input detected before any network I/O."""


class UnsupportedPlatformError(ValidationError):
    pass


class UnsupportedArchitectureError(ValidationError):
    pass


class UnsupportedPackageTypeError(ValidationError):
    pass


class EarlyAccessNotSupportedError(ValidationError):
    pass


class InvalidVersionError(ValidationError):
    pass


class VersionFloorError(ValidationError):
    pass


class TransportError(JdkvmError):
    """Infrastructure failure talking to a remote host."""


class BaselineLookupError(TransportError):
    pass


class DistributionLookupError(TransportError):
    def __init__(self, message: str, hint: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message, hint)
        self.status_code = status_code


class DownloadError(TransportError):
    pass


class ReleaseNotFoundError(JdkvmError):
    pass


class VersionNotConfiguredError(JdkvmError):
    pass


class VersionNotInstalledError(JdkvmError):
    pass

from __future__ import annotations

import platform
import sys

from jdkvm.errors import UnsupportedArchitectureError, UnsupportedPlatformError

SUPPORTED_PLATFORMS = ("linux", "macos", "windows")
SUPPORTED_ARCHES = ("x64", "aarch64")

_PLATFORM_TOKENS: dict[str, str] = {
    "linux": "linux",
    "darwin": "macos",
    "win32": "windows",
    "windows": "windows",
}

_ARCH_TOKENS: dict[str, str] = {
    "x64": "x64",
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def normalize_platform(host: str | None = None) -> str:
    """Map a host OS identifier to Oracle's download naming."""
    raw = sys.platform if host is None else host
    token = _PLATFORM_TOKENS.get(raw.strip().lower())
    if token is None:
        supported = ", ".join(f"'{name}'" for name in SUPPORTED_PLATFORMS)
        raise UnsupportedPlatformError(
            f"Platform '{raw}' is not supported.", f"Supported platforms: {supported}."
        )
    return token


def normalize_arch(requested: str | None = None) -> str:
    """Map a requested (or host) CPU architecture to Oracle's download naming."""
    raw = platform.machine() if requested is None else requested
    token = _ARCH_TOKENS.get(raw.strip().lower())
    if token is None:
        raise UnsupportedArchitectureError(
            f"Unsupported architecture: {raw}.", "Use x64 or aarch64."
        )
    return token


def archive_extension(platform_token: str) -> str:
    return "zip" if platform_token == "windows" else "tar.gz"

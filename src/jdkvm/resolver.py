from __future__ import annotations

from pathlib import Path

from jdkvm import config
from jdkvm.errors import VersionNotConfiguredError


def find_pin_file(start: Path) -> Path | None:
    current = start.resolve()
    for directory in [current, *current.parents]:
        pin = directory / config.PIN_FILENAME
        if pin.exists():
            return pin
    return None


def read_pin(pin_file: Path) -> str:
    for line in pin_file.read_text(encoding="utf-8").splitlines():
        value = line.strip()
        if value and not value.startswith("#"):
            return value
    return ""


def resolve_version(start: Path) -> tuple[str, str]:
    pin_file = find_pin_file(start)
    if pin_file:
        pinned = read_pin(pin_file)
        if pinned:
            return pinned, f"pinned via {pin_file}"

    global_default = config.get_global_default()
    if global_default:
        return global_default, "global default"

    raise VersionNotConfiguredError(
        "No version configured.",
        f"Run: jdkvm use <version> or create {config.PIN_FILENAME}.",
    )

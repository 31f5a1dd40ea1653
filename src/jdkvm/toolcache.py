"""Versioned tool cache laid out as ``<root>/<tool>/<version>/<arch>``.

An entry only counts as installed once its ``<arch>.complete`` marker exists,
so an interrupted install never shows up as usable.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from jdkvm import config

JAVA_TOOL_NAME = "Java_Oracle_jdk"
MACOS_JAVA_CONTENT_POSTFIX = Path("Contents") / "Home"


def toolcache_version_name(version: str) -> str:
    # "+" in JAVA_HOME breaks some JVM tooling
    return version.replace("+", "-")


def _version_key(version: str) -> tuple[int, ...]:
    parts: list[int] = []
    for piece in version.replace("-", ".").split("."):
        parts.append(int(piece) if piece.isdigit() else 0)
    return tuple(parts)


def sort_versions(versions: list[str]) -> list[str]:
    return sorted(versions, key=_version_key)


def entry_dir(tool: str, version: str, arch: str) -> Path:
    return config.toolcache_dir() / tool / version / arch


def _marker(tool: str, version: str, arch: str) -> Path:
    return config.toolcache_dir() / tool / version / f"{arch}.complete"


def cache_dir(source: Path, tool: str, version: str, arch: str) -> Path:
    target = entry_dir(tool, version, arch)
    marker = _marker(tool, version, arch)
    if marker.exists():
        marker.unlink()
    if target.exists():
        shutil.rmtree(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(target))
    marker.write_text("", encoding="utf-8")
    return target


def find(tool: str, version: str, arch: str) -> Path | None:
    target = entry_dir(tool, version, arch)
    if _marker(tool, version, arch).exists() and target.is_dir():
        return target
    return None


def versions(tool: str, arch: str) -> list[str]:
    root = config.toolcache_dir() / tool
    if not root.exists():
        return []
    found = [entry.name for entry in root.iterdir() if entry.is_dir() and find(tool, entry.name, arch)]
    return sort_versions(found)


def remove(tool: str, version: str, arch: str) -> None:
    marker = _marker(tool, version, arch)
    if marker.exists():
        marker.unlink()
    target = entry_dir(tool, version, arch)
    if target.exists():
        shutil.rmtree(target)
    version_dir = target.parent
    if version_dir.exists() and not os.listdir(version_dir):
        version_dir.rmdir()


def java_home(path: Path, platform_token: str) -> Path:
    if platform_token == "macos":
        candidate = path / MACOS_JAVA_CONTENT_POSTFIX
        if candidate.is_dir():
            return candidate
    return path

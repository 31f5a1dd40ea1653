from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from jdkvm import config, download, oracle, platform, toolcache
from jdkvm.errors import DownloadError, JdkvmError, ReleaseNotFoundError, VersionNotInstalledError
from jdkvm.http import new_client

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]
DownloadProgressCallback = Callable[[int | None, int], None]


@dataclass(frozen=True)
class InstallResult:
    version: str
    path: Path
    resolved_version: str
    java_home: Path


def resolve(
    version_spec: str,
    arch: str | None = None,
    package_type: str = oracle.PACKAGE_TYPE,
    stable: bool = True,
) -> oracle.ResolvedRelease:
    """Resolve a verified download URL without installing anything."""
    arch_token = oracle.validate_request(arch, package_type, stable)
    with new_client(config.http_timeout()) as client:
        return oracle.find_package_for_download(
            version_spec, client, arch=arch_token, package_type=package_type, stable=stable
        )


def installed_versions(arch: str | None = None) -> list[str]:
    return toolcache.versions(toolcache.JAVA_TOOL_NAME, platform.normalize_arch(arch))


def find_installed(version_spec: str, arch: str | None = None) -> tuple[str, Path] | None:
    """Find a cached version satisfying ``version_spec``.

    A bare major matches the highest cached version of that release train,
    a full version only matches itself.
    """
    arch_token = platform.normalize_arch(arch)
    major, only_major = oracle.split_major(version_spec)
    wanted = toolcache.toolcache_version_name(version_spec.strip())
    candidates = toolcache.versions(toolcache.JAVA_TOOL_NAME, arch_token)
    if only_major:
        candidates = [v for v in candidates if oracle.split_major(v)[0] == major]
    else:
        candidates = [v for v in candidates if v == wanted]
    if not candidates:
        return None
    version = candidates[-1]
    path = toolcache.find(toolcache.JAVA_TOOL_NAME, version, arch_token)
    if path is None:
        return None
    return version, path


def java_home_for(version_spec: str, arch: str | None = None) -> Path:
    found = find_installed(version_spec, arch=arch)
    if found is None:
        raise VersionNotInstalledError("Version not installed.", f"Run: jdkvm install {version_spec}")
    return toolcache.java_home(found[1], platform.normalize_platform())


def _archive_root(extracted: Path) -> Path:
    directories = sorted(entry for entry in extracted.iterdir() if entry.is_dir())
    if not directories:
        raise DownloadError("Unexpected archive layout.", "No JDK directory found in the archive.")
    return directories[0]


def _verify_checksum(archive: Path, expected: str | None) -> None:
    if expected is None:
        return
    actual = download.sha256_file(archive)
    if actual != expected:
        raise JdkvmError("Checksum verification failed.", f"Downloaded file hash mismatch for {archive.name}.")


def install(
    version_spec: str,
    arch: str | None = None,
    package_type: str = oracle.PACKAGE_TYPE,
    stable: bool = True,
    check_latest: bool = False,
    on_status: StatusCallback | None = None,
    on_download: DownloadProgressCallback | None = None,
) -> InstallResult:
    def status(stage: str) -> None:
        if on_status is not None:
            on_status(stage)

    arch_token = oracle.validate_request(arch, package_type, stable)
    platform_token = platform.normalize_platform()
    config.ensure_layout()

    if not check_latest:
        cached = find_installed(version_spec, arch=arch_token)
        if cached is not None:
            cached_version, cached_path = cached
            logger.debug("using cached Oracle JDK %s at %s", cached_version, cached_path)
            status("already_installed")
            return InstallResult(
                version=version_spec,
                path=cached_path,
                resolved_version=cached_version,
                java_home=toolcache.java_home(cached_path, platform_token),
            )

    status("resolving")
    with new_client(config.http_timeout()) as client:
        release = oracle.find_package_for_download(
            version_spec,
            client,
            arch=arch_token,
            package_type=package_type,
            stable=stable,
            platform_token=platform_token,
        )
        if not release:
            raise ReleaseNotFoundError(
                f"No matching Oracle JDK release found for {version_spec} ({platform_token}-{arch_token}).",
                "Check the version, or run: jdkvm resolve <version>",
            )

        cache_version = toolcache.toolcache_version_name(release.version)
        existing = toolcache.find(toolcache.JAVA_TOOL_NAME, cache_version, arch_token)
        if existing is not None:
            status("already_installed")
            return InstallResult(
                version=version_spec,
                path=existing,
                resolved_version=release.version,
                java_home=toolcache.java_home(existing, platform_token),
            )

        logger.info("Downloading Java %s (Oracle) from %s ...", release.version, release.url)
        with tempfile.TemporaryDirectory(dir=str(config.downloads_dir())) as work:
            work_dir = Path(work)
            status("downloading")
            archive = download.download_archive(
                release.url, work_dir, timeout=config.DOWNLOAD_TIMEOUT, on_progress=on_download
            )
            status("verifying_checksum")
            _verify_checksum(archive, download.fetch_checksum(client, release.url))

            status("extracting")
            extension = platform.archive_extension(platform_token)
            if platform_token == "windows":
                archive = download.rename_win_archive(archive)
            extracted = download.extract_archive(archive, extension, work_dir / "extracted")

            status("caching")
            cached_path = toolcache.cache_dir(
                _archive_root(extracted), toolcache.JAVA_TOOL_NAME, cache_version, arch_token
            )

    status("done")
    return InstallResult(
        version=version_spec,
        path=cached_path,
        resolved_version=release.version,
        java_home=toolcache.java_home(cached_path, platform_token),
    )


def uninstall(version: str, arch: str | None = None) -> None:
    arch_token = platform.normalize_arch(arch)
    cache_version = toolcache.toolcache_version_name(version)
    if toolcache.find(toolcache.JAVA_TOOL_NAME, cache_version, arch_token) is None:
        raise VersionNotInstalledError("Version not installed.", f"Run: jdkvm install {version}")
    toolcache.remove(toolcache.JAVA_TOOL_NAME, cache_version, arch_token)

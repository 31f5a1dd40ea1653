"""Resolve Oracle JDK download URLs.

Oracle has no release API, so archive URLs are composed from the naming
convention used on download.oracle.com and confirmed with a HEAD request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import httpx

from jdkvm import baseline, config, platform
from jdkvm.errors import (
    DistributionLookupError,
    EarlyAccessNotSupportedError,
    InvalidVersionError,
    UnsupportedPackageTypeError,
    VersionFloorError,
)
from jdkvm.http import friendly_transport_error

logger = logging.getLogger(__name__)

MINIMUM_MAJOR = 17
PACKAGE_TYPE = "jdk"


@dataclass(frozen=True)
class ResolvedRelease:
    version: str
    url: str

    @classmethod
    def empty(cls) -> "ResolvedRelease":
        return cls(version="", url="")

    def __bool__(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class Found:
    url: str
    version: str


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class TransportFailure:
    status_code: int
    url: str


ProbeOutcome = Union[Found, NotFound, TransportFailure]


def split_major(version_range: str) -> tuple[str, bool]:
    """Return the major component and whether only the major was given."""
    spec = version_range.strip()
    if "." in spec:
        return spec.split(".", 1)[0], False
    return spec, True


def validate_major(major: str) -> int:
    if not major.isdigit() or int(major) < 1:
        raise InvalidVersionError(
            f"Invalid Java version: {major}.", "Use a major version like 21 or a full version like 21.0.3."
        )
    value = int(major)
    if value < MINIMUM_MAJOR:
        raise VersionFloorError(
            f"Oracle JDK is only supported for JDK {MINIMUM_MAJOR} and later (requested {value}).",
            "Pick a newer release or another distribution.",
        )
    return value


def candidate_urls(
    major: str,
    full_version: str,
    platform_token: str,
    arch: str,
    extension: str,
    base_url: str | None = None,
) -> list[str]:
    base = (base_url or config.oracle_base_url()).rstrip("/")
    return [f"{base}/{major}/archive/jdk-{full_version}_{platform_token}-{arch}_bin.{extension}"]


def probe_candidates(client: httpx.Client, urls: Sequence[str], version: str) -> ProbeOutcome:
    for url in urls:
        try:
            response = client.head(url)
        except httpx.HTTPError as exc:
            raise friendly_transport_error(exc, "the Oracle download server", DistributionLookupError) from exc
        logger.debug("HEAD %s -> %s", url, response.status_code)
        if response.status_code == httpx.codes.OK:
            return Found(url=url, version=version)
        if response.status_code != httpx.codes.NOT_FOUND:
            return TransportFailure(status_code=response.status_code, url=url)
    return NotFound()


def validate_request(arch: str | None, package_type: str, stable: bool) -> str:
    """Check the request shape and return the normalized architecture."""
    arch_token = platform.normalize_arch(arch)
    if not stable:
        raise EarlyAccessNotSupportedError("Early access versions are not supported.")
    if package_type != PACKAGE_TYPE:
        raise UnsupportedPackageTypeError(
            f"Oracle JDK provides only the `{PACKAGE_TYPE}` package type.", f"Requested: {package_type}."
        )
    return arch_token


def find_package_for_download(
    version_range: str,
    client: httpx.Client,
    *,
    arch: str | None = None,
    package_type: str = PACKAGE_TYPE,
    stable: bool = True,
    platform_token: str | None = None,
    extension: str | None = None,
    baseline_url: str | None = None,
    base_url: str | None = None,
) -> ResolvedRelease:
    """Find a verified Oracle JDK archive URL for ``version_range``.

    Validation problems and unexpected server responses raise. A build that
    simply does not exist is logged as a warning and reported with
    ``ResolvedRelease.empty()`` so callers iterating over many versions can
    skip it.
    """
    arch_token = validate_request(arch, package_type, stable)

    platform_name = platform_token or platform.normalize_platform()
    ext = extension or platform.archive_extension(platform_name)

    major, only_major = split_major(version_range)
    validate_major(major)

    full_version = version_range.strip()
    if only_major:
        full_version = baseline.resolve_latest(major, url=baseline_url)
        if not full_version:
            logger.warning("Could not find Oracle JDK for SemVer %s", version_range)
            return ResolvedRelease.empty()
    logger.debug("range:%s major:%s fullVer:%s", version_range, major, full_version)

    urls = candidate_urls(major, full_version, platform_name, arch_token, ext, base_url=base_url)
    outcome = probe_candidates(client, urls, full_version)

    if isinstance(outcome, Found):
        return ResolvedRelease(version=outcome.version, url=outcome.url)
    if isinstance(outcome, TransportFailure):
        raise DistributionLookupError(
            f"Http request for Oracle JDK failed with status code: {outcome.status_code}.",
            f"URL: {outcome.url}",
            status_code=outcome.status_code,
        )
    logger.warning("Could not find Oracle JDK for SemVer %s", full_version)
    return ResolvedRelease.empty()

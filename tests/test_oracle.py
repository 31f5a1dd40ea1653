from __future__ import annotations

import logging
from unittest import mock

import httpx
import pytest

from jdkvm import oracle
from jdkvm.errors import (
    DistributionLookupError,
    EarlyAccessNotSupportedError,
    InvalidVersionError,
    UnsupportedArchitectureError,
    UnsupportedPackageTypeError,
    VersionFloorError,
)

BASE = "https://download.oracle.com/java"


def _client(statuses: list[int], seen: list[str]) -> httpx.Client:
    queue = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url}")
        return httpx.Response(queue.pop(0))

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def _default_base(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JDKVM_ORACLE_BASE_URL", raising=False)


def test_split_major() -> None:
    assert oracle.split_major("21") == ("21", True)
    assert oracle.split_major("21.0.3") == ("21", False)
    assert oracle.split_major(" 17.0.9 ") == ("17", False)


def test_candidate_urls_shape() -> None:
    urls = oracle.candidate_urls("21", "21.0.3", "linux", "x64", "tar.gz")
    assert urls == [f"{BASE}/21/archive/jdk-21.0.3_linux-x64_bin.tar.gz"]


def test_candidate_urls_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JDKVM_ORACLE_BASE_URL", "https://mirror.test/java/")
    urls = oracle.candidate_urls("17", "17.0.9", "windows", "x64", "zip")
    assert urls == ["https://mirror.test/java/17/archive/jdk-17.0.9_windows-x64_bin.zip"]


def test_probe_returns_second_candidate_and_stops() -> None:
    seen: list[str] = []
    urls = ["https://a.test/one", "https://a.test/two", "https://a.test/three"]
    with _client([404, 200, 200], seen) as client:
        outcome = oracle.probe_candidates(client, urls, "21.0.3")

    assert outcome == oracle.Found(url="https://a.test/two", version="21.0.3")
    assert seen == ["HEAD https://a.test/one", "HEAD https://a.test/two"]


def test_probe_all_missing_is_not_found() -> None:
    seen: list[str] = []
    with _client([404, 404], seen) as client:
        outcome = oracle.probe_candidates(client, ["https://a.test/one", "https://a.test/two"], "21.0.3")
    assert outcome == oracle.NotFound()
    assert len(seen) == 2


def test_probe_unexpected_status_stops_immediately() -> None:
    seen: list[str] = []
    with _client([500, 200], seen) as client:
        outcome = oracle.probe_candidates(client, ["https://a.test/one", "https://a.test/two"], "21.0.3")
    assert outcome == oracle.TransportFailure(status_code=500, url="https://a.test/one")
    assert len(seen) == 1


def test_find_package_full_version_found() -> None:
    seen: list[str] = []
    with _client([200], seen) as client, mock.patch("jdkvm.oracle.baseline.resolve_latest") as latest_mock:
        release = oracle.find_package_for_download("17.0.9", client, arch="x64", platform_token="linux")

    latest_mock.assert_not_called()
    assert release == oracle.ResolvedRelease(
        version="17.0.9", url=f"{BASE}/17/archive/jdk-17.0.9_linux-x64_bin.tar.gz"
    )
    assert release


def test_find_package_bare_major_uses_baseline_version() -> None:
    seen: list[str] = []
    with _client([200], seen) as client, mock.patch(
        "jdkvm.oracle.baseline.resolve_latest", return_value="21.0.3"
    ) as latest_mock:
        release = oracle.find_package_for_download("21", client, arch="aarch64", platform_token="macos")

    latest_mock.assert_called_once_with("21", url=None)
    assert release.version == "21.0.3"
    assert "jdk-21.0.3_" in release.url
    assert seen == [f"HEAD {BASE}/21/archive/jdk-21.0.3_macos-aarch64_bin.tar.gz"]


def test_find_package_bare_major_probes_resolved_not_raw() -> None:
    seen: list[str] = []
    with _client([200], seen) as client, mock.patch(
        "jdkvm.oracle.baseline.resolve_latest", return_value="21"
    ):
        release = oracle.find_package_for_download("21", client, arch="x64", platform_token="linux")
    assert release.version == "21"
    assert seen == [f"HEAD {BASE}/21/archive/jdk-21_linux-x64_bin.tar.gz"]


def test_find_package_baseline_miss_skips_probe(caplog: pytest.LogCaptureFixture) -> None:
    seen: list[str] = []
    with _client([200], seen) as client, mock.patch("jdkvm.oracle.baseline.resolve_latest", return_value=""):
        with caplog.at_level(logging.WARNING, logger="jdkvm.oracle"):
            release = oracle.find_package_for_download("23", client, arch="x64", platform_token="linux")

    assert release == oracle.ResolvedRelease(version="", url="")
    assert not release
    assert seen == []
    assert "Could not find Oracle JDK" in caplog.text


def test_find_package_all_404_returns_empty_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    seen: list[str] = []
    with _client([404], seen) as client:
        with caplog.at_level(logging.WARNING, logger="jdkvm.oracle"):
            release = oracle.find_package_for_download("21.0.99", client, arch="x64", platform_token="linux")

    assert release == oracle.ResolvedRelease.empty()
    assert "Could not find Oracle JDK for SemVer 21.0.99" in caplog.text


def test_find_package_500_is_fatal() -> None:
    seen: list[str] = []
    with _client([500], seen) as client:
        with pytest.raises(DistributionLookupError) as excinfo:
            oracle.find_package_for_download("21.0.3", client, arch="x64", platform_token="linux")

    assert excinfo.value.status_code == 500
    assert "500" in excinfo.value.message
    assert len(seen) == 1


def test_find_package_connect_error_is_fatal() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connect failure", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(DistributionLookupError, match="Oracle download server"):
            oracle.find_package_for_download("21.0.3", client, arch="x64", platform_token="linux")


@pytest.mark.parametrize("arch", ["x86", "armv7l", "ppc64le", "s390x"])
def test_unsupported_arch_fails_before_network(arch: str) -> None:
    seen: list[str] = []
    with _client([200], seen) as client, mock.patch("jdkvm.oracle.baseline.resolve_latest") as latest_mock:
        with pytest.raises(UnsupportedArchitectureError, match=arch):
            oracle.find_package_for_download("21", client, arch=arch, platform_token="linux")

    assert seen == []
    latest_mock.assert_not_called()


def test_early_access_rejected_before_network() -> None:
    seen: list[str] = []
    with _client([200], seen) as client:
        with pytest.raises(EarlyAccessNotSupportedError):
            oracle.find_package_for_download("21", client, arch="x64", stable=False, platform_token="linux")
    assert seen == []


def test_package_type_rejected_before_network() -> None:
    seen: list[str] = []
    with _client([200], seen) as client:
        with pytest.raises(UnsupportedPackageTypeError, match="only the `jdk` package type"):
            oracle.find_package_for_download("21", client, arch="x64", package_type="jre", platform_token="linux")
    assert seen == []


@pytest.mark.parametrize("version", ["8", "11", "16", "11.0.23", "16.0.2"])
def test_major_below_floor_rejected(version: str) -> None:
    seen: list[str] = []
    with _client([200], seen) as client, mock.patch("jdkvm.oracle.baseline.resolve_latest") as latest_mock:
        with pytest.raises(VersionFloorError, match="JDK 17 and later"):
            oracle.find_package_for_download(version, client, arch="x64", platform_token="linux")

    assert seen == []
    latest_mock.assert_not_called()


@pytest.mark.parametrize("version", ["latest", "jdk-21", "0", ".0.1"])
def test_invalid_major_rejected(version: str) -> None:
    seen: list[str] = []
    with _client([200], seen) as client:
        with pytest.raises(InvalidVersionError):
            oracle.find_package_for_download(version, client, arch="x64", platform_token="linux")
    assert seen == []


def test_default_extension_follows_platform() -> None:
    seen: list[str] = []
    with _client([200], seen) as client:
        release = oracle.find_package_for_download("21.0.3", client, arch="x64", platform_token="windows")
    assert release.url.endswith("jdk-21.0.3_windows-x64_bin.zip")

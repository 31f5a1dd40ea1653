from __future__ import annotations

import httpx

from jdkvm import __version__
from jdkvm.errors import TransportError

USER_AGENT = f"jdkvm/{__version__}"


def new_client(timeout: float) -> httpx.Client:
    return httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def friendly_transport_error(
    exc: httpx.HTTPError,
    what: str,
    error_cls: type[TransportError] = TransportError,
) -> TransportError:
    if isinstance(exc, httpx.ProxyError):
        return error_cls(
            f"Failed to query {what}.",
            "Proxy error. Check HTTP_PROXY/HTTPS_PROXY or corporate proxy settings.",
        )
    if isinstance(exc, httpx.ConnectError):
        return error_cls(
            f"Failed to query {what}.",
            "Network connection failed. Check internet connectivity, DNS, firewall, or VPN.",
        )
    if isinstance(exc, httpx.TimeoutException):
        return error_cls(
            f"Timed out querying {what}.",
            "Raise JDKVM_HTTP_TIMEOUT or retry later.",
        )
    if isinstance(exc, httpx.HTTPStatusError):
        return error_cls(
            f"Failed to query {what}.",
            f"Server responded with HTTP {exc.response.status_code}.",
        )
    return error_cls(
        f"Failed to query {what}.",
        "Check network connectivity, proxy settings, or Oracle availability.",
    )

from __future__ import annotations

import hashlib
import logging
import os
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable

import httpx

from jdkvm.errors import DownloadError

logger = logging.getLogger(__name__)


def _archive_filename(url: str) -> str:
    name = httpx.URL(url).path.rsplit("/", 1)[-1]
    return name or "jdk-archive"


def download_archive(
    url: str,
    destination_dir: Path,
    timeout: float = 120.0,
    on_progress: Callable[[int | None, int], None] | None = None,
) -> Path:
    destination_dir.mkdir(parents=True, exist_ok=True)
    destination = destination_dir / _archive_filename(url)

    fd, temp_name = tempfile.mkstemp(dir=str(destination_dir), prefix="jdk.", suffix=".tmp")
    os.close(fd)
    temp_path = Path(temp_name)

    try:
        with httpx.stream("GET", url, timeout=timeout, follow_redirects=True) as response:
            response.raise_for_status()
            total_header = response.headers.get("Content-Length")
            total_bytes = int(total_header) if total_header and total_header.isdigit() else None
            downloaded_bytes = 0
            if on_progress is not None:
                on_progress(total_bytes, downloaded_bytes)
            with temp_path.open("wb") as fh:
                for chunk in response.iter_bytes():
                    if chunk:
                        fh.write(chunk)
                        downloaded_bytes += len(chunk)
                        if on_progress is not None:
                            on_progress(total_bytes, downloaded_bytes)
                fh.flush()
                os.fsync(fh.fileno())

        os.replace(temp_path, destination)
    except httpx.HTTPError as exc:
        raise DownloadError("Download failed.", f"Could not fetch: {url}") from exc
    except OSError as exc:
        raise DownloadError("Download failed.", "Could not place downloaded archive.") from exc
    finally:
        if temp_path.exists():
            temp_path.unlink()
    logger.debug("downloaded %s to %s", url, destination)
    return destination


def rename_win_archive(path: Path) -> Path:
    """Make sure a Windows archive carries the ``.zip`` suffix zipfile tooling expects."""
    if path.suffix.lower() == ".zip":
        return path
    renamed = path.with_name(f"{path.name}.zip")
    os.replace(path, renamed)
    return renamed


def _ensure_within(root: Path, member_name: str) -> None:
    target = (root / member_name).resolve()
    if target != root and root not in target.parents:
        raise DownloadError("Unsafe archive.", f"Member escapes extraction directory: {member_name}")


def extract_archive(archive: Path, extension: str, destination: Path) -> Path:
    destination.mkdir(parents=True, exist_ok=True)
    root = destination.resolve()
    try:
        if extension == "zip":
            with zipfile.ZipFile(archive) as zf:
                for name in zf.namelist():
                    _ensure_within(root, name)
                zf.extractall(destination)
        elif extension == "tar.gz":
            with tarfile.open(archive, mode="r:gz") as tf:
                for member in tf.getmembers():
                    _ensure_within(root, member.name)
                if hasattr(tarfile, "data_filter"):
                    tf.extractall(destination, filter="data")
                else:
                    tf.extractall(destination)
        else:
            raise DownloadError(f"Unsupported archive extension: {extension}.", "Expected zip or tar.gz.")
    except (tarfile.TarError, zipfile.BadZipFile) as exc:
        raise DownloadError("Extraction failed.", f"Archive is corrupt: {archive.name}") from exc
    except OSError as exc:
        raise DownloadError("Extraction failed.", f"Could not extract: {archive.name}") from exc
    return destination


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as f:
        while True:
            chunk = f.read(1024 * 1024)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def fetch_checksum(client: httpx.Client, url: str) -> str | None:
    """Fetch the published ``.sha256`` for an archive, or None when Oracle has none."""
    checksum_url = f"{url}.sha256"
    try:
        response = client.get(checksum_url)
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("no checksum published at %s", checksum_url)
            return None
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise DownloadError("Checksum fetch failed.", f"Could not fetch: {checksum_url}") from exc
    return parse_checksum_text(response.text)


def parse_checksum_text(text: str) -> str:
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        token = line.split()[0]
        if len(token) == 64 and all(ch in "0123456789abcdefABCDEF" for ch in token):
            return token.lower()
    raise DownloadError("Invalid checksum file.", "No SHA256 value found.")

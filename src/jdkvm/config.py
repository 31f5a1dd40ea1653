from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from jdkvm.errors import JdkvmError

DEFAULT_BASE_DIR = Path.home() / ".jdkvm"
DEFAULT_ORACLE_BASE_URL = "https://download.oracle.com/java"
DEFAULT_BASELINE_URL = "https://javadl-esd-secure.oracle.com/update/baseline.version"
DEFAULT_HTTP_TIMEOUT = 30.0
DOWNLOAD_TIMEOUT = 120.0
PIN_FILENAME = ".java-version"


def base_dir() -> Path:
    return Path(os.environ.get("JDKVM_HOME", DEFAULT_BASE_DIR)).expanduser()


def toolcache_dir() -> Path:
    return base_dir() / "toolcache"


def downloads_dir() -> Path:
    return base_dir() / "downloads"


def state_path() -> Path:
    return base_dir() / "state.json"


def ensure_layout() -> None:
    toolcache_dir().mkdir(parents=True, exist_ok=True)
    downloads_dir().mkdir(parents=True, exist_ok=True)


def oracle_base_url() -> str:
    value = os.environ.get("JDKVM_ORACLE_BASE_URL", "").strip()
    return (value or DEFAULT_ORACLE_BASE_URL).rstrip("/")


def baseline_url() -> str:
    value = os.environ.get("JDKVM_BASELINE_URL", "").strip()
    return value or DEFAULT_BASELINE_URL


def http_timeout() -> float:
    raw = os.environ.get("JDKVM_HTTP_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise JdkvmError(
            f"Invalid JDKVM_HTTP_TIMEOUT value: {raw}.", "Use a number of seconds, for example 30."
        ) from exc
    if timeout <= 0:
        raise JdkvmError(
            f"Invalid JDKVM_HTTP_TIMEOUT value: {raw}.", "Timeout must be greater than zero."
        )
    return timeout


def _default_state() -> dict[str, Any]:
    return {"global_default": None}


def load_state() -> dict[str, Any]:
    path = state_path()
    if not path.exists():
        return _default_state()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise JdkvmError("Corrupt state file.", "Delete ~/.jdkvm/state.json and retry.") from exc
    if not isinstance(raw, dict):
        return _default_state()

    state = _default_state()
    value = raw.get("global_default")
    if isinstance(value, str) and value.strip():
        state["global_default"] = value
    return state


def save_state(data: dict[str, Any]) -> None:
    base_dir().mkdir(parents=True, exist_ok=True)
    path = state_path()
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix="state.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def get_global_default() -> str | None:
    value = load_state().get("global_default")
    if isinstance(value, str) and value.strip():
        return value
    return None


def set_global_default(version: str) -> None:
    state = load_state()
    state["global_default"] = version
    save_state(state)

from __future__ import annotations

import json
from pathlib import Path

import pytest

from jdkvm import config
from jdkvm.errors import JdkvmError


def test_load_state_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JDKVM_HOME", str(tmp_path / ".jdkvm"))
    assert config.load_state() == {"global_default": None}


def test_save_state_is_atomic(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JDKVM_HOME", str(tmp_path / ".jdkvm"))

    config.save_state({"global_default": "21"})

    path = config.state_path()
    assert path.exists()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["global_default"] == "21"

    leftovers = list(path.parent.glob("state.*.tmp"))
    assert leftovers == []


def test_set_get_global_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JDKVM_HOME", str(tmp_path / ".jdkvm"))

    assert config.get_global_default() is None
    config.set_global_default("17.0.9")
    assert config.get_global_default() == "17.0.9"


def test_corrupt_state_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JDKVM_HOME", str(tmp_path / ".jdkvm"))
    config.state_path().parent.mkdir(parents=True)
    config.state_path().write_text("{not json", encoding="utf-8")

    with pytest.raises(JdkvmError, match="Corrupt state file"):
        config.load_state()


def test_url_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JDKVM_ORACLE_BASE_URL", raising=False)
    monkeypatch.delenv("JDKVM_BASELINE_URL", raising=False)
    assert config.oracle_base_url() == "https://download.oracle.com/java"
    assert config.baseline_url() == "https://javadl-esd-secure.oracle.com/update/baseline.version"

    monkeypatch.setenv("JDKVM_ORACLE_BASE_URL", "https://mirror.test/java/")
    assert config.oracle_base_url() == "https://mirror.test/java"


def test_http_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JDKVM_HTTP_TIMEOUT", raising=False)
    assert config.http_timeout() == 30.0

    monkeypatch.setenv("JDKVM_HTTP_TIMEOUT", "5")
    assert config.http_timeout() == 5.0

    monkeypatch.setenv("JDKVM_HTTP_TIMEOUT", "soon")
    with pytest.raises(JdkvmError, match="JDKVM_HTTP_TIMEOUT"):
        config.http_timeout()

    monkeypatch.setenv("JDKVM_HTTP_TIMEOUT", "0")
    with pytest.raises(JdkvmError):
        config.http_timeout()

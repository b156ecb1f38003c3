from __future__ import annotations

from typing import TYPE_CHECKING

from stocksync.common import get_data_dir, get_http_cache_path

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_data_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STOCKSYNC_DATA_DIR", str(tmp_path / "state"))

    assert get_data_dir() == (tmp_path / "state").resolve()


def test_data_dir_uses_xdg_cache_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("STOCKSYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

    assert get_data_dir() == (tmp_path / "stocksync").resolve()


def test_http_cache_path_creates_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("STOCKSYNC_DATA_DIR", str(tmp_path / "state"))

    path = get_http_cache_path()

    assert path.parent.is_dir()
    assert path.name == "http-cache.sqlite"

"""Tests for platform detection."""

import pytest

from pyfulmen.foundry import platform as fulmen_platform


@pytest.fixture(autouse=True)
def no_wsl(monkeypatch):
    for name in fulmen_platform.WSL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_unix_supports_signal_codes(monkeypatch):
    monkeypatch.setattr(fulmen_platform._platform, "system", lambda: "Linux")
    assert not fulmen_platform.is_windows()
    assert fulmen_platform.supports_signal_exit_codes()


def test_windows_does_not(monkeypatch):
    monkeypatch.setattr(fulmen_platform._platform, "system", lambda: "Windows")
    assert fulmen_platform.is_windows()
    assert not fulmen_platform.supports_signal_exit_codes()

    info = fulmen_platform.platform_info()
    assert info["system"] == "Windows"
    assert info["recommended_filtering"] is True


def test_wsl_does(monkeypatch):
    monkeypatch.setattr(fulmen_platform._platform, "system", lambda: "Windows")
    monkeypatch.setenv("WSL_DISTRO_NAME", "Ubuntu")
    assert fulmen_platform.is_wsl()
    assert fulmen_platform.supports_signal_exit_codes()
    assert fulmen_platform.platform_info()["recommended_filtering"] is False

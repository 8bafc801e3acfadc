"""Host platform detection for signal-aware exit handling."""

import os
import platform as _platform

WSL_ENV_VARS = ("WSL_DISTRO_NAME", "WSL_INTEROP")


def is_windows() -> bool:
    return _platform.system() == "Windows"


def is_wsl() -> bool:
    """Detect a Linux compatibility layer by its environment variables."""
    return any(os.environ.get(name) for name in WSL_ENV_VARS)


def supports_signal_exit_codes() -> bool:
    """Report whether 128+N signal exit codes are meaningful on this host.

    Always true off Windows. On Windows only when running under WSL.
    """
    return not is_windows() or is_wsl()


def platform_info() -> dict[str, object]:
    supported = supports_signal_exit_codes()
    return {
        "system": _platform.system(),
        "machine": _platform.machine(),
        "is_wsl": is_wsl(),
        "supports_signal_codes": supported,
        # Callers listing exit codes should drop the signal range when unsupported
        "recommended_filtering": not supported,
    }

from __future__ import annotations

import platform

from ..errors import UnsupportedPlatform

OS_FAMILIES = ("linux", "mac", "windows")

# Suffix used in artifact names (desktop-1.0-all.jar -> desktop-1.0-all-win.jar)
_ARTIFACT_OS_IDS = {
    "linux": "linux",
    "mac": "mac",
    "windows": "win",
}


def normalize_os_family(system: str) -> str:
    s = system.strip().lower()
    family = {
        "linux": "linux",
        "darwin": "mac",
        "mac": "mac",
        "macos": "mac",
        "windows": "windows",
        "win32": "windows",
    }.get(s)
    if family is None:
        raise UnsupportedPlatform(f"Unsupported host operating system: {system!r}")
    return family


def detect_os_family() -> str:
    return normalize_os_family(platform.system())


def artifact_os_id(os_family: str) -> str:
    try:
        return _ARTIFACT_OS_IDS[os_family]
    except KeyError:
        raise UnsupportedPlatform(f"Unknown OS family: {os_family!r}") from None

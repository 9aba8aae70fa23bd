"""JDK archives used to run jpackage.

These JDKs are independent of whatever is installed on the building host.
If a build is no longer hosted, or a different version is wanted, update the
URL and its SHA-256 together (config key `jdk_binaries` overrides the table).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional
from urllib.parse import unquote, urlparse

from ..errors import UnsupportedPlatform
from .platforms import OS_FAMILIES

JDK15_BINARIES: Dict[str, Dict[str, str]] = {
    "linux": {
        "url": "https://github.com/AdoptOpenJDK/openjdk15-binaries/releases/download/jdk-15.0.2%2B7/OpenJDK15U-jdk_x64_linux_hotspot_15.0.2_7.tar.gz",
        "sha256": "94f20ca8ea97773571492e622563883b8869438a015d02df6028180dd9acc24d",
    },
    "mac": {
        "url": "https://github.com/AdoptOpenJDK/openjdk15-binaries/releases/download/jdk-15.0.2%2B7/OpenJDK15U-jdk_x64_mac_hotspot_15.0.2_7.tar.gz",
        "sha256": "d358a7ff03905282348c6c80562a4da2e04eb377b60ad2152be4c90f8d580b7f",
    },
    "windows": {
        "url": "https://github.com/AdoptOpenJDK/openjdk15-binaries/releases/download/jdk-15.0.2%2B7/OpenJDK15U-jdk_x64_windows_hotspot_15.0.2_7.zip",
        "sha256": "b80dde2b7f8374eff0f1726c1cbdb48fb095fdde21489046d92f7144baff5741",
    },
}

_SHA256_RE = re.compile(r"^[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class BinaryReference:
    os_family: str
    url: str
    sha256: str

    @property
    def archive_name(self) -> str:
        return unquote(urlparse(self.url).path.rstrip("/").split("/")[-1])

    @property
    def archive_kind(self) -> str:
        name = self.archive_name.lower()
        if name.endswith(".zip"):
            return "zip"
        if name.endswith((".tar.gz", ".tgz")):
            return "tar.gz"
        raise ValueError(f"Unsupported JDK archive type: {self.archive_name}")


def resolve_binary(
    os_family: str,
    table: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> BinaryReference:
    """Look up the JDK archive for an OS family. Unknown families fail closed."""

    if os_family not in OS_FAMILIES:
        raise UnsupportedPlatform(f"No JDK binary for OS family {os_family!r}")

    entry = (table if table is not None else JDK15_BINARIES).get(os_family)
    if not entry or not entry.get("url") or not entry.get("sha256"):
        raise UnsupportedPlatform(f"JDK binary table has no complete entry for {os_family!r}")

    sha256 = str(entry["sha256"]).strip().lower()
    if not _SHA256_RE.match(sha256):
        raise ValueError(f"Invalid SHA-256 for {os_family}: {entry['sha256']!r}")

    return BinaryReference(os_family=os_family, url=str(entry["url"]), sha256=sha256)

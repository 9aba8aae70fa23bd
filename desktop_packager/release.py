from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import PackagerConfig

# jpackage rejects versions like 1.6.4-SNAPSHOT on mac and for rpm
_PRERELEASE_SUFFIX = re.compile(r"(?:-SNAPSHOT)+$", re.IGNORECASE)


def normalize_version(version: str) -> str:
    """Strip a trailing pre-release suffix (idempotent)."""
    return _PRERELEASE_SUFFIX.sub("", version.strip()).strip()


@dataclass(frozen=True)
class ReleaseDescriptor:
    name: str
    version: str
    description: str
    copyright: str
    vendor: str
    main_class: str
    java_options: List[str] = field(default_factory=list)
    linux_package_name: str = ""
    linux_app_release: str = "1"
    linux_menu_group: str = "Network"
    linux_deb_maintainer: str = ""
    linux_rpm_license_type: str = ""

    @property
    def package_name(self) -> str:
        # deb requires lowercase package names
        return self.linux_package_name or self.name.lower()


def release_from_config(cfg: PackagerConfig, *, version: Optional[str] = None) -> ReleaseDescriptor:
    r: Dict[str, Any] = cfg.release
    raw_version = version or r.get("version")
    if not raw_version:
        raise ValueError("release.version is required (or pass --version)")

    name = str(r.get("name") or "Bisq")
    return ReleaseDescriptor(
        name=name,
        version=normalize_version(str(raw_version)),
        description=str(r.get("description") or "A decentralized bitcoin exchange network."),
        copyright=str(r.get("copyright") or f"© {name}"),
        vendor=str(r.get("vendor") or name),
        main_class=str(r.get("main_class") or "bisq.desktop.app.BisqAppMain"),
        java_options=cfg.java_options,
        linux_package_name=str(r.get("linux_package_name") or ""),
        linux_app_release=str(r.get("linux_app_release") or "1"),
        linux_menu_group=str(r.get("linux_menu_group") or "Network"),
        linux_deb_maintainer=str(r.get("linux_deb_maintainer") or "noreply@bisq.network"),
        linux_rpm_license_type=str(r.get("linux_rpm_license_type") or "AGPLv3"),
    )

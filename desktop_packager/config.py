from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_JAVA_OPTIONS = [
    "-Xss1280k",
    "-XX:MaxRAM=8g",
    "-XX:+UseG1GC",
    "-XX:MaxHeapFreeRatio=10",
    "-XX:MinHeapFreeRatio=5",
    "-XX:+UseStringDeduplication",
    "-Djava.net.preferIPv4Stack=true",
]

DEFAULT_DYLIBS_TO_SIGN = [
    "libjavafx_iio.dylib",
    "libglass.dylib",
    "libjavafx_font.dylib",
    "libprism_common.dylib",
    "libprism_es2.dylib",
    "libdecora_sse.dylib",
    "libprism_sw.dylib",
    "META-INF/native/libio_grpc_netty_shaded_netty_tcnative_osx_x86_64.jnilib",
]

DEFAULT_SIGNTOOL = r"C:\Program Files (x86)\Windows Kits\10\App Certification Kit\signtool.exe"


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config section '{name}' must be a mapping")
    return value


@dataclass(frozen=True)
class PackagerConfig:
    raw: Dict[str, Any]
    base_dir: Path = Path(".")

    def _path(self, value: str) -> Path:
        p = Path(value).expanduser()
        return p if p.is_absolute() else self.base_dir / p

    def _opt_path(self, section: str, key: str) -> Optional[Path]:
        value = _section(self.raw, section).get(key)
        return self._path(str(value)) if value else None

    # release

    @property
    def release(self) -> Dict[str, Any]:
        return _section(self.raw, "release")

    @property
    def java_options(self) -> List[str]:
        return [str(o) for o in (self.release.get("java_options") or DEFAULT_JAVA_OPTIONS)]

    # paths

    @property
    def build_root(self) -> Path:
        return self._path(str(_section(self.raw, "paths").get("build_root") or "desktop/build"))

    @property
    def main_jar(self) -> Path:
        value = _section(self.raw, "paths").get("main_jar")
        if not value:
            raise ValueError("paths.main_jar is required")
        return self._path(str(value))

    @property
    def fat_jar_dir(self) -> Path:
        value = _section(self.raw, "paths").get("fat_jar_dir")
        return self._path(str(value)) if value else self.build_root / "libs" / "fatJar"

    @property
    def deterministic_jar_tool(self) -> Optional[Path]:
        return self._opt_path("paths", "deterministic_jar_tool")

    @property
    def package_resources_dir(self) -> Path:
        return self._path(str(_section(self.raw, "paths").get("package_resources_dir") or "desktop/package"))

    @property
    def raspberry_pi_lib_dir(self) -> Optional[Path]:
        return self._opt_path("paths", "raspberry_pi_lib_dir")

    # preflight

    @property
    def preflight_enabled(self) -> bool:
        return bool(_section(self.raw, "preflight").get("enabled", True))

    @property
    def required_java_major(self) -> int:
        return int(_section(self.raw, "preflight").get("required_java_major") or 11)

    @property
    def git_log_count(self) -> int:
        return int(_section(self.raw, "preflight").get("git_log_count") or 5)

    # binaries / download

    @property
    def jdk_binaries(self) -> Optional[Dict[str, Dict[str, str]]]:
        table = self.raw.get("jdk_binaries")
        return dict(table) if table else None

    @property
    def download_timeout_s(self) -> float:
        return float(_section(self.raw, "download").get("timeout_s") or 60)

    @property
    def download_chunk_size(self) -> int:
        return int(_section(self.raw, "download").get("chunk_size") or 1024 * 1024)

    # windows

    @property
    def windows_sign(self) -> bool:
        return bool(_section(self.raw, "windows").get("sign", True))

    @property
    def signtool_path(self) -> str:
        return str(_section(self.raw, "windows").get("signtool") or DEFAULT_SIGNTOOL)

    # mac

    @property
    def dylibs_to_sign(self) -> List[str]:
        return [str(d) for d in (_section(self.raw, "mac").get("dylibs_to_sign") or DEFAULT_DYLIBS_TO_SIGN)]

    @property
    def entitlements(self) -> Path:
        value = _section(self.raw, "mac").get("entitlements")
        if value:
            return self._path(str(value))
        return self.package_resources_dir / "macosx" / "macos.entitlements"

    # notarization

    @property
    def notarization_poll_interval_s(self) -> float:
        value = _section(self.raw, "notarization").get("poll_interval_s")
        return float(60 if value is None else value)

    @property
    def notarization_max_attempts(self) -> int:
        return int(_section(self.raw, "notarization").get("max_attempts") or 120)

    @property
    def notarization_success_marker(self) -> str:
        return str(_section(self.raw, "notarization").get("success_marker") or "success")

    @property
    def notarization_failure_marker(self) -> str:
        return str(_section(self.raw, "notarization").get("failure_marker") or "invalid")

    @property
    def notarization_password(self) -> str:
        return str(_section(self.raw, "notarization").get("password") or "@keychain:AC_PASSWORD")

    # environment variable names

    def env_name(self, key: str) -> str:
        defaults = {
            "signing_identity": "BISQ_PACKAGE_SIGNING_IDENTITY",
            "notarization_username": "BISQ_PACKAGE_NOTARIZATION_AC_USERNAME",
            "notarization_asc_provider": "BISQ_PACKAGE_NOTARIZATION_ASC_PROVIDER",
            "primary_bundle_id": "BISQ_PRIMARY_BUNDLE_ID",
            "shared_folder": "BISQ_SHARED_FOLDER",
        }
        return str(_section(self.raw, "env").get(key) or defaults[key])

    def env_value(self, key: str) -> str:
        return os.environ.get(self.env_name(key), "")

    # prompts

    @property
    def assume_yes(self) -> bool:
        return bool(_section(self.raw, "prompts").get("assume_yes", False))

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))


def load_packager_config(path: str) -> PackagerConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("packager config must be YAML")

    try:
        import yaml  # type: ignore
    except ImportError as e:
        raise RuntimeError("PyYAML is required to read the packager config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("packager config must contain a mapping/object")

    return PackagerConfig(raw=raw, base_dir=p.resolve().parent)

"""jpackage argument builders.

See https://docs.oracle.com/en/java/javase/15/docs/specs/man/jpackage.html
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..release import ReleaseDescriptor


def identity_options(release: ReleaseDescriptor, *, dest: Path, temp: Path) -> List[str]:
    return [
        "--dest", str(dest),
        "--name", release.name,
        "--description", release.description,
        "--app-version", release.version,
        "--copyright", release.copyright,
        "--vendor", release.vendor,
        "--temp", str(temp),
    ]


def common_options(
    release: ReleaseDescriptor,
    *,
    dest: Path,
    temp: Path,
    input_dir: Path,
    main_jar_name: str,
) -> List[str]:
    """Options shared by every installer type (image + launcher)."""

    opts = identity_options(release, dest=dest, temp=temp)
    # Everything in input_dir ends up in the installer
    opts += ["--input", str(input_dir)]
    opts += ["--main-jar", main_jar_name, "--main-class", release.main_class]
    for flag in release.java_options:
        opts += ["--java-options", flag]
    return opts


def windows_options(release: ReleaseDescriptor, resources_dir: Path) -> List[str]:
    win = resources_dir / "windows"
    return [
        "--icon", str(win / f"{release.name}.ico"),
        "--resource-dir", str(win),
        "--win-dir-chooser",
        "--win-per-user-install",
        "--win-menu",
        "--win-shortcut",
    ]


def mac_options(resources_dir: Path) -> List[str]:
    return ["--resource-dir", str(resources_dir / "macosx")]


def linux_options(release: ReleaseDescriptor, resources_dir: Path) -> List[str]:
    return [
        "--icon", str(resources_dir / "linux" / "icon.png"),
        "--linux-package-name", release.package_name,
        "--linux-app-release", release.linux_app_release,
        "--linux-menu-group", release.linux_menu_group,
        "--linux-shortcut",
    ]


def jpackage_argv(jpackage: Path, options: List[str], package_type: str) -> List[str]:
    return [str(jpackage), *options, "--type", package_type]


def installer_name(release: ReleaseDescriptor, extension: str) -> str:
    return f"{release.name}-{release.version}.{extension}"


def app_image_name(release: ReleaseDescriptor) -> str:
    return f"{release.name}.app"

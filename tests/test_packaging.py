from __future__ import annotations

import stat
from pathlib import Path

import pytest

from desktop_packager.errors import PackagingError
from desktop_packager.steps import CollectArtifactsStep, PackageInstallersStep
from desktop_packager.steps.step_60_collect_artifacts import os_jar_name


def _build(ctx):
    ctx = PackageInstallersStep().run(ctx)
    return CollectArtifactsStep().run(ctx)


def _non_checksum_files(folder: Path) -> list[str]:
    return sorted(p.name for p in folder.iterdir() if p.is_file() and not p.name.endswith(".SHA256"))


def test_linux_builds_deb_and_rpm_with_checksums(fake_tools, staged_ctx) -> None:
    ctx = _build(staged_ctx("linux"))
    out = ctx.dirs.binaries

    assert len(list(out.glob("*.deb"))) == 1
    assert len(list(out.glob("*.rpm"))) == 1
    assert _non_checksum_files(out) == [
        "bisq-1.6.4-1.x86_64.rpm",
        "bisq_1.6.4-1_amd64.deb",
        "desktop-1.6.4-SNAPSHOT-all-linux.jar",
    ]
    for name in _non_checksum_files(out):
        assert (out / f"{name}.SHA256").is_file()
    assert {a.path.name for a in ctx.artifacts} == set(_non_checksum_files(out))

    types = [argv[argv.index("--type") + 1] for argv in fake_tools.argvs("jpackage")]
    assert types == ["deb", "rpm"]


def test_linux_jpackage_options(fake_tools, staged_ctx) -> None:
    ctx = staged_ctx("linux")
    PackageInstallersStep().run(ctx)

    deb, rpm = fake_tools.argvs("jpackage")
    assert deb[deb.index("--input") + 1] == str(ctx.staged_jar.parent)
    assert deb[deb.index("--main-jar") + 1] == "desktop-1.6.4-SNAPSHOT-all.jar"
    assert deb[deb.index("--app-version") + 1] == "1.6.4"
    assert deb[deb.index("--linux-package-name") + 1] == "bisq"
    assert deb.count("--java-options") == 7
    assert "--linux-deb-maintainer" in deb and "--linux-rpm-license-type" not in deb
    assert "--linux-rpm-license-type" in rpm and "--linux-deb-maintainer" not in rpm


def test_windows_builds_one_exe_and_clears_readonly_before_signing(fake_tools, staged_ctx) -> None:
    ctx = _build(staged_ctx("windows"))
    out = ctx.dirs.binaries

    exes = list(out.glob("*.exe"))
    assert [p.name for p in exes] == ["Bisq-1.6.4.exe"]
    assert exes[0].stat().st_mode & stat.S_IWUSR

    programs = fake_tools.programs()
    assert programs.index("attrib") < programs.index("signtool.exe")
    assert fake_tools.argvs("attrib") == [["attrib", "-R", str(exes[0])]]
    assert fake_tools.argvs("signtool.exe")[0][-1] == str(exes[0])
    assert (out / "desktop-1.6.4-SNAPSHOT-all-win.jar").is_file()
    assert (out / "Bisq-1.6.4.exe.SHA256").is_file()


def test_windows_signing_can_be_disabled(fake_tools, staged_ctx) -> None:
    ctx = staged_ctx("windows", raw={"windows": {"sign": False}})
    PackageInstallersStep().run(ctx)

    assert "attrib" in fake_tools.programs()
    assert "signtool.exe" not in fake_tools.programs()


def test_mac_unsigned_when_operator_declines(fake_tools, staged_ctx) -> None:
    ctx = _build(staged_ctx("mac", answers=[False]))

    assert _non_checksum_files(ctx.dirs.binaries) == ["Bisq-1.6.4.dmg", "desktop-1.6.4-SNAPSHOT-all-mac.jar"]
    assert "codesign" not in fake_tools.programs()
    assert "xcrun" not in fake_tools.programs()


def test_mac_signed_and_notarized(fake_tools, staged_ctx, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BISQ_PACKAGE_SIGNING_IDENTITY", "Developer ID Application: Bisq")
    monkeypatch.setenv("BISQ_PACKAGE_NOTARIZATION_AC_USERNAME", "dev@example.org")
    monkeypatch.setenv("BISQ_PACKAGE_NOTARIZATION_ASC_PROVIDER", "TEAM")
    monkeypatch.setenv("BISQ_PRIMARY_BUNDLE_ID", "network.bisq.CAT")
    fake_tools.reply(
        "xcrun",
        (0, "RequestUUID = 0f6a3c1e-1111-2222-3333-444455556666\n", ""),
        (0, "Status: in progress", ""),
        (0, "Status: success", ""),
        (0, "", ""),
    )

    ctx = _build(staged_ctx("mac", answers=[True]))
    out = ctx.dirs.binaries

    assert _non_checksum_files(out) == ["Bisq-1.6.4.dmg", "desktop-1.6.4-SNAPSHOT-all-mac.jar"]
    assert not (out / "Bisq.app").exists()

    jar_calls = [argv[1] for argv in fake_tools.argvs("jar")]
    assert jar_calls == ["xf", "uf"]
    types = [argv[argv.index("--type") + 1] for argv in fake_tools.argvs("jpackage")]
    assert types == ["app-image", "dmg"]
    assert "--mac-sign" in fake_tools.argvs("jpackage")[1]
    signed = [argv[-1] for argv in fake_tools.argvs("codesign") if "--sign" in argv]
    assert signed[-1] == str(out / "Bisq-1.6.4.dmg")
    assert str(out / "Bisq.app") in signed
    assert fake_tools.argvs("xcrun")[-1] == ["xcrun", "stapler", "staple", str(out / "Bisq-1.6.4.dmg")]


def test_mac_signing_requires_identity(fake_tools, staged_ctx, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BISQ_PACKAGE_SIGNING_IDENTITY", raising=False)
    with pytest.raises(PackagingError):
        PackageInstallersStep().run(staged_ctx("mac", answers=[True]))


def test_mac_zips_raspberry_pi_libs(fake_tools, staged_ctx, tmp_path: Path) -> None:
    lib = tmp_path / "app" / "lib"
    lib.mkdir(parents=True)
    (lib / "a.jar").write_bytes(b"a")
    ctx = _build(staged_ctx("mac", answers=[False], raw={"paths": {"raspberry_pi_lib_dir": str(lib)}}))

    assert (ctx.dirs.binaries / "jar-lib-for-raspberry-pi-1.6.4.zip.SHA256").is_file()


@pytest.mark.parametrize(
    "family,expected",
    [
        ("windows", "desktop-1.6.4-SNAPSHOT-all-win.jar"),
        ("mac", "desktop-1.6.4-SNAPSHOT-all-mac.jar"),
        ("linux", "desktop-1.6.4-SNAPSHOT-all-linux.jar"),
    ],
)
def test_os_jar_name(family: str, expected: str) -> None:
    assert os_jar_name("desktop-1.6.4-SNAPSHOT-all.jar", family) == expected


def test_os_jar_name_without_all_suffix() -> None:
    assert os_jar_name("bisq.jar", "linux") == "bisq-linux.jar"

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from ..context import PackagingContext
from ..errors import PackagingError
from ..lib.assets import reset_dir
from ..lib.command import run_cmd
from ..lib.jpackage import (
    app_image_name,
    common_options,
    identity_options,
    installer_name,
    jpackage_argv,
    linux_options,
    mac_options,
    windows_options,
)
from ..lib.notarize import NotarizationCredentials, notarize_and_staple
from ..lib.signing import clear_readonly, codesign, jar_tool, sign_jar_native_libs, signtool_sign

logger = logging.getLogger(__name__)


def package_windows(ctx: PackagingContext, jpackage: Path, common: List[str]) -> None:
    cfg = ctx.config
    dest = ctx.require_dirs().binaries

    run_cmd(
        jpackage_argv(jpackage, common + windows_options(ctx.release, cfg.package_resources_dir), "exe"),
        dry_run=ctx.dry_run,
    )

    exe = dest / installer_name(ctx.release, "exe")
    clear_readonly(exe, dry_run=ctx.dry_run)
    if cfg.windows_sign:
        signtool_sign(cfg.signtool_path, exe, dry_run=ctx.dry_run)
    else:
        logger.warning("windows.sign is false; %s left unsigned", exe.name)


def package_mac(ctx: PackagingContext, jpackage: Path, common: List[str]) -> None:
    cfg = ctx.config
    release = ctx.release
    dirs = ctx.require_dirs()
    dest = dirs.binaries
    mac_opts = mac_options(cfg.package_resources_dir)

    identity = cfg.env_value("signing_identity")
    logger.info("Environment variable %s is: %s", cfg.env_name("signing_identity"), identity)
    if not ctx.confirm("Sign the app using the above signing identity?"):
        run_cmd(jpackage_argv(jpackage, common + mac_opts, "dmg"), dry_run=ctx.dry_run)
        return
    if not identity:
        raise PackagingError(f"Signing requested but {cfg.env_name('signing_identity')} is not set")

    # 1: native libs inside the jar must be signed before jpackage sees it
    sign_jar_native_libs(
        ctx.require_staged_jar(),
        cfg.dylibs_to_sign,
        work_dir=dirs.dylibs_to_sign,
        identity=identity,
        jar_cmd=jar_tool(jpackage),
        dry_run=ctx.dry_run,
    )

    # 2: unsigned app image
    run_cmd(jpackage_argv(jpackage, common + mac_opts, "app-image"), dry_run=ctx.dry_run)

    # 3: sign inside-out with the hardened runtime
    app = dest / app_image_name(release)
    for target in (
        app / "Contents/runtime/Contents/MacOS/libjli.dylib",
        app / "Contents/MacOS" / release.name,
        app,
    ):
        codesign([target], identity=identity, entitlements=cfg.entitlements, dry_run=ctx.dry_run)

    # 4: dmg from the signed image (fresh --temp, like every jpackage run)
    reset_dir(dirs.jpackage_temp, dry_run=ctx.dry_run)
    dmg_opts = identity_options(release, dest=dest, temp=dirs.jpackage_temp)
    dmg_opts += ["--app-image", str(app), "--mac-sign", *mac_opts]
    run_cmd(jpackage_argv(jpackage, dmg_opts, "dmg"), dry_run=ctx.dry_run)

    # 5: the image is inside the dmg now
    if not ctx.dry_run and app.exists():
        shutil.rmtree(app)

    # 6: sign the dmg itself
    dmg = dest / installer_name(release, "dmg")
    codesign([dmg], identity=identity, entitlements=cfg.entitlements, deep=True, dry_run=ctx.dry_run)

    # 7+8: notarize, wait, staple
    creds = NotarizationCredentials(
        username=cfg.env_value("notarization_username"),
        password=cfg.notarization_password,
        asc_provider=cfg.env_value("notarization_asc_provider"),
        primary_bundle_id=cfg.env_value("primary_bundle_id"),
    )
    notarize_and_staple(
        dmg,
        creds,
        interval_s=cfg.notarization_poll_interval_s,
        max_attempts=cfg.notarization_max_attempts,
        success_marker=cfg.notarization_success_marker,
        failure_marker=cfg.notarization_failure_marker,
        dry_run=ctx.dry_run,
    )


def package_linux(ctx: PackagingContext, jpackage: Path, common: List[str]) -> None:
    release = ctx.release
    dirs = ctx.require_dirs()
    linux_opts = linux_options(release, ctx.config.package_resources_dir)

    run_cmd(
        jpackage_argv(jpackage, common + linux_opts + ["--linux-deb-maintainer", release.linux_deb_maintainer], "deb"),
        dry_run=ctx.dry_run,
    )

    # jpackage needs an empty --temp dir for every invocation
    reset_dir(dirs.jpackage_temp, dry_run=ctx.dry_run)

    run_cmd(
        jpackage_argv(jpackage, common + linux_opts + ["--linux-rpm-license-type", release.linux_rpm_license_type], "rpm"),
        dry_run=ctx.dry_run,
    )


_PACKAGERS = {
    "windows": package_windows,
    "mac": package_mac,
    "linux": package_linux,
}


class PackageInstallersStep:
    step_id = "50_package_installers"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        dirs = ctx.require_dirs()
        jpackage = ctx.require_jpackage()
        jar = ctx.require_staged_jar()

        packager = _PACKAGERS.get(ctx.os_family)
        if packager is None:
            raise PackagingError(f"No packaging recipe for {ctx.os_family!r}")

        dirs.jpackage_temp.mkdir(parents=True, exist_ok=True)
        logger.info("Packaging %s version %s for %s", ctx.release.name, ctx.release.version, ctx.os_family)

        common = common_options(
            ctx.release,
            dest=dirs.binaries,
            temp=dirs.jpackage_temp,
            input_dir=jar.parent,
            main_jar_name=jar.name,
        )
        packager(ctx, jpackage, common)
        return ctx

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def clear_readonly(path: Path, *, dry_run: bool = False) -> None:
    """signtool refuses to touch a read-only exe."""
    run_cmd(["attrib", "-R", str(path)], dry_run=dry_run)


def signtool_sign(signtool: str, path: Path, *, dry_run: bool = False) -> None:
    run_cmd([signtool, "sign", "/v", "/fd", "SHA256", "/a", str(path)], dry_run=dry_run)


def codesign(
    targets: Sequence[str | Path],
    *,
    identity: str,
    entitlements: Optional[Path] = None,
    deep: bool = False,
    cwd: Optional[Path] = None,
    dry_run: bool = False,
) -> None:
    """Sign with the hardened runtime enabled (required for notarization)."""

    argv = ["codesign", "--sign", identity, "--options", "runtime", "--force", "--verbose"]
    if entitlements is not None:
        argv += ["--entitlements", str(entitlements)]
    if deep:
        argv.append("--deep")
    argv += [str(t) for t in targets]
    run_cmd(argv, cwd=cwd, dry_run=dry_run)


def codesign_verify(targets: Sequence[str | Path], *, cwd: Optional[Path] = None, dry_run: bool = False) -> None:
    run_cmd(["codesign", "-vvv", "--deep", "--strict", *[str(t) for t in targets]], cwd=cwd, dry_run=dry_run)


def jar_tool(jpackage: Path) -> str:
    """Use the jar tool next to jpackage, falling back to the one on PATH."""
    name = "jar.exe" if jpackage.suffix == ".exe" else "jar"
    candidate = jpackage.parent / name
    return str(candidate) if candidate.exists() else "jar"


def sign_jar_native_libs(
    jar: Path,
    entries: Sequence[str],
    *,
    work_dir: Path,
    identity: str,
    jar_cmd: str = "jar",
    dry_run: bool = False,
) -> None:
    """Extract native libs from jar, sign and verify them, put them back."""

    if not entries:
        return
    work_dir.mkdir(parents=True, exist_ok=True)
    run_cmd([jar_cmd, "xf", str(jar), *entries], cwd=work_dir, dry_run=dry_run)
    codesign(entries, identity=identity, deep=True, cwd=work_dir, dry_run=dry_run)
    codesign_verify(entries, cwd=work_dir, dry_run=dry_run)
    run_cmd([jar_cmd, "uf", str(jar), *entries], cwd=work_dir, dry_run=dry_run)
    logger.info("Re-inserted %d signed native lib(s) into %s", len(entries), jar.name)

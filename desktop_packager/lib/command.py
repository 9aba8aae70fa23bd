from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from ..errors import CommandFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout on success, stderr otherwise."""
        return self.stdout if self.ok else self.stderr


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str | os.PathLike[str]],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr.
    - dry_run logs but does not execute.
    """

    argv_list = [str(a) for a in argv]
    if cwd is not None:
        logger.info("CMD (cwd=%s) %s", cwd, _fmt_argv(argv_list))
    else:
        logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        # 127 is what a shell reports for an unknown command
        missing = f"Cannot run {argv_list[0]}: {e}"
        if check:
            raise CommandFailed(missing, returncode=127, stderr=missing) from e
        logger.warning("%s", missing)
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=missing)

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandFailed(
            f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr}",
            returncode=p.returncode,
            stderr=p.stderr,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def execute(
    argv: Sequence[str | os.PathLike[str]],
    *,
    cwd: str | Path | None = None,
    dry_run: bool = False,
) -> str:
    """Run a command and return its text without raising on failure.

    Callers that care about failure must look at the returned text.
    """
    return run_cmd(argv, check=False, cwd=cwd, dry_run=dry_run).output


def shell_argv(argv: Sequence[str], os_family: str) -> list[str]:
    """Run argv through the host shell (needed for builtins like `start`)."""
    if os_family == "windows":
        return ["cmd", "/c", *argv]
    return ["bash", "-c", shlex.join(argv)]

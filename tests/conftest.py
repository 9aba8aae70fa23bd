from __future__ import annotations

import os
import stat
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

import pytest

from desktop_packager.config import PackagerConfig
from desktop_packager.context import PackagingContext, create_work_dirs
from desktop_packager.lib import command
from desktop_packager.release import release_from_config

Reply = Tuple[int, str, str]


class FakeTools:
    """Stands in for subprocess.run: records argv and emulates jpackage outputs."""

    def __init__(self) -> None:
        self.calls: List[Tuple[List[str], Optional[str]]] = []
        self.replies: Dict[str, List[Reply]] = {}
        self.missing: Set[str] = set()
        self.handlers: Dict[str, Callable[[List[str]], Reply]] = {
            "jpackage": self._jpackage,
            "attrib": self._attrib,
            "signtool.exe": self._signtool,
        }

    def reply(self, program: str, *replies: Reply) -> None:
        self.replies.setdefault(program, []).extend(replies)

    def programs(self) -> List[str]:
        return [_program(argv) for argv, _ in self.calls]

    def argvs(self, program: str) -> List[List[str]]:
        return [argv for argv, _ in self.calls if _program(argv) == program]

    def __call__(self, argv: Sequence[str], **kwargs) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append((argv, kwargs.get("cwd")))
        program = _program(argv)
        if program in self.missing:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        queued = self.replies.get(program)
        if queued:
            rc, out, err = queued.pop(0)
        elif program in self.handlers:
            rc, out, err = self.handlers[program](argv)
        else:
            rc, out, err = 0, "", ""
        return subprocess.CompletedProcess(argv, rc, out, err)

    @staticmethod
    def _opt(argv: List[str], name: str) -> Optional[str]:
        return argv[argv.index(name) + 1] if name in argv else None

    def _jpackage(self, argv: List[str]) -> Reply:
        temp = Path(self._opt(argv, "--temp") or "")
        if temp.exists() and any(temp.iterdir()):
            return 1, "", f"Error: Temporary directory {temp} must be empty"

        dest = Path(self._opt(argv, "--dest") or ".")
        name = self._opt(argv, "--name") or "App"
        version = self._opt(argv, "--app-version") or "1.0"
        kind = self._opt(argv, "--type")
        pkg = self._opt(argv, "--linux-package-name") or name.lower()
        rel = self._opt(argv, "--linux-app-release") or "1"

        dest.mkdir(parents=True, exist_ok=True)
        if kind == "app-image":
            (dest / f"{name}.app" / "Contents" / "MacOS").mkdir(parents=True, exist_ok=True)
        elif kind == "deb":
            (dest / f"{pkg}_{version}-{rel}_amd64.deb").write_bytes(b"deb")
        elif kind == "rpm":
            (dest / f"{pkg}-{version}-{rel}.x86_64.rpm").write_bytes(b"rpm")
        elif kind in {"exe", "dmg"}:
            out = dest / f"{name}-{version}.{kind}"
            out.write_bytes(kind.encode())
            if kind == "exe":
                os.chmod(out, stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
        else:
            return 1, "", f"unknown type {kind}"

        temp.mkdir(parents=True, exist_ok=True)
        (temp / "scratch").write_text("x", encoding="utf-8")
        return 0, "", ""

    def _attrib(self, argv: List[str]) -> Reply:
        path = Path(argv[-1])
        os.chmod(path, path.stat().st_mode | stat.S_IWUSR)
        return 0, "", ""

    def _signtool(self, argv: List[str]) -> Reply:
        path = Path(argv[-1])
        if not path.stat().st_mode & stat.S_IWUSR:
            return 1, "", "SignTool Error: file is read-only"
        return 0, "Successfully signed", ""


def _program(argv: Sequence[str]) -> str:
    head = str(argv[0]).replace("\\", "/").rsplit("/", 1)[-1]
    return "jpackage" if head in {"jpackage", "jpackage.exe"} else head


@pytest.fixture()
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    tools = FakeTools()
    monkeypatch.setattr(command.subprocess, "run", tools)
    return tools


@pytest.fixture()
def make_ctx(tmp_path: Path) -> Callable[..., PackagingContext]:
    def _make(
        os_family: str = "linux",
        *,
        answers: Sequence[bool] = (),
        raw: Optional[dict] = None,
        with_jar: bool = True,
    ) -> PackagingContext:
        base = {
            "release": {"name": "Bisq", "version": "1.6.4-SNAPSHOT"},
            "paths": {
                "build_root": "build",
                "main_jar": "build/libs/desktop-1.6.4-SNAPSHOT-all.jar",
                "package_resources_dir": "package",
            },
            "notarization": {"poll_interval_s": 0, "max_attempts": 3},
        }
        for key, value in (raw or {}).items():
            if isinstance(value, dict):
                base.setdefault(key, {}).update(value)
            else:
                base[key] = value
        cfg = PackagerConfig(raw=base, base_dir=tmp_path)
        if with_jar:
            cfg.main_jar.parent.mkdir(parents=True, exist_ok=True)
            cfg.main_jar.write_bytes(b"PK fat jar")

        pending = list(answers)

        def confirm(message: str) -> bool:
            return pending.pop(0) if pending else True

        return PackagingContext(
            config=cfg,
            release=release_from_config(cfg),
            os_family=os_family,
            confirm=confirm,
        )

    return _make


@pytest.fixture()
def staged_ctx(make_ctx) -> Callable[..., PackagingContext]:
    """A context as it looks right before 50_package_installers."""

    from dataclasses import replace

    from desktop_packager.steps import StageJarStep

    def _make(os_family: str = "linux", **kwargs) -> PackagingContext:
        ctx = make_ctx(os_family, **kwargs)
        dirs = create_work_dirs(ctx.config.build_root)
        name = "jpackage.exe" if os_family == "windows" else "jpackage"
        ctx = replace(ctx, dirs=dirs, jpackage_path=dirs.jdk / "jdk-15.0.2+7" / "bin" / name)
        return StageJarStep().run(ctx)

    return _make

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

LOG_FILE_NAME = "desktop-packager.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _RunLogHandler(logging.FileHandler):
    pass


class _ConsoleHandler(logging.StreamHandler):
    pass


def default_log_path(build_root: Path) -> Path:
    return build_root / "logs" / LOG_FILE_NAME


def _open_log(requested: Path) -> Tuple[logging.Handler, Path]:
    try:
        requested.parent.mkdir(parents=True, exist_ok=True)
        return _RunLogHandler(requested, encoding="utf-8"), requested
    except OSError:
        fallback = Path.cwd() / LOG_FILE_NAME
        return _RunLogHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: Path,
    *,
    level: int = logging.INFO,
    console: bool = True,
) -> Path:
    """Send this run's log records to log_path (and the console).

    Handlers installed by an earlier call are replaced, so every run writes to
    its own file. Falls back to ./desktop-packager.log when log_path cannot be
    created. Returns the file actually written.
    """

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        if isinstance(h, (_RunLogHandler, _ConsoleHandler)):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    handler, actual = _open_log(Path(log_path))
    handler.setFormatter(fmt)
    root.addHandler(handler)

    if console:
        stream = _ConsoleHandler()
        stream.setFormatter(fmt)
        root.addHandler(stream)

    if actual != Path(log_path):
        logging.getLogger(__name__).warning("Cannot write %s, logging to %s", log_path, actual)
    return actual

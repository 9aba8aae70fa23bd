from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def ask_yes_no(message: str, *, input_fn: Callable[[str], str] = input) -> bool:
    """Block until the operator answers y or n."""
    while True:
        answer = input_fn(f"{message} (y=yes, n=no) ").strip().lower()
        if answer in {"y", "yes"}:
            logger.info("Operator answered yes: %s", message)
            return True
        if answer in {"n", "no"}:
            logger.info("Operator answered no: %s", message)
            return False
        print("Please answer y or n.")


def always_yes(message: str) -> bool:
    logger.info("Auto-confirmed: %s", message)
    return True


def make_confirm(*, assume_yes: bool) -> Confirm:
    return always_yes if assume_yes else ask_yes_no

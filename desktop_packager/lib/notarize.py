"""Apple notarization: submit a dmg, poll until Apple decides, staple the ticket.

Status polling looks at the text of the status command only, never its exit
code: altool reports "in progress" the same way it reports most failures.
"""

from __future__ import annotations

import enum
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ..errors import NotarizationFailed, NotarizationTimeout, PackagingError
from .command import execute, run_cmd

logger = logging.getLogger(__name__)

_REQUEST_UUID = re.compile(r"RequestUUID\s*=\s*([0-9A-Fa-f-]+)")


class NotarizationState(enum.Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class NotarizationCredentials:
    username: str
    password: str
    asc_provider: str
    primary_bundle_id: str


def classify_status(text: str, *, success_marker: str = "success", failure_marker: str = "invalid") -> NotarizationState:
    # a response mentioning both is a failure
    if failure_marker in text:
        return NotarizationState.FAILED
    if success_marker in text:
        return NotarizationState.SUCCEEDED
    return NotarizationState.POLLING


def wait_for_notarization(
    check_status: Callable[[], str],
    *,
    interval_s: float = 60,
    max_attempts: int = 120,
    success_marker: str = "success",
    failure_marker: str = "invalid",
    sleep: Callable[[float], None] = time.sleep,
) -> NotarizationState:
    """Poll check_status until the text carries a verdict or attempts run out.

    Each attempt sleeps first: a fresh submission is never done immediately.
    """

    state = NotarizationState.SUBMITTED
    attempts = 0
    while True:
        if state is NotarizationState.SUBMITTED:
            state = NotarizationState.POLLING
            continue

        if attempts >= max_attempts:
            logger.error("Notarization still pending after %d checks", attempts)
            return NotarizationState.TIMED_OUT

        logger.info("Waiting %.0f s before checking notarization status", interval_s)
        sleep(interval_s)
        attempts += 1

        logger.info("Checking notarization status (attempt %d/%d)", attempts, max_attempts)
        state = classify_status(
            check_status(),
            success_marker=success_marker,
            failure_marker=failure_marker,
        )
        if state is not NotarizationState.POLLING:
            logger.info("Notarization finished: %s", state.value)
            return state


def parse_request_uuid(output: str) -> str:
    m = _REQUEST_UUID.search(output)
    if not m:
        raise PackagingError(f"No RequestUUID in notarization upload response:\n{output}")
    return m.group(1)


def submit_for_notarization(dmg: Path, creds: NotarizationCredentials) -> str:
    result = run_cmd(
        [
            "xcrun", "altool", "--notarize-app",
            "--primary-bundle-id", creds.primary_bundle_id,
            "--username", creds.username,
            "--password", creds.password,
            "--asc-provider", creds.asc_provider,
            "--file", str(dmg),
        ]
    )
    # altool prints the UUID on stdout or stderr depending on version
    request_uuid = parse_request_uuid(result.stdout + "\n" + result.stderr)
    logger.info("Extracted RequestUUID: %s", request_uuid)
    return request_uuid


def notarization_info(request_uuid: str, creds: NotarizationCredentials) -> str:
    return execute(
        [
            "xcrun", "altool", "--notarization-info", request_uuid,
            "--username", creds.username,
            "--password", creds.password,
        ]
    )


def staple(dmg: Path) -> None:
    run_cmd(["xcrun", "stapler", "staple", str(dmg)])


def notarize_and_staple(
    dmg: Path,
    creds: NotarizationCredentials,
    *,
    interval_s: float = 60,
    max_attempts: int = 120,
    success_marker: str = "success",
    failure_marker: str = "invalid",
    sleep: Callable[[float], None] = time.sleep,
    dry_run: bool = False,
) -> None:
    if dry_run:
        logger.info("Would notarize and staple %s", dmg)
        return

    request_uuid = submit_for_notarization(dmg, creds)
    state = wait_for_notarization(
        lambda: notarization_info(request_uuid, creds),
        interval_s=interval_s,
        max_attempts=max_attempts,
        success_marker=success_marker,
        failure_marker=failure_marker,
        sleep=sleep,
    )
    if state is NotarizationState.FAILED:
        raise NotarizationFailed(f"Notarization failed for {dmg.name} (RequestUUID {request_uuid}), aborting")
    if state is NotarizationState.TIMED_OUT:
        raise NotarizationTimeout(
            f"Notarization of {dmg.name} (RequestUUID {request_uuid}) did not finish after {max_attempts} checks"
        )

    logger.info("Notarization was successful")
    staple(dmg)

"""Run an external engine and capture the single line it reports."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from otalink.core.model import InvocationOutcome

LOGGER = logging.getLogger(__name__)

ENGINE_ROOT_ENV = "OTALINK_ENGINE_ROOT"

# Shell exit codes for "command not found" (sh, cmd.exe).
_NOT_FOUND_CODES = frozenset({127, 9009})


@dataclass(frozen=True)
class InvocationResult:
    response: str
    outcome: InvocationOutcome
    returncode: int | None = None
    detail: str = ""


def default_engine_root() -> Path:
    configured = os.environ.get(ENGINE_ROOT_ENV)
    return Path(configured) if configured else Path.cwd()


def _first_line(text: str | None) -> str:
    if not text:
        return ""
    lines = text.splitlines()
    return lines[0].strip() if lines else ""


def _group_options() -> dict[str, Any]:
    # The shell does not always exec the engine, so the engine must share a
    # process group with it to be reachable on timeout.
    if os.name == "nt":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _kill_tree(process: subprocess.Popen[str]) -> None:
    if os.name == "nt":
        subprocess.run(
            ["taskkill", "/T", "/F", "/PID", str(process.pid)],
            check=False,
            capture_output=True,
        )
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class ExternalEngineInvoker:
    """Spawn one engine process per call, rooted at the engine directory.

    Timeouts and spawn failures are never raised: they come back as an empty
    response so the caller decodes them to the generic failure status. On
    timeout the shell and everything it started are killed.
    """

    def __init__(self, working_dir: str | Path | None = None) -> None:
        self.working_dir = Path(working_dir) if working_dir is not None else None

    def run(self, command_line: str, timeout_s: float) -> InvocationResult:
        cwd = self.working_dir or default_engine_root()
        LOGGER.debug("Running engine in %s: %s", cwd, command_line)
        try:
            process = subprocess.Popen(
                command_line,
                shell=True,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                **_group_options(),
            )
        except OSError as exc:
            LOGGER.warning("Could not start engine in %s: %s", cwd, exc)
            return InvocationResult(response="", outcome=InvocationOutcome.SPAWN_FAILED, detail=str(exc))

        try:
            stdout, stderr = process.communicate(timeout=timeout_s)
        except subprocess.TimeoutExpired:
            _kill_tree(process)
            process.communicate()
            LOGGER.warning("Engine did not finish within %ss and was terminated: %s", timeout_s, command_line)
            return InvocationResult(
                response="",
                outcome=InvocationOutcome.TIMED_OUT,
                returncode=process.returncode,
                detail=f"timed out after {timeout_s}s",
            )

        response = _first_line(stdout)
        stderr = (stderr or "").strip()
        if not response and process.returncode in _NOT_FOUND_CODES:
            LOGGER.warning("Engine executable could not be run (exit %d): %s", process.returncode, stderr)
            return InvocationResult(
                response="",
                outcome=InvocationOutcome.SPAWN_FAILED,
                returncode=process.returncode,
                detail=stderr,
            )
        if stderr:
            LOGGER.debug("Engine stderr: %s", stderr)
        return InvocationResult(
            response=response,
            outcome=InvocationOutcome.COMPLETED,
            returncode=process.returncode,
            detail=stderr,
        )

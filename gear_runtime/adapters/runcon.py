"""
Gear Runtime - runcon Command Runner.

============================================================
PURPOSE
============================================================
Runs hook commands on the node inside an SELinux context
via runcon(1).

- stderr is merged into stdout so lines keep emission order
- Output that is not valid UTF-8 is decoded with replacement
- The hook is done when its shell exits, even if background
  children it started are still running
- A timeout kills the hook's whole session and is reported,
  not raised

============================================================
"""

import logging
import os
import signal
import subprocess
import tempfile
import time
from typing import List

from ..types import TIMEOUT_EXIT_CODE, CommandResult
from .base import CommandRunner


logger = logging.getLogger(__name__)


def _split_output(raw: bytes) -> List[str]:
    if not raw:
        return []
    return raw.decode("utf-8", errors="replace").splitlines()


def _kill_session(proc: subprocess.Popen) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class RunconCommandRunner(CommandRunner):
    """CommandRunner backed by `runcon -u USER -r ROLE -t TYPE /bin/sh -c CMD`."""

    runner_id = "runcon"

    def __init__(self, runcon_path: str = "runcon", shell: str = "/bin/sh"):
        self._runcon_path = runcon_path
        self._shell = shell

    def build_argv(
        self,
        command: str,
        privilege_user: str,
        privilege_role: str,
        privilege_type: str,
    ) -> List[str]:
        return [
            self._runcon_path,
            "-u", privilege_user,
            "-r", privilege_role,
            "-t", privilege_type,
            self._shell, "-c", command,
        ]

    def execute(
        self,
        command: str,
        privilege_user: str,
        privilege_role: str,
        privilege_type: str,
        timeout_seconds: float,
    ) -> CommandResult:
        argv = self.build_argv(command, privilege_user, privilege_role, privilege_type)
        start = time.monotonic()

        logger.debug(f"Executing as {privilege_user}:{privilege_role}:{privilege_type}: {command}")

        # Output goes to a file, not a pipe: a daemon started by the hook
        # may hold the descriptor open long after the shell has exited.
        with tempfile.TemporaryFile() as out:
            proc = subprocess.Popen(
                argv,
                stdout=out,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
            try:
                exit_code = proc.wait(timeout=timeout_seconds)
                timed_out = False
            except subprocess.TimeoutExpired:
                _kill_session(proc)
                proc.wait()
                exit_code = TIMEOUT_EXIT_CODE
                timed_out = True

            out.seek(0)
            output = _split_output(out.read())

        if timed_out:
            output.append(f"Command timed out after {timeout_seconds}s")
            logger.warning(f"Command timed out after {timeout_seconds}s: {command}")

        return CommandResult(
            exit_code=exit_code,
            output=output,
            timed_out=timed_out,
            duration_seconds=time.monotonic() - start,
        )

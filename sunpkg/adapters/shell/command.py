"""
Shell command adapter — run a backend tool and capture its output.

Commands are run from an argument vector, never through a shell, so
package names and paths are passed to the tool verbatim. Output is
decoded as UTF-8 with undecodable bytes replaced; package descriptions
on older systems are often Latin-1.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from sunpkg.adapters.base import Adapter, ExecutionContext
from sunpkg.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute a command and capture its output.

    Action params:
        argv (list[str]): Program and arguments.
        combine_stderr (bool): Merge stderr into the captured output
            (default: True). pkginfo reports ``ERROR:`` lines on stderr.
        fail_on_nonzero (bool): Treat a nonzero exit as failure
            (default: True). When False the receipt is ``ok`` and carries
            whatever the tool printed.
        timeout (int): Timeout in seconds (default: 600).
    """

    def __init__(self, probe: str = "sh"):
        self._probe = probe

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which(self._probe) is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.action.params.get("argv")
        if not argv:
            return False, "Missing required param: 'argv'"
        if not isinstance(argv, list):
            return False, "Param 'argv' must be a list"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        argv = [str(a) for a in params.get("argv", [])]
        combine = params.get("combine_stderr", True)
        fail_on_nonzero = params.get("fail_on_nonzero", True)
        timeout = params.get("timeout", 600)
        command = " ".join(argv)

        logger.debug("Executing: %s", command)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if combine else subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"argv": argv, "timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Could not execute {argv[0]}: {e}",
                metadata={"argv": argv},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout or ""
        stderr = "" if combine else (result.stderr or "")
        metadata = {"argv": argv, "return_code": result.returncode}

        if result.returncode == 0 or not fail_on_nonzero:
            if result.returncode != 0:
                logger.debug("%s exited %d (tolerated)", argv[0], result.returncode)
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=output,
                duration_ms=elapsed_ms,
                metadata={**metadata, "stderr": stderr},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=(stderr or output).strip()
            or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={**metadata, "stdout": output},
        )

"""
Backend tool invocations — pkginfo, pkgadd, pkgrm.

The SINGLE PLACE where package services turn an argument vector into
an Action and dispatch it through the adapter registry. Failed
receipts become ``InvocationFailure``; everything above this layer
works with plain text and exceptions.
"""

from __future__ import annotations

import logging

from sunpkg.adapters.registry import AdapterRegistry
from sunpkg.core.config.loader import ToolPaths
from sunpkg.core.errors import InvocationFailure
from sunpkg.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class PackageCommands:
    """Runs the three backend tools through an adapter registry.

    Args:
        registry: Dispatcher with a ``shell`` adapter (or a mock).
        tools: Absolute paths of pkginfo/pkgadd/pkgrm.
        dry_run: Skip pkgadd/pkgrm; pkginfo always runs.
        timeout: Per-command timeout in seconds.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        tools: ToolPaths | None = None,
        dry_run: bool = False,
        timeout: int = 600,
    ):
        self.registry = registry
        self.tools = tools or ToolPaths()
        self.dry_run = dry_run
        self.timeout = timeout

    # ── Read ────────────────────────────────────────────────────

    def pkginfo(
        self,
        args: list[str],
        target: str = "",
        fail_on_nonzero: bool = True,
    ) -> str:
        """Run ``pkginfo <args>`` and return its combined output."""
        action_id = f"pkginfo:{target}" if target else "pkginfo"
        receipt = self._run(
            action_id,
            [self.tools.pkginfo, *args],
            mutating=False,
            fail_on_nonzero=fail_on_nonzero,
        )
        return receipt.output

    # ── Write ───────────────────────────────────────────────────

    def pkgadd(self, args: list[str], name: str) -> Receipt:
        return self._run(f"pkgadd:{name}", [self.tools.pkgadd, *args], mutating=True)

    def pkgrm(self, args: list[str], name: str) -> Receipt:
        return self._run(f"pkgrm:{name}", [self.tools.pkgrm, *args], mutating=True)

    # ── Dispatch ────────────────────────────────────────────────

    def _run(
        self,
        action_id: str,
        argv: list[str],
        mutating: bool,
        fail_on_nonzero: bool = True,
    ) -> Receipt:
        action = Action(
            id=action_id,
            name=" ".join(argv),
            adapter="shell",
            mutating=mutating,
            params={
                "argv": argv,
                "combine_stderr": True,
                "fail_on_nonzero": fail_on_nonzero,
                "timeout": self.timeout,
            },
        )
        logger.debug("Dispatching %s: %s", action_id, action.name)
        receipt = self.registry.execute_action(action, dry_run=self.dry_run)

        if receipt.failed:
            raise InvocationFailure(
                argv,
                receipt.error or "unknown error",
                return_code=receipt.metadata.get("return_code"),
            )
        if receipt.skipped:
            logger.info("%s", receipt.output)
        return receipt

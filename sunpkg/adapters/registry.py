"""
Adapter registry — central dispatch for all tool invocations.

Package services never talk to adapters directly; they hand Actions
to the registry, which resolves the adapter, validates, honours
dry-run for state-changing actions, and returns a Receipt.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from sunpkg.adapters.base import Adapter, ExecutionContext
from sunpkg.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry and dispatcher for adapters.

    Features:
        - Register adapters by name
        - Mock mode: route every action to a single mock adapter
        - Dry-run: validate mutating actions without executing them
    """

    def __init__(self, mock_adapter: Adapter | None = None):
        self._adapters: dict[str, Adapter] = {}
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        """Register an adapter under its name."""
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Availability of the adapters actions would be routed to.

        In mock mode only the mock adapter is reported.
        """
        if self._mock_adapter is not None:
            adapters = {self._mock_adapter.name: self._mock_adapter}
        else:
            adapters = self._adapters
        status = {}
        for name, adapter in adapters.items():
            try:
                available = adapter.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": adapter.__class__.__name__,
            }
        return status

    def execute_action(self, action: Action, dry_run: bool = False) -> Receipt:
        """Execute an action through the appropriate adapter.

        Dry-run only skips actions flagged ``mutating``; read-only
        queries still run so the plan reflects the real state.

        Returns:
            Receipt with execution results (never raises).
        """
        start_time = time.monotonic()

        context = ExecutionContext(
            action=action,
            dry_run=dry_run,
            params=action.params,
        )

        adapter = self._mock_adapter or self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation error: {e}",
            )
        if not is_valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        if dry_run and action.mutating:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute: {' '.join(context.argv)}",
                metadata={"dry_run": True, "argv": context.argv},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt

"""
Mock adapter — test double for backend tool invocations.

Simulates pkginfo/pkgadd/pkgrm without touching the system. Responses
are scripted per action id (``pkginfo:SUNWfoo``); queued responses are
consumed in order before falling back to the fixed response, then to
the default success.
"""

from __future__ import annotations

from collections import defaultdict, deque

from sunpkg.adapters.base import Adapter, ExecutionContext
from sunpkg.core.models.action import Receipt


class MockAdapter(Adapter):
    """Scriptable mock adapter for testing."""

    def __init__(
        self,
        adapter_name: str = "shell",
        available: bool = True,
        default_output: str = "",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._queued: defaultdict[str, deque[Receipt]] = defaultdict(deque)
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def commands(self) -> list[list[str]]:
        """Argument vectors of every executed action, in order."""
        return [ctx.argv for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a fixed response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_output(self, action_id: str, output: str) -> None:
        """Respond to ``action_id`` with a successful receipt carrying ``output``."""
        self.set_response(action_id, Receipt.success(self._name, action_id, output))

    def queue_output(self, action_id: str, *outputs: str) -> None:
        """Queue successive successful outputs for ``action_id``."""
        for output in outputs:
            self._queued[action_id].append(
                Receipt.success(self._name, action_id, output)
            )

    def set_failure(
        self,
        action_id: str,
        error: str = "Mock failure",
        return_code: int = 1,
    ) -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
            metadata={"return_code": return_code},
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        action_id = context.action.id

        if self._queued[action_id]:
            return self._queued[action_id].popleft()
        if action_id in self._responses:
            return self._responses[action_id]

        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._default_output,
            metadata={"mock": True},
        )


"""
Action and Receipt models — the execution contract.

Actions represent requested tool invocations. Receipts represent results.
This is the I/O contract between the package services and adapters:
services send Actions, adapters return Receipts. Never exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A requested invocation of one backend tool.

    The id identifies the tool and target (``pkgadd:SUNWfoo``) so test
    doubles can script responses per step.
    """

    id: str                         # unique action identifier
    name: str = ""                  # human-readable name
    adapter: str                    # which adapter handles this
    mutating: bool = False          # changes system state (skipped on dry-run)
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Result of an adapter execution.

    Receipts capture the full outcome of an action. The adapter
    NEVER raises exceptions — failures are captured here.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(
        cls,
        adapter: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        adapter: str,
        action_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="skipped",
            output=reason,
            **kwargs,
        )

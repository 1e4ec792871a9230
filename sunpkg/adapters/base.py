"""
Adapter base — the protocol contract between package services and tools.

Package services never spawn processes themselves. They describe the
invocation as an Action and hand it to an adapter, which performs the
side effect and returns a Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from sunpkg.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action."""

    action: Action
    dry_run: bool = False
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def argv(self) -> list[str]:
        """The argument vector to run, program first."""
        return [str(a) for a in self.action.params.get("argv", [])]


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

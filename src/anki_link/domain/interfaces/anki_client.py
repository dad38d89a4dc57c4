"""Interface for the AnkiConnect record store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AnkiAction:
    """One AnkiConnect action, usable alone or inside a ``multi`` request."""

    action: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"action": self.action}
        if self.params:
            payload["params"] = self.params
        return payload


@dataclass(frozen=True)
class ActionResult:
    """Per-action result of a ``multi`` request, matched by position."""

    error: str | None
    result: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IAnkiClient(ABC):
    """Interface for communicating with Anki through the AnkiConnect API."""

    @abstractmethod
    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """Invoke a single action and return its result.

        Raises:
            AnkiConnectError: If the transport fails
            AnkiActionError: If the action reports an error
        """

    @abstractmethod
    async def multi(self, actions: list[AnkiAction]) -> list[ActionResult]:
        """Execute actions in one request.

        Each action succeeds or fails on its own; the returned list has one
        entry per action in request order.

        Raises:
            AnkiConnectError: If the transport fails
            ResponseShapeError: If the result count does not match
        """

"""AnkiConnect HTTP API client."""

from types import TracebackType
from typing import Any, Literal, cast

import httpx

from anki_link.anki import actions as anki_actions
from anki_link.domain.interfaces.anki_client import ActionResult, AnkiAction, IAnkiClient
from anki_link.exceptions import AnkiActionError, AnkiConnectError, ResponseShapeError
from anki_link.utils.logging import get_logger

logger = get_logger(__name__)


class AnkiClient(IAnkiClient):
    """Async client for the AnkiConnect HTTP API.

    Requests are never retried here: a failed request aborts the current
    sync run and the next run converges again.
    """

    def __init__(
        self,
        url: str = "http://127.0.0.1:8765",
        version: int = 6,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize client.

        Args:
            url: AnkiConnect URL
            version: AnkiConnect API version sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.version = version
        self._client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=2, max_connections=4),
            transport=transport,
        )
        logger.debug("anki_client_initialized", url=url, version=version)

    async def _post(self, action: str, params: dict[str, Any] | None) -> dict[str, Any]:
        payload: dict[str, Any] = {"action": action, "version": self.version}
        if params is not None:
            payload["params"] = params

        logger.debug("anki_invoke", action=action)

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            msg = f"Connection error to AnkiConnect: {e}"
            raise AnkiConnectError(
                msg,
                suggestion="Check that Anki is running with the AnkiConnect add-on",
                context={"url": self.url, "action": action},
            ) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} from AnkiConnect: {e}"
            raise AnkiConnectError(msg, context={"action": action}) from e
        except httpx.HTTPError as e:
            msg = f"HTTP error calling AnkiConnect: {e}"
            raise AnkiConnectError(msg, context={"action": action}) from e

        try:
            body = response.json()
        except ValueError as e:
            msg = f"Invalid JSON response for {action}: {e}"
            raise ResponseShapeError(msg) from e

        if not isinstance(body, dict) or "result" not in body or "error" not in body:
            msg = f"AnkiConnect response for {action} lacks the result/error envelope"
            raise ResponseShapeError(msg, context={"body": repr(body)[:200]})
        return body

    async def invoke(self, action: str, params: dict[str, Any] | None = None) -> Any:
        """
        Invoke AnkiConnect action.

        Args:
            action: Action name
            params: Action parameters

        Returns:
            Action result

        Raises:
            AnkiConnectError: If the request fails
            AnkiActionError: If the action reports an error
        """
        body = await self._post(action, params)
        if body["error"] is not None:
            raise AnkiActionError(action, str(body["error"]))
        return body["result"]

    async def multi(self, actions: list[AnkiAction]) -> list[ActionResult]:
        """
        Execute several actions in a single ``multi`` request.

        Args:
            actions: Actions to execute, in order

        Returns:
            One ActionResult per action, in request order
        """
        if not actions:
            return []

        # Sub-actions need an explicit version to answer with the result/error envelope
        payloads = [{**action.to_payload(), "version": self.version} for action in actions]
        raw = await self.invoke("multi", {"actions": payloads})
        if not isinstance(raw, list) or len(raw) != len(actions):
            got = len(raw) if isinstance(raw, list) else type(raw).__name__
            msg = f"multi returned {got} results for {len(actions)} actions"
            raise ResponseShapeError(msg)

        results: list[ActionResult] = []
        for action, item in zip(actions, raw):
            if not isinstance(item, dict) or "error" not in item:
                msg = f"multi item for {action.action} lacks the result/error envelope"
                raise ResponseShapeError(msg, context={"item": repr(item)[:200]})
            error = item.get("error")
            results.append(
                ActionResult(
                    error=None if error is None else str(error),
                    result=item.get("result"),
                )
            )

        failed = sum(1 for r in results if not r.ok)
        logger.debug("anki_multi_completed", total=len(actions), failed=failed)
        return results

    async def version_number(self) -> int:
        """Return the AnkiConnect API version reported by the add-on."""
        action = anki_actions.version()
        return cast("int", await self.invoke(action.action, action.params or None))

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
        logger.debug("anki_client_closed", url=self.url)

    async def __aenter__(self) -> "AnkiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        await self.close()
        return False

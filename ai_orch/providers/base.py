import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Sequence

import httpx

from ai_orch.common.errors import RateLimitedError, RequestFailedError
from ai_orch.common.models import Message

logger = logging.getLogger("ai_orch")


class ProviderAdapter(ABC):
    """Capability contract shared by every backend family.

    An adapter owns one backend's transport and auth. `ask` performs exactly
    one network attempt and either returns the complete reply text or raises
    `RateLimitedError` / `RequestFailedError`. Retrying and falling back to
    other models is the router's job, never the adapter's.
    """

    name = "provider"

    def __init__(
        self,
        api_key: str,
        api_base: str,
        timeout: float = 120.0,
        generation: Optional[Dict[str, Any]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        name: Optional[str] = None,
    ):
        if name:
            self.name = name
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.generation = dict(generation or {})
        self._http_client = http_client

    @abstractmethod
    async def ask(self, messages: Sequence[Message], model_id: str) -> str:
        ...

    @asynccontextmanager
    async def _get_http_client(self):
        """Yields the shared client if one was injected, otherwise a
        short-lived client. Does NOT close a shared client.
        """
        if self._http_client is not None:
            yield self._http_client
        else:
            async with httpx.AsyncClient() as client:
                yield client

    async def _post_json(
        self, url: str, payload: Dict[str, Any], headers: Dict[str, str]
    ) -> Dict[str, Any]:
        """Sends one POST and returns the decoded JSON object.

        Transport errors, non-JSON bodies and HTTP errors are converted into
        the adapter failure taxonomy here so concrete adapters only deal
        with the success shape.
        """
        try:
            async with self._get_http_client() as client:
                response = await client.post(
                    url, json=payload, headers=headers, timeout=self.timeout
                )
        except httpx.TimeoutException as e:
            raise RequestFailedError(
                f"{self.name}: request timed out ({e.__class__.__name__})"
            ) from e
        except httpx.HTTPError as e:
            raise RequestFailedError(f"{self.name}: network error: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if self._is_rate_limited(response, data):
            message = self._error_message(data) or "rate limit exceeded"
            raise RateLimitedError(f"{self.name}: {message}")

        if response.is_error:
            message = self._error_message(data) or response.reason_phrase
            raise RequestFailedError(
                f"{self.name}: HTTP {response.status_code}: {message}"
            )

        if not isinstance(data, dict):
            raise RequestFailedError(f"{self.name}: response body is not a JSON object")

        return data

    def _is_rate_limited(self, response: httpx.Response, data: Any) -> bool:
        return response.status_code == 429

    @staticmethod
    def _error_message(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        error = data.get("error")
        if isinstance(error, dict):
            return error.get("message")
        if isinstance(error, str):
            return error
        return None

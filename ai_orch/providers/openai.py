import logging
from typing import Any, Sequence

import httpx

from ai_orch.common.errors import RequestFailedError
from ai_orch.common.models import Message
from ai_orch.providers.base import ProviderAdapter
from ai_orch.providers.utils.normalization import MessageNormalizer

logger = logging.getLogger("ai_orch")

RATE_LIMIT_ERROR_CODES = {"rate_limit_exceeded"}


class OpenAICompatAdapter(ProviderAdapter):
    """Adapter for OpenAI-compatible chat completion APIs (Groq and friends).

    The common message shape is already OpenAI's, so translation is limited
    to dropping empty turns and merging consecutive same-role turns.
    """

    name = "openai-compat"

    async def ask(self, messages: Sequence[Message], model_id: str) -> str:
        payload = {
            "model": model_id,
            "messages": MessageNormalizer.normalize_for_openai(messages),
            "stream": False,
        }
        payload.update(self.generation)

        headers = {"Authorization": f"Bearer {self.api_key}"}
        api_url = f"{self.api_base}/chat/completions"

        logger.debug(f"[{self.name}] Sending {len(payload['messages'])} messages to {model_id}")
        data = await self._post_json(api_url, payload, headers)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise RequestFailedError(
                f"{self.name}: response is missing choices[0].message.content"
            )

        if not isinstance(content, str):
            raise RequestFailedError(f"{self.name}: response content is not text")
        return content

    def _is_rate_limited(self, response: httpx.Response, data: Any) -> bool:
        if super()._is_rate_limited(response, data):
            return True
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return data["error"].get("code") in RATE_LIMIT_ERROR_CODES
        return False

import logging
from typing import Any, Dict, Sequence

import httpx

from ai_orch.common.errors import RequestFailedError
from ai_orch.common.models import Message
from ai_orch.providers.base import ProviderAdapter
from ai_orch.providers.utils.normalization import MessageNormalizer

logger = logging.getLogger("ai_orch")

RATE_LIMIT_STATUSES = {"RESOURCE_EXHAUSTED"}

# Gemini generationConfig uses camelCase keys
GENERATION_KEY_MAP = {
    "temperature": "temperature",
    "top_p": "topP",
    "max_output_tokens": "maxOutputTokens",
}


class GoogleAdapter(ProviderAdapter):
    """Adapter for the Gemini `generateContent` REST API."""

    name = "google"

    def _generation_config(self) -> Dict[str, Any]:
        return {
            GENERATION_KEY_MAP.get(key, key): value
            for key, value in self.generation.items()
        }

    async def ask(self, messages: Sequence[Message], model_id: str) -> str:
        system_instruction, contents = MessageNormalizer.normalize_for_gemini(messages)

        payload: Dict[str, Any] = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        generation_config = self._generation_config()
        if generation_config:
            payload["generationConfig"] = generation_config

        headers = {"x-goog-api-key": self.api_key}
        api_url = f"{self.api_base}/models/{model_id}:generateContent"

        logger.debug(f"[{self.name}] Sending {len(contents)} turns to {model_id}")
        data = await self._post_json(api_url, payload, headers)

        candidates = data.get("candidates")
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise RequestFailedError(f"{self.name}: prompt blocked ({block_reason})")
            raise RequestFailedError(f"{self.name}: response has no candidates")

        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (candidate.get("content") or {}).get("parts") or []

        # Thought parts carry reasoning summaries, not the answer
        text = "".join(
            part.get("text", "")
            for part in parts
            if isinstance(part, dict) and not part.get("thought", False)
        )

        if not text:
            finish_reason = candidate.get("finishReason", "unknown")
            raise RequestFailedError(
                f"{self.name}: candidate has no text (finishReason={finish_reason})"
            )
        return text

    def _is_rate_limited(self, response: httpx.Response, data: Any) -> bool:
        if super()._is_rate_limited(response, data):
            return True
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return data["error"].get("status") in RATE_LIMIT_STATUSES
        return False

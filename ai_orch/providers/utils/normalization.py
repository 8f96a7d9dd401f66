import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ai_orch.common.models import Message

logger = logging.getLogger("ai_orch")

GEMINI_ROLE_MAP = {"user": "user", "assistant": "model"}


class MessageNormalizer:
    """
    Translates the common Message history into provider request shapes.
    """

    @staticmethod
    def _merge_contents(content_a: str, content_b: str) -> str:
        return f"{content_a}\n{content_b}"

    @staticmethod
    def _clean(messages: Sequence[Message]) -> List[Message]:
        """Drops messages whose content is empty or whitespace only."""
        return [m for m in messages if m.content and m.content.strip()]

    @staticmethod
    def normalize_for_openai(messages: Sequence[Message]) -> List[Dict[str, str]]:
        """
        Normalizes messages for OpenAI-compatible providers.

        Rules:
        1. Remove empty messages.
        2. Merge consecutive messages from the same role.
        """
        merged: List[Dict[str, str]] = []

        for msg in MessageNormalizer._clean(messages):
            if merged and merged[-1]["role"] == msg.role:
                merged[-1]["content"] = MessageNormalizer._merge_contents(
                    merged[-1]["content"], msg.content
                )
            else:
                merged.append({"role": msg.role, "content": msg.content})

        return merged

    @staticmethod
    def normalize_for_gemini(
        messages: Sequence[Message],
    ) -> Tuple[Optional[str], List[Dict]]:
        """
        Normalizes messages for Google Gemini.

        Returns `(system_instruction, contents)`:
        1. Empty messages are removed.
        2. System messages are lifted out of the history and joined into a
           single system instruction (Gemini `contents` only accepts
           'user' and 'model').
        3. 'assistant' becomes 'model'; consecutive same-role turns merge.
        4. If the history starts with 'model', a placeholder user turn is
           injected so the conversation alternates from a user turn.
        """
        cleaned = MessageNormalizer._clean(messages)

        system_parts = [m.content for m in cleaned if m.role == "system"]
        system_instruction = "\n\n".join(system_parts) if system_parts else None

        turns: List[Dict[str, str]] = []
        for msg in cleaned:
            if msg.role == "system":
                continue
            role = GEMINI_ROLE_MAP[msg.role]
            if turns and turns[-1]["role"] == role:
                turns[-1]["text"] = MessageNormalizer._merge_contents(
                    turns[-1]["text"], msg.content
                )
            else:
                turns.append({"role": role, "text": msg.content})

        if turns and turns[0]["role"] == "model":
            logger.info(
                "Normalization: conversation starts with an assistant turn. Injecting placeholder user turn."
            )
            turns.insert(0, {"role": "user", "text": "..."})

        contents = [
            {"role": turn["role"], "parts": [{"text": turn["text"]}]} for turn in turns
        ]
        return system_instruction, contents

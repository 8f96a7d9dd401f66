import json
import logging
import os
import random
import string
import time
from typing import List, Optional

import aiofiles
from pydantic import BaseModel, Field, ValidationError

from ai_orch.common.errors import SessionNotFoundError
from ai_orch.common.models import Message, SessionSummary

logger = logging.getLogger("ai_orch")

BASE36_ALPHABET = string.digits + string.ascii_lowercase
UNTITLED = "Untitled"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


class SessionData(BaseModel):
    id: str
    title: str
    history: List[Message] = Field(default_factory=list)


class SessionManager:
    """Stores conversations as one JSON file per session and builds the
    bounded context window handed to the router.
    """

    def __init__(
        self,
        sessions_dir: str,
        max_context_messages: int = 15,
        system_prompt: str = "You are an expert programmer.",
        default_title: str = "New conversation",
    ):
        self.sessions_dir = sessions_dir
        self.max_context_messages = max_context_messages
        self.system_prompt = Message(role="system", content=system_prompt)
        self.default_title = default_title
        os.makedirs(self.sessions_dir, exist_ok=True)

    @classmethod
    def from_config(cls, config: dict) -> "SessionManager":
        settings = config.get("session_settings", {})
        return cls(
            sessions_dir=settings["sessions_dir"],
            max_context_messages=settings.get("max_context_messages", 15),
            system_prompt=settings.get("system_prompt", "You are an expert programmer."),
            default_title=settings.get("default_title", "New conversation"),
        )

    @staticmethod
    def generate_id() -> str:
        """Millisecond timestamp in base 36 plus three random base-36 characters."""
        suffix = "".join(random.choices(BASE36_ALPHABET, k=3))
        return f"{_to_base36(int(time.time() * 1000))}{suffix}"

    @staticmethod
    def validate_id(session_id: str) -> str:
        """Raises ValueError unless `session_id` is a bare file name."""
        # Session ids are used as file names; keep them inside sessions_dir
        safe_id = os.path.basename(session_id or "")
        if not safe_id or safe_id != session_id or safe_id in (".", ".."):
            raise ValueError(f"Invalid session id: {session_id!r}")
        return safe_id

    def _get_path(self, session_id: str) -> str:
        return os.path.join(self.sessions_dir, f"{self.validate_id(session_id)}.json")

    def default_history(self) -> List[Message]:
        return [self.system_prompt]

    async def _load_full_session(self, session_id: str) -> Optional[SessionData]:
        path = self._get_path(session_id)
        if not os.path.exists(path):
            return None
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                content = await f.read()
            return SessionData.model_validate_json(content)
        except (OSError, ValidationError) as e:
            logger.warning(f"Could not read session {session_id}: {e}")
            return None

    async def _write(self, data: SessionData):
        async with aiofiles.open(self._get_path(data.id), mode="w", encoding="utf-8") as f:
            await f.write(data.model_dump_json(indent=2))

    async def save(self, session_id: str, history: List[Message], title: Optional[str] = None):
        """Creates or updates a session, keeping the stored title unless a new one is given."""
        existing = await self._load_full_session(session_id)
        data = SessionData(
            id=session_id,
            title=title or (existing.title if existing else None) or self.default_title,
            history=list(history),
        )
        await self._write(data)
        logger.debug(f"Session {session_id} saved ({len(data.history)} messages).")

    async def load_history(self, session_id: str) -> List[Message]:
        session = await self._load_full_session(session_id)
        return list(session.history) if session else self.default_history()

    async def rename(self, session_id: str, new_title: str):
        existing = await self._load_full_session(session_id)
        if existing is None:
            raise SessionNotFoundError(f"No session found with id: {session_id}")

        existing.title = new_title.strip() or UNTITLED
        await self._write(existing)
        logger.info(f"Session {session_id} renamed to '{existing.title}'.")

    async def list_sessions(self) -> List[SessionSummary]:
        """Sessions ordered by most recently modified first."""
        if not os.path.isdir(self.sessions_dir):
            return []

        entries = [
            entry
            for entry in os.scandir(self.sessions_dir)
            if entry.is_file() and entry.name.endswith(".json")
        ]
        entries.sort(key=lambda entry: entry.stat().st_mtime, reverse=True)

        sessions = []
        for entry in entries:
            session_id = entry.name[: -len(".json")]
            title = session_id
            try:
                async with aiofiles.open(entry.path, mode="r", encoding="utf-8") as f:
                    data = json.loads(await f.read())
                if isinstance(data, dict) and data.get("title"):
                    title = data["title"]
            except (OSError, ValueError):
                pass
            sessions.append(SessionSummary(id=session_id, title=title))
        return sessions

    def get_context_for_api(self, history: List[Message]) -> List[Message]:
        """Sliding window: the last `max_context_messages` messages plus a
        pinned leading system message.

        The pinned message is the conversation's own first message when it is
        a system message, otherwise the configured system prompt.
        """
        if len(history) <= self.max_context_messages:
            return list(history)

        pinned = history[0] if history[0].role == "system" else self.system_prompt
        tail = history[-self.max_context_messages:] if self.max_context_messages > 0 else []
        return [pinned] + list(tail)

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Mapping, Optional

from ai_orch.common.models import ChatReply, Message
from ai_orch.engine.commands import CommandService
from ai_orch.engine.prompt_engine import PromptEngine
from ai_orch.engine.registry import ModelRegistry
from ai_orch.engine.router import Router
from ai_orch.engine.session import SessionManager
from ai_orch.providers.base import ProviderAdapter

logger = logging.getLogger("ai_orch")


@dataclass
class _SessionState:
    router: Router
    lock: Optional[asyncio.Lock] = None


class ChatService:
    """Per-session chat flow: commands, prompt processing, windowing, routing
    and persistence.

    Each session gets its own Router (and therefore its own sticky cursor);
    all Routers share the registry and the provider pool. Turns within one
    session are serialized by a per-session lock.

    At most `max_active_sessions` sessions keep a Router in memory. The least
    recently used idle session is dropped first and starts again from the
    top-priority model on its next turn.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        providers: Mapping[str, ProviderAdapter],
        session_manager: SessionManager,
        prompt_engine: PromptEngine,
        max_active_sessions: int = 256,
    ):
        self.registry = registry
        self.providers = providers
        self.session_manager = session_manager
        self.prompt_engine = prompt_engine
        self.max_active_sessions = max_active_sessions
        self.command_service = CommandService(session_manager)
        self._sessions: "OrderedDict[str, _SessionState]" = OrderedDict()

    def active_sessions(self) -> int:
        return len(self._sessions)

    def peek_router(self, session_id: str) -> Router:
        """Returns the session's Router without registering one.

        Sessions with no Router in memory get a fresh, unstored Router
        positioned at the top-priority model.

        Raises:
            ValueError: the session id is not a valid file name.
        """
        self.session_manager.validate_id(session_id)
        state = self._sessions.get(session_id)
        if state is None:
            return Router(self.registry, self.providers)
        return state.router

    def get_router(self, session_id: str) -> Router:
        """Returns the session's Router, registering one if needed.

        Raises:
            ValueError: the session id is not a valid file name.
        """
        return self._get_state(session_id).router

    def _get_state(self, session_id: str) -> _SessionState:
        self.session_manager.validate_id(session_id)
        state = self._sessions.get(session_id)
        if state is not None:
            self._sessions.move_to_end(session_id)
            return state

        state = _SessionState(router=Router(self.registry, self.providers))
        self._sessions[session_id] = state
        self._evict()
        return state

    def _evict(self):
        while len(self._sessions) > self.max_active_sessions:
            # Oldest first; a session with a turn in flight is never dropped
            idle = next(
                (sid for sid, state in self._sessions.items() if not (state.lock and state.lock.locked())),
                None,
            )
            if idle is None:
                return
            del self._sessions[idle]
            logger.debug(f"Session {idle} dropped from the active router map.")

    async def handle_input(self, session_id: str, text: str) -> ChatReply:
        """Runs one user turn.

        Slash commands are executed and never reach the router. Any other
        input becomes a user message; the history (user and assistant
        messages) is only extended and saved when the router succeeds.

        Raises:
            ValueError: the input is blank or the session id is invalid.
            PoolExhaustedError: no candidate model answered. The stored
                history is left exactly as it was.
        """
        if not text or not text.strip():
            raise ValueError("Input must not be empty.")

        state = self._get_state(session_id)
        if state.lock is None:
            state.lock = asyncio.Lock()
        async with state.lock:
            router = state.router
            history = await self.session_manager.load_history(session_id)

            result = await self.command_service.execute(text, session_id, history, router)
            if result.handled:
                return ChatReply(
                    session_id=session_id,
                    command=True,
                    lines=result.lines,
                    exit=result.exit,
                )

            prompt = await self.prompt_engine.process_input(text.strip())
            turn = history + [Message(role="user", content=prompt)]

            content = await router.ask(self.session_manager.get_context_for_api(turn))

            turn.append(Message(role="assistant", content=content))
            await self.session_manager.save(session_id, turn)

            return ChatReply(
                session_id=session_id,
                content=content,
                model=router.get_current_model(),
            )

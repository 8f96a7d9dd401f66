import logging
from dataclasses import dataclass, field
from typing import List

from ai_orch.common.errors import SessionNotFoundError
from ai_orch.common.models import Message
from ai_orch.engine.router import Router
from ai_orch.engine.session import SessionManager

logger = logging.getLogger("ai_orch")

HELP_LINES = [
    "Available commands:",
    "  /models          - List the configured models",
    "  /use [n]         - Switch to the model at index n",
    "  /rename [title]  - Rename the current session",
    "  /clear           - Clear the current session history",
    "  /help            - Show this help",
    "  /exit            - Close the session",
]


@dataclass
class CommandResult:
    handled: bool
    lines: List[str] = field(default_factory=list)
    exit: bool = False


class CommandService:
    """Slash-command layer over the router and the session store.

    Commands only produce text lines; presentation is up to the caller.
    Command input is never added to the conversation history.
    """

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def execute(
        self, text: str, session_id: str, history: List[Message], router: Router
    ) -> CommandResult:
        trimmed = text.strip()
        if not trimmed.startswith("/"):
            return CommandResult(handled=False)

        command, _, args = trimmed.partition(" ")
        command = command.lower()
        args = args.strip()

        if command == "/models":
            return self._list_models(router)
        if command == "/use":
            return self._use_model(router, args)
        if command == "/clear":
            return await self._clear(session_id)
        if command == "/rename":
            return await self._rename(session_id, args)
        if command == "/help":
            return CommandResult(handled=True, lines=list(HELP_LINES))
        if command in ("/exit", "/quit"):
            return CommandResult(handled=True, lines=["Goodbye!"], exit=True)

        return CommandResult(handled=True, lines=[f"Unknown command: {command}. Type /help for the list."])

    def _list_models(self, router: Router) -> CommandResult:
        current = router.get_current_model_index()
        lines = ["Available models:"]
        for i, model in enumerate(router.get_models()):
            marker = "  → " if i == current else "    "
            lines.append(f"{marker}[{i}] {model.label} ({model.provider})")
        return CommandResult(handled=True, lines=lines)

    def _use_model(self, router: Router, args: str) -> CommandResult:
        try:
            index = int(args)
        except ValueError:
            return CommandResult(handled=True, lines=["Usage: /use [number]. Example: /use 0"])

        if not router.set_model(index):
            return CommandResult(handled=True, lines=["Invalid model index."])
        return CommandResult(handled=True, lines=[f"Switched to: {router.get_current_model().label}"])

    async def _clear(self, session_id: str) -> CommandResult:
        await self.session_manager.save(session_id, self.session_manager.default_history())
        return CommandResult(handled=True, lines=["Conversation history cleared."])

    async def _rename(self, session_id: str, args: str) -> CommandResult:
        if not args:
            return CommandResult(handled=True, lines=["A title is required: /rename My New Session"])
        try:
            await self.session_manager.rename(session_id, args)
        except SessionNotFoundError as e:
            return CommandResult(handled=True, lines=[f"Rename failed: {e}"])
        return CommandResult(handled=True, lines=[f'Session renamed to: "{args}"'])

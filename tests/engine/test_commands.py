import pytest

from ai_orch.engine.commands import HELP_LINES, CommandService
from ai_orch.engine.router import Router
from ai_orch.engine.session import SessionManager


@pytest.fixture
def session_manager(tmp_path):
    return SessionManager(str(tmp_path))


@pytest.fixture
def service(session_manager):
    return CommandService(session_manager)


@pytest.fixture
def router(registry_of, stub_provider_cls):
    return Router(registry_of(3), {"stub": stub_provider_cls()})


async def _run(service, router, text, session_id="s1"):
    return await service.execute(text, session_id, [], router)


@pytest.mark.asyncio
async def test_plain_text_is_not_a_command(service, router):
    result = await _run(service, router, "hello /models")
    assert result.handled is False
    assert result.lines == []


@pytest.mark.asyncio
async def test_models_marks_current(service, router):
    router.set_model(1)
    result = await _run(service, router, "/models")

    assert result.handled
    assert result.lines == [
        "Available models:",
        "    [0] Model 0 (stub)",
        "  → [1] Model 1 (stub)",
        "    [2] Model 2 (stub)",
    ]


@pytest.mark.asyncio
async def test_use_switches_model(service, router):
    result = await _run(service, router, "/use 2")

    assert result.lines == ["Switched to: Model 2"]
    assert router.get_current_model_index() == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("text, expected", [
    ("/use", "Usage: /use [number]. Example: /use 0"),
    ("/use two", "Usage: /use [number]. Example: /use 0"),
    ("/use 7", "Invalid model index."),
    ("/use -1", "Invalid model index."),
])
async def test_use_rejects_bad_input(service, router, text, expected):
    result = await _run(service, router, text)

    assert result.lines == [expected]
    assert router.get_current_model_index() == 0


@pytest.mark.asyncio
async def test_clear_resets_history(service, router, session_manager, conversation):
    await session_manager.save("s1", conversation + conversation[1:])

    result = await _run(service, router, "/clear")
    assert result.lines == ["Conversation history cleared."]

    assert await session_manager.load_history("s1") == session_manager.default_history()


@pytest.mark.asyncio
async def test_rename(service, router, session_manager, conversation):
    await session_manager.save("s1", conversation)

    result = await _run(service, router, "/rename Async refactor")

    assert result.lines == ['Session renamed to: "Async refactor"']
    assert (await session_manager.list_sessions())[0].title == "Async refactor"


@pytest.mark.asyncio
async def test_rename_requires_title(service, router):
    result = await _run(service, router, "/rename   ")
    assert result.lines == ["A title is required: /rename My New Session"]


@pytest.mark.asyncio
async def test_rename_unsaved_session_reports_failure(service, router):
    result = await _run(service, router, "/rename Something")
    assert result.handled
    assert result.lines[0].startswith("Rename failed:")


@pytest.mark.asyncio
async def test_help(service, router):
    result = await _run(service, router, "/HELP")
    assert result.lines == HELP_LINES


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["/exit", "/quit"])
async def test_exit(service, router, text):
    result = await _run(service, router, text)
    assert result.exit is True
    assert result.lines == ["Goodbye!"]


@pytest.mark.asyncio
async def test_unknown_command(service, router):
    result = await _run(service, router, "/copy")
    assert result.handled
    assert result.lines == ["Unknown command: /copy. Type /help for the list."]

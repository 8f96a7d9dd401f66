import pytest

from ai_orch.engine.prompt_engine import PromptEngine


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("print('hi')", encoding="utf-8")
    (tmp_path / "notes.md").write_text("# Notes", encoding="utf-8")
    return tmp_path


@pytest.mark.asyncio
async def test_plain_text_is_unchanged(workspace):
    engine = PromptEngine(str(workspace))
    assert await engine.process_input("explain decorators") == "explain decorators"


@pytest.mark.asyncio
async def test_inlines_mentioned_file(workspace):
    engine = PromptEngine(str(workspace))

    result = await engine.process_input("review @src/app.py please")

    assert result.startswith("review [File: src/app.py] please\n\n--- File context ---\n")
    assert "\nFile: src/app.py\n```\nprint('hi')\n```\n" in result


@pytest.mark.asyncio
async def test_multiple_and_repeated_mentions(workspace):
    engine = PromptEngine(str(workspace))

    result = await engine.process_input("compare @src/app.py with @notes.md and @src/app.py")

    assert result.count("[File: src/app.py]") == 2
    assert result.count("File: src/app.py\n```") == 1
    assert "# Notes" in result


@pytest.mark.asyncio
async def test_missing_file_is_left_as_is(workspace):
    engine = PromptEngine(str(workspace))
    text = "look at @missing.py"
    assert await engine.process_input(text) == text


@pytest.mark.asyncio
async def test_file_outside_base_dir_is_ignored(workspace):
    engine = PromptEngine(str(workspace / "src"))

    text = "read @../notes.md"
    assert await engine.process_input(text) == text


@pytest.mark.asyncio
async def test_disabled_engine(workspace):
    engine = PromptEngine(str(workspace), enabled=False)
    assert await engine.process_input("@notes.md") == "@notes.md"


def test_from_config(workspace):
    engine = PromptEngine.from_config({
        "prompt_settings": {"attachments_base_dir": str(workspace), "enable_file_attachments": False}
    })
    assert engine.base_dir == str(workspace.resolve())
    assert engine.enabled is False


@pytest.mark.asyncio
async def test_longer_mention_sharing_a_prefix_is_untouched(workspace):
    engine = PromptEngine(str(workspace))

    result = await engine.process_input("diff @notes.md against @notes.md.bak")

    assert result.startswith("diff [File: notes.md] against @notes.md.bak\n\n")

import logging
import os
import re

import aiofiles

logger = logging.getLogger("ai_orch")

# @path/to/file.ext
FILE_MENTION_REGEX = re.compile(r"@([\w./\-]+\.\w+)")


class PromptEngine:
    """Inlines the text of files mentioned with '@' into the user prompt."""

    def __init__(self, base_dir: str, enabled: bool = True):
        self.base_dir = os.path.realpath(base_dir)
        self.enabled = enabled

    @classmethod
    def from_config(cls, config: dict) -> "PromptEngine":
        settings = config.get("prompt_settings", {})
        return cls(
            base_dir=settings.get("attachments_base_dir") or os.getcwd(),
            enabled=settings.get("enable_file_attachments", True),
        )

    def _resolve(self, file_name: str):
        path = os.path.realpath(os.path.join(self.base_dir, file_name))
        if os.path.commonpath([self.base_dir, path]) != self.base_dir:
            return None
        return path

    async def process_input(self, text: str) -> str:
        """Replaces each readable `@file` mention with `[File: name]` and
        appends the file contents in fenced blocks. Input with no readable
        mentions is returned unchanged.
        """
        if not self.enabled:
            return text

        mentions = list(dict.fromkeys(FILE_MENTION_REGEX.findall(text)))
        if not mentions:
            return text

        attached = {}

        for file_name in mentions:
            path = self._resolve(file_name)
            if path is None or not os.path.isfile(path):
                logger.debug(f"Mentioned file not found or outside base dir: {file_name}")
                continue
            try:
                async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                    content = await f.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read @{file_name}: {e}")
                continue

            attached[file_name] = f"\nFile: {file_name}\n```\n{content}\n```\n"
            logger.info(f"Inlined contents of {file_name}.")

        if not attached:
            return text

        def _replace(match):
            file_name = match.group(1)
            return f"[File: {file_name}]" if file_name in attached else match.group(0)

        processed = FILE_MENTION_REGEX.sub(_replace, text)
        return f"{processed}\n\n--- File context ---\n{''.join(attached.values())}"

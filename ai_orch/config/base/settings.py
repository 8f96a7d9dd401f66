"""Common configuration settings."""

import os

DEFAULT_SYSTEM_PROMPT = "You are an expert programmer."

SESSION_SETTINGS = {
    "sessions_dir": os.getenv(
        "AI_ORCH_SESSIONS_DIR",
        os.path.join(os.path.expanduser("~"), ".ai-orch", ".sessions"),
    ),
    "max_context_messages": 15,
    "system_prompt": DEFAULT_SYSTEM_PROMPT,
    "default_title": "New conversation",
    # Sessions whose Router (sticky cursor) stays in memory
    "max_active_sessions": 256,
}

PROMPT_SETTINGS = {
    "enable_file_attachments": True,
    # Mentions like @src/main.py resolve relative to this directory
    "attachments_base_dir": os.getenv("AI_ORCH_ATTACHMENTS_DIR", os.getcwd()),
}

HTTP_CLIENT_SETTINGS = {
    "timeout": 60.0,
}

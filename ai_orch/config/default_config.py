import copy

from ai_orch.config.base.models import AVAILABLE_MODELS
from ai_orch.config.base.providers import PROVIDER_SETTINGS
from ai_orch.config.base.settings import (
    SESSION_SETTINGS,
    PROMPT_SETTINGS,
    HTTP_CLIENT_SETTINGS,
)

"""Default configuration for the application.

Assembles the modular definitions from `ai_orch.config.base` into the single
CONFIG dictionary consumed by the registry, the provider factory and the
session layer.
"""

CONFIG = {
    "model_list": copy.deepcopy(AVAILABLE_MODELS),
    "provider_settings": copy.deepcopy(PROVIDER_SETTINGS),
    "session_settings": copy.deepcopy(SESSION_SETTINGS),
    "prompt_settings": copy.deepcopy(PROMPT_SETTINGS),
    "http_client_settings": copy.deepcopy(HTTP_CLIENT_SETTINGS),
}

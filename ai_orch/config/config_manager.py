import copy
import json
import logging
import os
from typing import Any, Dict, Optional

from .default_config import CONFIG

logger = logging.getLogger("ai_orch")

CONFIG_OVERRIDES_ENV = "AI_ORCH_CONFIG"


def deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges two dictionaries.
    Overrides merge into base; lists and scalars are replaced wholesale.
    """
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class ConfigManager:
    """
    Holds the active configuration: the Python defaults from
    `default_config`, optionally overlaid with a JSON overrides file.
    """

    def __init__(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        overrides_path: Optional[str] = None,
    ):
        self._global_config = copy.deepcopy(CONFIG)

        path = overrides_path or os.getenv(CONFIG_OVERRIDES_ENV)
        if path:
            self._global_config = deep_merge(
                self._global_config, self._load_overrides_file(path)
            )
            logger.info(f"Applied configuration overrides from {path}.")

        if overrides:
            self._global_config = deep_merge(self._global_config, overrides)

        logger.info("ConfigManager initialized.")

    @staticmethod
    def _load_overrides_file(path: str) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration overrides in {path} must be a JSON object.")
        return data

    def get_active_config(self) -> Dict[str, Any]:
        return self._global_config

    def update_global_config(self, new_config: Dict[str, Any]):
        """
        Replaces the active configuration. Components built at startup
        (registry, provider pool) keep the values they were built with.
        """
        self._global_config = new_config
        logger.info("Global configuration updated via ConfigManager.")

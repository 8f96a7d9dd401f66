import logging
import os
from typing import Dict, Iterable, Mapping, Optional, Type

import httpx

from ai_orch.common.logging_config import ApiKeyFilter
from ai_orch.providers.base import ProviderAdapter
from ai_orch.providers.google import GoogleAdapter
from ai_orch.providers.openai import OpenAICompatAdapter

logger = logging.getLogger("ai_orch")

# Adapter kind (as named in provider settings) -> implementation
PROVIDER_ADAPTERS: Dict[str, Type[ProviderAdapter]] = {
    "openai_compat": OpenAICompatAdapter,
    "google": GoogleAdapter,
}


def build_provider_pool(
    families: Iterable[str],
    provider_settings: Mapping[str, dict],
    environ: Optional[Mapping[str, str]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, ProviderAdapter]:
    """Builds the provider pool for the families the model catalog references.

    A family is left out of the pool, with an INFO line and no error, when
    it has no settings, names an unknown adapter kind, or its credential
    variable is unset. The router treats every model of an absent family as
    unavailable, so a missing key degrades capability instead of failing
    startup.

    Args:
        families: Provider families referenced by the model registry.
        provider_settings: The `provider_settings` section of the config.
        environ: Credential source; defaults to `os.environ`.
        http_client: Optional shared client handed to every adapter.

    Returns:
        Mapping of provider family to adapter instance.
    """
    environ = os.environ if environ is None else environ
    pool: Dict[str, ProviderAdapter] = {}

    for family in families:
        if family in pool:
            continue

        settings = provider_settings.get(family)
        if not settings:
            logger.info(f"-> [{family.upper()}] No provider settings. Models of this family will be skipped.")
            continue

        adapter_cls = PROVIDER_ADAPTERS.get(settings.get("adapter", ""))
        if adapter_cls is None:
            logger.info(
                f"-> [{family.upper()}] Unknown adapter kind '{settings.get('adapter')}'. Models of this family will be skipped."
            )
            continue

        key_env = settings.get("api_key_env", "")
        api_key = (environ.get(key_env) or "").strip() if key_env else ""
        if not api_key:
            logger.info(f"-> [{family.upper()}] {key_env or 'credential'} not set. Models of this family will be skipped.")
            continue

        ApiKeyFilter.add_sensitive_keys([api_key])

        pool[family] = adapter_cls(
            api_key=api_key,
            api_base=settings["api_base"],
            timeout=settings.get("timeout", 120.0),
            generation=settings.get("generation"),
            http_client=http_client,
            name=family,
        )
        logger.info(f"-> [{family.upper()}] Provider ready ({adapter_cls.__name__}).")

    return pool

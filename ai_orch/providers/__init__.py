from .base import ProviderAdapter
from .openai import OpenAICompatAdapter
from .google import GoogleAdapter
from .factory import PROVIDER_ADAPTERS, build_provider_pool

__all__ = [
    "ProviderAdapter",
    "OpenAICompatAdapter",
    "GoogleAdapter",
    "PROVIDER_ADAPTERS",
    "build_provider_pool",
]

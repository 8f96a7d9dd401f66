from .registry import ModelRegistry
from .router import Router

__all__ = ["ModelRegistry", "Router"]

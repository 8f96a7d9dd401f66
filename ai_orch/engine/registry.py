import logging
from typing import Any, Dict, Iterable, List, Tuple

from ai_orch.common.models import ModelDescriptor

logger = logging.getLogger("ai_orch")


class ModelRegistry:
    """Static catalog of candidate models, sorted once by priority.

    The sort is stable and keyed on `priority` alone, so models sharing a
    priority keep their declaration order. Duplicated ids are kept as
    separate candidates.
    """

    def __init__(self, models: Iterable[ModelDescriptor]):
        self._declared: Tuple[ModelDescriptor, ...] = tuple(models)
        self._sorted: Tuple[ModelDescriptor, ...] = tuple(
            sorted(self._declared, key=lambda m: m.priority)
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ModelRegistry":
        models = [ModelDescriptor(**entry) for entry in config.get("model_list", [])]
        registry = cls(models)
        logger.info(f"Model registry loaded with {registry.count()} candidates.")
        return registry

    def sorted_candidates(self) -> Tuple[ModelDescriptor, ...]:
        return self._sorted

    def candidate_at(self, index: int) -> ModelDescriptor:
        # Bounds are the caller's responsibility
        return self._sorted[index]

    def count(self) -> int:
        return len(self._sorted)

    def __len__(self) -> int:
        return len(self._sorted)

    def providers(self) -> List[str]:
        """Provider families referenced by the catalog, in sorted-candidate order."""
        return list(dict.fromkeys(m.provider for m in self._sorted))

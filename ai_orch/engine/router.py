import asyncio
import logging
from typing import List, Mapping, Optional, Sequence, Tuple

from opentelemetry import trace

from ai_orch.common.errors import (
    EmptyPoolError,
    FailedAttempt,
    PoolExhaustedError,
    ProviderError,
    RateLimitedError,
)
from ai_orch.common.models import Message, ModelDescriptor
from ai_orch.engine.registry import ModelRegistry
from ai_orch.providers.base import ProviderAdapter

logger = logging.getLogger("ai_orch")
tracer = trace.get_tracer(__name__)

UNAVAILABLE = "unavailable"


class Router:
    """Failover router over the sorted candidate list with a sticky cursor.

    `current_index` points at the model that last answered successfully (0
    until one has). Each `ask` searches every candidate exactly once,
    starting at the cursor and wrapping around the end of the list. Only a
    success moves the cursor; failures of any kind leave it untouched.

    One Router serves one conversation. `ask` runs under the instance lock,
    so overlapping calls on the same Router are serialized rather than
    interleaved. The registry and provider pool are read-only and may be
    shared between Routers.
    """

    def __init__(self, registry: ModelRegistry, providers: Mapping[str, ProviderAdapter]):
        self.registry = registry
        self.providers = providers
        self._current_index = 0
        # Created on first ask so it belongs to the loop that runs it
        self._lock: Optional[asyncio.Lock] = None

    # --- Command layer pass-throughs ---

    def get_current_model(self) -> ModelDescriptor:
        if self.registry.count() == 0:
            raise EmptyPoolError()
        return self.registry.candidate_at(self._current_index)

    def get_current_model_index(self) -> int:
        return self._current_index

    def get_models(self) -> Tuple[ModelDescriptor, ...]:
        return self.registry.sorted_candidates()

    def set_model(self, index: int) -> bool:
        """Moves the cursor to `index` if it is in range. No effect otherwise."""
        if 0 <= index < self.registry.count():
            self._current_index = index
            logger.info(f"Model manually set to [{index}] {self.registry.candidate_at(index).label}.")
            return True
        return False

    # --- Failover search ---

    async def ask(self, messages: Sequence[Message]) -> str:
        """Returns the first successful completion, trying candidates in
        cursor order.

        Raises:
            EmptyPoolError: the registry has no candidates.
            PoolExhaustedError: every candidate failed; `attempts` holds the
                per-candidate failure trail in search order.
        """
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            return await self._search(tuple(messages))

    async def _search(self, messages: Tuple[Message, ...]) -> str:
        total = self.registry.count()
        if total == 0:
            logger.error("Router asked to complete with an empty model registry.")
            raise EmptyPoolError()

        start = self._current_index
        attempts: List[FailedAttempt] = []

        with tracer.start_as_current_span("router.ask") as span:
            span.set_attribute("router.candidates", total)
            span.set_attribute("router.start_index", start)
            span.set_attribute("router.messages", len(messages))

            for offset in range(total):
                target = (start + offset) % total
                model = self.registry.candidate_at(target)

                adapter = self.providers.get(model.provider)
                if adapter is None:
                    attempts.append(
                        FailedAttempt(target, model.id, model.provider, UNAVAILABLE, "provider not configured")
                    )
                    logger.debug(f"Skipping {model.label}: provider '{model.provider}' is not in the pool.")
                    continue

                with tracer.start_as_current_span("router.attempt") as attempt_span:
                    attempt_span.set_attribute("router.offset", offset)
                    attempt_span.set_attribute("router.index", target)
                    attempt_span.set_attribute("llm.model_id", model.id)
                    attempt_span.set_attribute("llm.provider", model.provider)

                    if offset:
                        logger.info(f"[{model.label}] Fallback attempt {offset + 1}/{total}.")

                    try:
                        text = await adapter.ask(messages, model.id)
                    except RateLimitedError as e:
                        attempt_span.set_attribute("router.outcome", e.kind)
                        attempts.append(FailedAttempt(target, model.id, model.provider, e.kind, e.detail))
                        logger.warning(f"[{model.label}] Rate limited. Trying next model. ({e.detail})")
                        continue
                    except ProviderError as e:
                        attempt_span.set_attribute("router.outcome", e.kind)
                        attempts.append(FailedAttempt(target, model.id, model.provider, e.kind, e.detail))
                        logger.warning(f"[{model.label}] Request failed: {e.detail}. Trying next model.")
                        continue
                    except Exception as e:
                        # Adapters should only raise ProviderError; anything else still
                        # counts as a failed candidate rather than aborting the search.
                        attempt_span.set_attribute("router.outcome", "request_failed")
                        attempt_span.record_exception(e)
                        attempts.append(
                            FailedAttempt(target, model.id, model.provider, "request_failed", repr(e))
                        )
                        logger.error(f"[{model.label}] Unexpected adapter error: {e}", exc_info=True)
                        continue

                    attempt_span.set_attribute("router.outcome", "success")

                self._current_index = target
                span.set_attribute("router.outcome", "success")
                span.set_attribute("router.final_index", target)
                logger.info(f"[{model.label}] Answered (index {target}, attempt {offset + 1}/{total}).")
                return text

            span.set_attribute("router.outcome", "exhausted")

        logger.error(
            f"All {total} candidate models failed: "
            + "; ".join(attempt.describe() for attempt in attempts)
        )
        raise PoolExhaustedError(attempts)

from dataclasses import dataclass
from typing import List, Optional, Sequence


class AIOrchError(Exception):
    pass


# --- Provider (per-candidate) failures ---


class ProviderError(AIOrchError):
    """Raised by a provider adapter when a single request attempt fails."""

    kind = "request_failed"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail)


class RateLimitedError(ProviderError):
    """The backend signaled quota or throughput exhaustion (HTTP 429 or equivalent)."""

    kind = "rate_limited"

    def __init__(self, detail: str = "Rate limit exceeded"):
        super().__init__(detail)


class RequestFailedError(ProviderError):
    """Any non rate-limit failure: network, malformed response, other HTTP errors."""

    kind = "request_failed"


# --- Router outcomes ---


@dataclass(frozen=True)
class FailedAttempt:
    """One entry of the failure trail kept for a failed `Router.ask` call."""

    index: int
    model_id: str
    provider: str
    kind: str
    detail: str

    def describe(self) -> str:
        return f"[{self.index}] {self.model_id} ({self.provider}): {self.kind} - {self.detail}"


class PoolExhaustedError(AIOrchError):
    """Every candidate was tried once in a single `ask` call and none succeeded."""

    def __init__(self, attempts: Optional[Sequence[FailedAttempt]] = None, message: Optional[str] = None):
        self.attempts: List[FailedAttempt] = list(attempts or [])
        if message is None:
            message = (
                f"No providers available: all {len(self.attempts)} candidate models failed."
            )
        super().__init__(message)


class EmptyPoolError(PoolExhaustedError):
    """The model registry holds no candidates at all (configuration error)."""

    def __init__(self):
        super().__init__([], "The model registry is empty; no candidate models are configured.")


# --- Session layer ---


class SessionNotFoundError(AIOrchError):
    pass

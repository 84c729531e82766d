"""Provider failure types and the classification policy used by the analyzer."""
from __future__ import annotations

from dataclasses import dataclass


class StorageError(Exception):
    """Raised when the job store cannot be written."""


class ProviderError(Exception):
    """A chat-completion call failed; ``status`` is the HTTP status when known."""

    def __init__(self, provider: str, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status = status
        self.message = message

    def __str__(self) -> str:
        prefix = f"[{self.provider}]"
        if self.status is not None:
            prefix += f" {self.status}"
        return f"{prefix} {self.message}"


@dataclass(frozen=True)
class FailurePolicy:
    statuses: frozenset[int]
    substrings: tuple[str, ...]

    def matches(self, exc: BaseException) -> bool:
        if error_status(exc) in self.statuses:
            return True
        text = error_message(exc).lower()
        return any(s in text for s in self.substrings)


# Transient: retried with backoff.
RATE_LIMITED = FailurePolicy(statuses=frozenset({429}), substrings=("quota", "rate"))
# Permanent: provider is skipped for the disable window, never retried.
PERMANENT = FailurePolicy(statuses=frozenset({403}), substrings=("credits",))


def error_status(exc: BaseException) -> int | None:
    """HTTP status of a provider failure (openai SDK uses ``status_code``)."""
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def error_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc)


def is_rate_limited(exc: BaseException) -> bool:
    return RATE_LIMITED.matches(exc)


def is_permanent(exc: BaseException) -> bool:
    return PERMANENT.matches(exc)

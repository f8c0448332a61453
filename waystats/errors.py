# waystats/errors.py
# ============================================================================
# Taxonomie d'erreurs + Result interne des providers
# Les providers ne lèvent jamais vers l'appelant : tout finit en Result.fail()
# puis en None / [] à la frontière publique.
# ============================================================================

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class WaystatsError(Exception):
    """Base exception for game-data resolution errors."""
    kind: "ErrorKind"


class NetworkError(WaystatsError):
    """Transport or remote-invocation failure."""


class RateLimitError(NetworkError):
    """Raised when rate limit is exceeded and retry fails."""


class ParseError(WaystatsError):
    """Malformed JSON or unrecognized payload shape."""


class NotFoundError(WaystatsError):
    """A champion name (or catalog entry) could not be resolved."""


class StorageError(WaystatsError):
    """Cache backend read/write failure."""


class ErrorKind(str, enum.Enum):
    NETWORK = "network"
    PARSE = "parse"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


NetworkError.kind = ErrorKind.NETWORK
ParseError.kind = ErrorKind.PARSE
NotFoundError.kind = ErrorKind.NOT_FOUND
StorageError.kind = ErrorKind.STORAGE


@dataclass(frozen=True)
class Result(Generic[T]):
    """Tagged outcome of a provider call: a value or an error kind, never both."""

    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str = "") -> "Result[T]":
        return cls(error=kind, message=message)

    @classmethod
    def from_exc(cls, exc: WaystatsError) -> "Result[T]":
        return cls(error=exc.kind, message=str(exc))

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default):
        return self.value if self.error is None else default

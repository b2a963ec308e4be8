# PUBLIC_INTERFACE
"""
Typed operation outcomes.

Codec and store operations return an Outcome instead of raising for expected
failures, so the HTTP layer decides how each failure is presented.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


# PUBLIC_INTERFACE
class Failure(str, Enum):
    """Failure taxonomy shared by the codec, the store and the routes."""

    INPUT_VALIDATION = "input_validation"
    NOT_FOUND = "not_found"
    AUTHORIZATION_FAILURE = "authorization_failure"
    MALFORMED_TOKEN = "malformed_token"
    AUTHENTICATION_FAILURE = "authentication_failure"
    PAYLOAD_CORRUPT = "payload_corrupt"
    DECRYPTION_FAILURE = "decryption_failure"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value (``ok``) or a failure with a message.

    ``cause`` is set when one failure wraps another, e.g. a DECRYPTION_FAILURE
    raised by the store on top of the codec's AUTHENTICATION_FAILURE.
    """

    value: Optional[T] = None
    failure: Optional[Failure] = None
    message: str = ""
    cause: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: Failure, message: str, cause: Optional[Failure] = None) -> "Outcome[T]":
        return cls(failure=failure, message=message, cause=cause)

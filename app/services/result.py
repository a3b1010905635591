"""Resultat d'operation / Operation result value."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """Succes ou echec avec message / Success or failure with a message."""
    succeeded: bool
    message: str | None = None
    data: T | None = None

    @classmethod
    def ok(cls, data: Any = None, message: str | None = None) -> "Result":
        return cls(succeeded=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "Result":
        return cls(succeeded=False, message=message)

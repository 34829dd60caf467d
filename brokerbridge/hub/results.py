"""
Hub Call Outcomes

Registration and balance pushes are best-effort: their failures are logged
and absorbed, and the caller gets a ``Logged`` outcome back. Trade
settlement is not: ``HubClient.send_trade`` returns a ``TradeAck`` or raises
``HubError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Logged(Generic[T]):
    """Outcome of a best-effort hub call whose failure was only logged."""
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Logged[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> Logged[T]:
        return cls(error=str(error) or type(error).__name__)


@dataclass(frozen=True)
class TradeAck:
    """Hub acknowledgment of a settlement message, correlated by message id."""
    message_id: str
    order: Any
    payload: Any = field(default_factory=dict)

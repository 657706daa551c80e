"""Abstract strategy base class and Signal type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class Signal:
    symbol: str
    side: str = ""  # BUY / SELL / CLOSE / "" (no action)
    quantity: float = 0
    order_type: str = "MARKET"  # 시장가만 지원
    price: float | None = None
    reason: str = ""


class AbstractStrategy(ABC):
    """Base class for tick-driven strategies."""

    name: str = "base"

    def __init__(self, params: dict[str, Any] | None = None):
        self.params = params or {}

    @abstractmethod
    async def initialize(self, now: datetime) -> None:
        """Restore persisted state before the first tick."""

    @abstractmethod
    async def on_tick(self, now: datetime) -> None:
        """Process one price tick to completion."""

    def get_param(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class OrderResult:
    success: bool
    broker_order_id: str | None = None
    filled_price: float | None = None
    filled_quantity: float | None = None
    message: str = ""


@dataclass
class Quote:
    symbol: str
    ask: float = 0.0
    bid: float = 0.0

    # 0 이하 호가는 "조회 불가"를 의미
    @property
    def has_ask(self) -> bool:
        return self.ask > 0

    @property
    def has_bid(self) -> bool:
        return self.bid > 0


@dataclass
class OpenPosition:
    symbol: str
    volume: float
    side: str = "LONG"


class AbstractBroker(ABC):
    """Execution venue abstraction (order gateway + quote source)."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection / authenticate."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Clean up resources."""

    @abstractmethod
    async def place_order(
        self,
        symbol: str,
        side: str,
        order_type: str,
        quantity: float,
        price: float | None = None,
        **kwargs: Any,
    ) -> OrderResult:
        """Submit a buy/sell order."""

    @abstractmethod
    async def close_position(self, symbol: str) -> OrderResult:
        """Close the entire open position in a symbol."""

    @abstractmethod
    async def list_open_positions(self) -> list[OpenPosition]:
        """Open positions in the venue's report order, read fresh on every call."""

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote:
        """Best ask/bid for a symbol. Non-positive sides mean unavailable."""

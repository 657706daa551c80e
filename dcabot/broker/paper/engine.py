"""Virtual execution engine for paper trading."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from dcabot.broker.base import Quote

logger = logging.getLogger(__name__)


class PaperExecutionEngine:
    """Simulates order execution against live quotes."""

    def __init__(self, slippage: float = 0.0001):
        self.slippage = slippage

    def execute_market_order(
        self,
        symbol: str,
        side: str,
        quantity: float,
        quote: Quote,
    ) -> dict | None:
        """Fill a market order at the touch with simulated slippage. None if that side has no quote."""
        if side == "BUY":
            if not quote.has_ask:
                return None
            fill_price = quote.ask * (1 + self.slippage)
        else:
            if not quote.has_bid:
                return None
            fill_price = quote.bid * (1 - self.slippage)

        return {
            "broker_order_id": f"PAPER-{uuid.uuid4().hex[:12].upper()}",
            "filled_price": round(fill_price, 4),
            "filled_quantity": quantity,
            "filled_at": datetime.now(timezone.utc),
        }

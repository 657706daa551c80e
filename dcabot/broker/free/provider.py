"""Free market data provider using yfinance."""

from __future__ import annotations

import asyncio
import logging

from dcabot.broker.base import Quote
from dcabot.strategies.lots import LotConvention

logger = logging.getLogger(__name__)


class FreeMarketProvider:
    """Provides bid/ask quotes without broker credentials."""

    def __init__(self, convention: LotConvention | None = None):
        self.convention = convention or LotConvention()

    async def get_quote(self, symbol: str) -> Quote:
        # 단주 종목은 기초 종목 호가를 그대로 사용
        ticker = self.convention.base_symbol(symbol)

        def _fetch():
            import yfinance as yf

            info = yf.Ticker(ticker).info or {}
            ask = float(info.get("ask") or 0.0)
            bid = float(info.get("bid") or 0.0)
            return Quote(symbol=symbol, ask=ask, bid=bid)

        return await asyncio.to_thread(_fetch)

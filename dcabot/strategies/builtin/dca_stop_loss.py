"""Dollar-Cost Averaging with a stop-loss liquidation latch.

Buys ``total_investment / duration_days`` worth of whole shares at most once
per 24h while the investment window is open, and liquidates every open
position the first time the bid drops ``stop_loss_pct`` below the average
entry price. The stop-loss is a one-way latch: once triggered, the strategy
never buys again.

Params:
    symbol: Instrument to accumulate
    total_investment: Total budget spread over the window
    stop_loss_pct: Fraction below the average entry price that triggers liquidation
    duration_days: Length of the buying window in days
    start_date: Optional fixed window start (default: first tick of this process)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from dcabot.schemas.common import OrderSource
from dcabot.services.ledger_service import PersistentLedger
from dcabot.services.order_service import OrderService
from dcabot.strategies.base import AbstractStrategy, Signal
from dcabot.strategies.lots import LotResolver
from dcabot.strategies.state import (
    KEY_STOP_LOSS_TRIGGERED,
    LEDGER_KEYS,
    StrategyState,
)

logger = logging.getLogger(__name__)

BUY_INTERVAL = timedelta(days=1)


@dataclass
class LiquidationReport:
    submitted: int = 0
    failed: int = 0
    skipped: int = 0


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DCAStopLossStrategy(AbstractStrategy):

    name = "DCA_STOP_LOSS"

    def __init__(
        self,
        params: dict[str, Any],
        orders: OrderService,
        ledger: PersistentLedger,
        lots: LotResolver | None = None,
    ):
        super().__init__(params)
        self.symbol: str = self.get_param("symbol")
        self.total_investment = float(self.get_param("total_investment", 0.0))
        self.stop_loss_pct = float(self.get_param("stop_loss_pct", 0.0))
        self.duration_days = int(self.get_param("duration_days", 0))
        if not self.symbol:
            raise ValueError("symbol is required")
        if self.total_investment <= 0:
            raise ValueError(f"total_investment must be positive: {self.total_investment}")
        if not 0.0 <= self.stop_loss_pct <= 1.0:
            raise ValueError(f"stop_loss_pct must be within [0, 1]: {self.stop_loss_pct}")
        if self.duration_days <= 0:
            raise ValueError(f"duration_days must be positive: {self.duration_days}")

        self.daily_investment = self.total_investment / self.duration_days
        self.orders = orders
        self.broker = orders.broker
        self.ledger = ledger
        self.lots = lots or LotResolver()

        self.start_date: datetime | None = None
        self.state: StrategyState | None = None
        self._last_tick: datetime | None = None

    @property
    def initialized(self) -> bool:
        return self.state is not None

    @property
    def end_date(self) -> datetime | None:
        if self.start_date is None:
            return None
        return self.start_date + timedelta(days=self.duration_days)

    @property
    def stop_loss_price(self) -> float:
        if self.state is None:
            return 0.0
        return self.state.average_price * (1 - self.stop_loss_pct)

    async def initialize(self, now: datetime) -> None:
        pinned = self.get_param("start_date")
        self.start_date = _as_utc(pinned or now)
        values = await self.ledger.get_many(LEDGER_KEYS)
        self.state = StrategyState.from_ledger(values, self.start_date - BUY_INTERVAL)
        logger.info(
            "%s initialized for %s: daily=%.2f window=%s~%s",
            self.name, self.symbol, self.daily_investment,
            self.start_date.isoformat(), self.end_date.isoformat(),
        )

    async def on_tick(self, now: datetime) -> None:
        if self.state is None:
            raise RuntimeError("Strategy is not initialized")
        now = _as_utc(now)
        if self._last_tick is not None and now < self._last_tick:
            raise ValueError(f"Tick out of order: {now.isoformat()} < {self._last_tick.isoformat()}")
        self._last_tick = now

        if self.state.stop_loss_triggered:
            return

        can_buy = now <= self.end_date
        if can_buy and now - self.state.last_buy_time >= BUY_INTERVAL:
            await self._daily_buy(now)

        # 매수 여부와 무관하게 손절 검사
        quote = await self.broker.get_quote(self.symbol)
        if not quote.has_bid:
            return

        stop_price = self.stop_loss_price
        if quote.bid < stop_price:
            logger.warning(
                "Stop-loss triggered for %s: bid %.4f < %.4f (avg %.4f)",
                self.symbol, quote.bid, stop_price, self.state.average_price,
            )
            self.state.halt()
            # 청산 전에 래치를 먼저 영속화 (청산 도중 중단돼도 재기동 시 정지 상태 유지)
            await self.ledger.set(KEY_STOP_LOSS_TRIGGERED, True)
            await self.liquidate()

    async def _daily_buy(self, now: datetime) -> None:
        quote = await self.broker.get_quote(self.symbol)
        if not quote.has_ask:
            logger.info("No ask quote for %s, skipping buy", self.symbol)
            return

        shares = math.floor(self.daily_investment / quote.ask)
        if shares <= 0:
            logger.info(
                "Price %.4f too high for daily budget %.2f, skipping buy",
                quote.ask, self.daily_investment,
            )
            return

        signal = Signal(
            symbol=self.symbol,
            side="BUY",
            quantity=shares,
            price=quote.ask,
            reason=f"DCA buy {shares} shares at {quote.ask}",
        )
        result = await self.orders.submit(signal, OrderSource.STRATEGY)
        if not result.success:
            return

        self.state.record_buy(shares, quote.ask, now)
        await self.ledger.set_many(self.state.buy_fields())
        logger.info(
            "DCA state: shares=%s cost=%.2f avg=%.4f",
            self.state.total_shares_bought, self.state.total_cost, self.state.average_price,
        )

    async def liquidate(self) -> LiquidationReport:
        """보유 포지션 전량 청산. 실패한 주문은 기록만 하고 다음 포지션으로 진행."""
        report = LiquidationReport()
        positions = list(await self.broker.list_open_positions())
        logger.info("Liquidating %d open position(s)", len(positions))

        for position in reversed(positions):
            for signal in self.lots.resolve(position):
                try:
                    await self._submit_liquidation(signal, report)
                except Exception as e:
                    report.failed += 1
                    logger.error(
                        "Liquidation order %s %s failed: %s",
                        signal.side, signal.symbol, e, exc_info=True,
                    )

        logger.info(
            "Liquidation finished: submitted=%d failed=%d skipped=%d",
            report.submitted, report.failed, report.skipped,
        )
        return report

    async def _submit_liquidation(self, signal: Signal, report: LiquidationReport) -> None:
        if signal.side == "SELL":
            quote = await self.broker.get_quote(signal.symbol)
            if not quote.has_ask:
                logger.warning("No ask quote for %s, skipping %s", signal.symbol, signal.reason)
                report.skipped += 1
                return
            signal.price = quote.ask

        result = await self.orders.submit(signal, OrderSource.STOP_LOSS)
        if result.success:
            report.submitted += 1
        else:
            report.failed += 1

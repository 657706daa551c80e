"""Strategy runner - serializes ticks into the strategy and guards against ledger faults."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from dcabot.config import Settings
from dcabot.services.ledger_service import LedgerError
from dcabot.strategies.builtin.dca_stop_loss import DCAStopLossStrategy, LiquidationReport

logger = logging.getLogger(__name__)


class StrategyRunner:

    def __init__(self, strategy: DCAStopLossStrategy):
        self.strategy = strategy
        self._lock = asyncio.Lock()
        self.faulted = False

    async def _ensure_initialized(self, now: datetime) -> None:
        if not self.strategy.initialized:
            await self.strategy.initialize(now)

    async def run_tick(self, now: datetime | None = None) -> None:
        """Process one tick. Ticks never overlap."""
        if self.faulted:
            logger.debug("Runner faulted, tick ignored")
            return
        async with self._lock:
            now = now or datetime.now(timezone.utc)
            try:
                await self._ensure_initialized(now)
                await self.strategy.on_tick(now)
            except LedgerError as e:
                # 상태 영속화 실패: 재기동 전까지 더 이상 틱을 처리하지 않음
                self.faulted = True
                logger.critical("Ledger failure, strategy stopped: %s", e)
                raise
            except Exception as e:
                logger.error("Strategy %s tick failed: %s", self.strategy.name, e, exc_info=True)

    async def liquidate(self) -> LiquidationReport:
        """Re-run liquidation for a halted strategy (not retried automatically after a restart).

        Only allowed once the stop-loss latch is set; an active strategy keeps
        accumulating and must not be flattened behind its back.
        """
        async with self._lock:
            await self._ensure_initialized(datetime.now(timezone.utc))
            if not self.strategy.state.stop_loss_triggered:
                raise ValueError(
                    f"Strategy {self.strategy.name} is {self.strategy.state.phase.value}; "
                    "liquidation only runs after the stop-loss has triggered"
                )
            return await self.strategy.liquidate()


def build_runner(cfg: Settings) -> StrategyRunner:
    from dcabot.broker.free.provider import FreeMarketProvider
    from dcabot.broker.paper.broker import PaperBroker
    from dcabot.database import async_session
    from dcabot.services.ledger_service import PersistentLedger
    from dcabot.services.order_service import OrderService
    from dcabot.strategies.lots import LotConvention, LotResolver

    convention = LotConvention(suffix=cfg.fractional_suffix, lot_size=cfg.round_lot_size)
    broker = PaperBroker(
        provider=FreeMarketProvider(convention),
        sessions=async_session,
        convention=convention,
        slippage=cfg.paper_slippage,
    )
    strategy = DCAStopLossStrategy(
        params={
            "symbol": cfg.symbol,
            "total_investment": cfg.total_investment,
            "stop_loss_pct": cfg.stop_loss_pct,
            "duration_days": cfg.duration_days,
            "start_date": cfg.start_date,
        },
        orders=OrderService(broker, async_session),
        ledger=PersistentLedger(async_session),
        lots=LotResolver(convention),
    )
    return StrategyRunner(strategy)


_runner: StrategyRunner | None = None


def get_runner() -> StrategyRunner:
    global _runner
    if _runner is None:
        from dcabot.config import settings
        _runner = build_runner(settings)
    return _runner

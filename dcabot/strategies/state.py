"""Accumulated DCA state and its ledger representation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from dcabot.schemas.common import StrategyPhase

logger = logging.getLogger(__name__)

# 원장 키 (재시작 시 복원 대상)
KEY_TOTAL_SHARES = "TotalSharesBought"
KEY_TOTAL_COST = "TotalCost"
KEY_LAST_BUY_TIME = "LastBuyTime"
KEY_STOP_LOSS_TRIGGERED = "StopLossTriggered"

LEDGER_KEYS = (KEY_TOTAL_SHARES, KEY_TOTAL_COST, KEY_LAST_BUY_TIME, KEY_STOP_LOSS_TRIGGERED)


@dataclass
class StrategyState:
    last_buy_time: datetime
    total_shares_bought: float = 0.0
    total_cost: float = 0.0
    phase: StrategyPhase = StrategyPhase.ACTIVE

    def __post_init__(self):
        if self.total_shares_bought < 0 or self.total_cost < 0:
            raise ValueError(
                f"Negative totals: shares={self.total_shares_bought}, cost={self.total_cost}"
            )

    @property
    def average_price(self) -> float:
        if self.total_shares_bought <= 0:
            return 0.0
        return self.total_cost / self.total_shares_bought

    @property
    def stop_loss_triggered(self) -> bool:
        return self.phase == StrategyPhase.HALTED

    def record_buy(self, shares: float, price: float, at: datetime) -> None:
        """체결된 매수를 누적. lastBuyTime은 여기서만 전진한다."""
        if shares <= 0 or price <= 0:
            raise ValueError(f"Invalid fill: {shares} @ {price}")
        self.total_shares_bought += shares
        self.total_cost += shares * price
        self.last_buy_time = at

    def halt(self) -> None:
        """ACTIVE → HALTED. 이미 HALTED면 아무것도 하지 않음."""
        self.phase = StrategyPhase.HALTED

    def buy_fields(self) -> dict[str, Any]:
        return {
            KEY_TOTAL_SHARES: self.total_shares_bought,
            KEY_TOTAL_COST: self.total_cost,
            KEY_LAST_BUY_TIME: self.last_buy_time.isoformat(),
        }

    @classmethod
    def from_ledger(cls, values: dict[str, Any], default_last_buy: datetime) -> StrategyState:
        """원장 값으로 상태 복원. 없는 키는 기본값 사용."""
        last_buy_raw = values.get(KEY_LAST_BUY_TIME)
        last_buy = datetime.fromisoformat(last_buy_raw) if last_buy_raw else default_last_buy
        triggered = bool(values.get(KEY_STOP_LOSS_TRIGGERED, False))
        state = cls(
            last_buy_time=last_buy,
            total_shares_bought=float(values.get(KEY_TOTAL_SHARES, 0.0)),
            total_cost=float(values.get(KEY_TOTAL_COST, 0.0)),
            phase=StrategyPhase.HALTED if triggered else StrategyPhase.ACTIVE,
        )
        logger.info(
            "State restored: shares=%s cost=%.2f avg=%.4f last_buy=%s phase=%s",
            state.total_shares_bought, state.total_cost, state.average_price,
            state.last_buy_time.isoformat(), state.phase.value,
        )
        return state

from __future__ import annotations

from enum import Enum


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    CLOSE = "CLOSE"  # 포지션 전량 청산 (수량은 브로커가 결정)


class OrderStatus(str, Enum):
    FILLED = "FILLED"
    REJECTED = "REJECTED"


class OrderSource(str, Enum):
    STRATEGY = "strategy"
    STOP_LOSS = "stop_loss"
    MANUAL = "manual"


class StrategyPhase(str, Enum):
    ACTIVE = "ACTIVE"
    HALTED = "HALTED"  # 손절 발동 후 종료 상태. 되돌릴 수 없음

"""StrategyRunner 테스트: 원장 장애 시 중단, 일반 예외는 기록 후 계속."""

from __future__ import annotations

from datetime import timedelta

import pytest

from dcabot.broker.base import OpenPosition
from dcabot.schemas.common import StrategyPhase
from dcabot.services.ledger_service import LedgerError
from dcabot.strategies.runner import StrategyRunner
from dcabot.strategies.state import KEY_STOP_LOSS_TRIGGERED
from tests.conftest import T0


async def test_first_tick_initializes_strategy(make_strategy, broker):
    broker.set_quote("XYZ", ask=20.0, bid=20.0)
    runner = StrategyRunner(make_strategy())

    await runner.run_tick(T0)

    assert runner.strategy.initialized
    assert runner.strategy.start_date == T0
    assert broker.buys() == [("BUY", "XYZ", 5)]


async def test_ledger_failure_stops_runner(make_strategy, broker, ledger, monkeypatch):
    broker.set_quote("XYZ", ask=20.0, bid=20.0)
    runner = StrategyRunner(make_strategy())
    await runner.run_tick(T0)

    async def _fail(values):
        raise LedgerError("disk full")

    monkeypatch.setattr(ledger, "set_many", _fail)
    with pytest.raises(LedgerError):
        await runner.run_tick(T0 + timedelta(days=1))
    assert runner.faulted

    await runner.run_tick(T0 + timedelta(days=2))
    assert len(broker.buys()) == 2


async def test_unexpected_error_is_logged_not_raised(make_strategy, broker, caplog):
    broker.set_quote("XYZ", ask=20.0, bid=20.0)
    runner = StrategyRunner(make_strategy())
    await runner.run_tick(T0 + timedelta(hours=1))

    await runner.run_tick(T0)

    assert not runner.faulted
    assert "Tick out of order" in caplog.text


async def test_operator_liquidation_after_restart(make_strategy, broker, ledger):
    """손절 래치가 저장된 상태로 재기동 → 수동 청산 재실행 허용."""
    await ledger.set(KEY_STOP_LOSS_TRIGGERED, True)
    broker.positions = [OpenPosition(symbol="XYZ", volume=5)]
    runner = StrategyRunner(make_strategy())

    report = await runner.liquidate()

    assert runner.strategy.initialized
    assert report.submitted == 1
    assert broker.calls == [("CLOSE", "XYZ", None)]


async def test_operator_liquidation_rejected_while_active(make_strategy, broker):
    """ACTIVE 상태에서 수동 청산 시 ValueError, 주문 없음, 다음 매수 정상 진행."""
    broker.set_quote("XYZ", ask=20.0, bid=20.0)
    broker.positions = [OpenPosition(symbol="XYZ", volume=5)]
    runner = StrategyRunner(make_strategy())
    await runner.run_tick(T0)

    with pytest.raises(ValueError, match="ACTIVE"):
        await runner.liquidate()

    assert runner.strategy.state.phase == StrategyPhase.ACTIVE
    assert broker.calls == [("BUY", "XYZ", 5)]

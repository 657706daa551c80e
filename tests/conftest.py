"""테스트 공통 설정: 인메모리 SQLite 세션 팩토리, 모의 브로커, 전략 픽스처."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dcabot.broker.base import AbstractBroker, OpenPosition, OrderResult, Quote
from dcabot.models.account import Account
from dcabot.models.base import Base
from dcabot.services.ledger_service import PersistentLedger
from dcabot.services.order_service import OrderService
from dcabot.strategies.builtin.dca_stop_loss import DCAStopLossStrategy
from dcabot.strategies.lots import LotResolver

T0 = datetime(2024, 1, 2, 14, 30, tzinfo=timezone.utc)


class FakeBroker(AbstractBroker):
    """호가/포지션/주문 결과를 테스트에서 직접 지정하는 브로커."""

    def __init__(self):
        self.quotes: dict[str, Quote] = {}
        self.positions: list[OpenPosition] = []
        self.rejected: set[tuple[str, str]] = set()  # (side, symbol)
        self.raising: set[tuple[str, str]] = set()  # (side, symbol) → ConnectionError
        self.calls: list[tuple[str, str, float | None]] = []
        self.on_list_positions = None

    def set_quote(self, symbol: str, ask: float = 0.0, bid: float = 0.0) -> None:
        self.quotes[symbol] = Quote(symbol=symbol, ask=ask, bid=bid)

    def buys(self) -> list[tuple[str, str, float | None]]:
        return [c for c in self.calls if c[0] == "BUY"]

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def get_quote(self, symbol: str) -> Quote:
        return self.quotes.get(symbol, Quote(symbol=symbol))

    async def place_order(
        self,
        symbol: str,
        side: str,
        order_type: str,
        quantity: float,
        price: float | None = None,
        **kwargs: Any,
    ) -> OrderResult:
        self.calls.append((side, symbol, quantity))
        if (side, symbol) in self.raising:
            raise ConnectionError("gateway down")
        if (side, symbol) in self.rejected:
            return OrderResult(success=False, message="rejected by venue")
        return OrderResult(success=True, broker_order_id="FAKE-1", filled_price=price, filled_quantity=quantity)

    async def close_position(self, symbol: str) -> OrderResult:
        self.calls.append(("CLOSE", symbol, None))
        if ("CLOSE", symbol) in self.raising:
            raise ConnectionError("gateway down")
        if ("CLOSE", symbol) in self.rejected:
            return OrderResult(success=False, message="rejected by venue")
        return OrderResult(success=True, broker_order_id="FAKE-2")

    async def list_open_positions(self) -> list[OpenPosition]:
        if self.on_list_positions is not None:
            await self.on_list_positions()
        return list(self.positions)


@pytest.fixture
async def sessions():
    """각 테스트마다 독립적인 인메모리 DB 세션 팩토리 제공."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False, poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragmas(dbapi_conn, _):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def session(sessions):
    async with sessions() as sess:
        yield sess


@pytest.fixture
async def account(session: AsyncSession) -> Account:
    """초기 현금이 설정된 모의 계좌 생성."""
    acc = Account(name="test", cash=10_000.0, initial_cash=10_000.0, commission_rate=0.0)
    session.add(acc)
    await session.commit()
    return acc


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def ledger(sessions) -> PersistentLedger:
    return PersistentLedger(sessions)


@pytest.fixture
def make_strategy(broker, sessions, ledger):
    """기본값: 예산 9000, 90일 → 일일 100, 손절 40%."""

    def _make(**overrides) -> DCAStopLossStrategy:
        params = {
            "symbol": "XYZ",
            "total_investment": 9000.0,
            "stop_loss_pct": 0.4,
            "duration_days": 90,
        }
        params.update(overrides)
        return DCAStopLossStrategy(
            params=params,
            orders=OrderService(broker, sessions),
            ledger=ledger,
            lots=LotResolver(),
        )

    return _make

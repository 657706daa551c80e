"""Paper broker - simulates the venue using live quotes."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dcabot.broker.base import AbstractBroker, OpenPosition, OrderResult, Quote
from dcabot.broker.paper.engine import PaperExecutionEngine
from dcabot.models.account import Account
from dcabot.models.holding import Holding
from dcabot.strategies.lots import LotConvention

logger = logging.getLogger(__name__)


class QuoteProvider(Protocol):
    async def get_quote(self, symbol: str) -> Quote: ...


class PaperBroker(AbstractBroker):
    """Paper trading broker backed by SQLite for cash and holdings.

    Holdings are booked per base symbol. A holding that is not a whole number
    of round lots is reported under the odd-lot identifier, and the venue
    refuses to close such a position in one call.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        sessions: async_sessionmaker[AsyncSession],
        convention: LotConvention | None = None,
        slippage: float = 0.0001,
    ):
        self._provider = provider
        self._sessions = sessions
        self._engine = PaperExecutionEngine(slippage)
        self.convention = convention or LotConvention()

    async def connect(self) -> None:
        logger.info("PaperBroker connected")

    async def disconnect(self) -> None:
        logger.info("PaperBroker disconnected")

    async def get_quote(self, symbol: str) -> Quote:
        try:
            return await self._provider.get_quote(symbol)
        except Exception as e:
            logger.warning("Quote fetch failed for %s: %s", symbol, e)
            return Quote(symbol=symbol)

    async def _get_account(self, session: AsyncSession) -> Account | None:
        result = await session.execute(select(Account).limit(1))
        return result.scalar_one_or_none()

    async def _get_holding(self, session: AsyncSession, account: Account, base: str) -> Holding | None:
        result = await session.execute(
            select(Holding).where(Holding.account_id == account.id, Holding.symbol == base)
        )
        return result.scalar_one_or_none()

    async def place_order(
        self,
        symbol: str,
        side: str,
        order_type: str,
        quantity: float,
        price: float | None = None,
        **kwargs: Any,
    ) -> OrderResult:
        if quantity <= 0:
            return OrderResult(success=False, message=f"Invalid quantity {quantity}")

        if order_type != "MARKET":
            return OrderResult(success=False, message=f"Unsupported order type {order_type}")

        quote = await self.get_quote(symbol)
        fill = self._engine.execute_market_order(symbol, side, quantity, quote)
        if fill is None:
            return OrderResult(success=False, message=f"No {side} quote for {symbol}")

        base = self.convention.base_symbol(symbol)
        async with self._sessions() as session:
            account = await self._get_account(session)
            if account is None:
                return OrderResult(success=False, message="No account found")
            holding = await self._get_holding(session, account, base)

            amount = fill["filled_price"] * quantity
            commission = round(amount * account.commission_rate, 2)

            if side == "BUY":
                required = amount + commission
                if account.cash < required:
                    return OrderResult(
                        success=False,
                        message=f"Insufficient cash: required {required:,.2f}, available {account.cash:,.2f}",
                    )
                if holding is None:
                    holding = Holding(account_id=account.id, symbol=base, quantity=0.0, avg_price=0.0)
                    session.add(holding)
                total_cost = holding.avg_price * holding.quantity + amount
                holding.quantity += quantity
                holding.avg_price = total_cost / holding.quantity
                account.cash = round(account.cash - required, 2)
            else:
                held = holding.quantity if holding else 0.0
                if held < quantity:
                    return OrderResult(
                        success=False,
                        message=f"{symbol} insufficient position: held {held}, requested {quantity}",
                    )
                holding.quantity -= quantity
                if holding.quantity <= 0:
                    await session.delete(holding)
                account.cash = round(account.cash + amount - commission, 2)

            await session.commit()

        logger.info("Paper %s %s %s @ %.4f", side, symbol, quantity, fill["filled_price"])
        return OrderResult(
            success=True,
            broker_order_id=fill["broker_order_id"],
            filled_price=fill["filled_price"],
            filled_quantity=fill["filled_quantity"],
        )

    async def close_position(self, symbol: str) -> OrderResult:
        positions = {p.symbol: p for p in await self.list_open_positions()}
        position = positions.get(symbol)
        if position is None:
            return OrderResult(success=False, message=f"No open position in {symbol}")
        if self.convention.is_fractional(symbol):
            return OrderResult(
                success=False,
                message=f"{symbol} holds odd lots; close by round-lot and odd-lot sells",
            )
        return await self.place_order(symbol, "SELL", "MARKET", position.volume)

    async def list_open_positions(self) -> list[OpenPosition]:
        async with self._sessions() as session:
            account = await self._get_account(session)
            if account is None:
                return []
            result = await session.execute(
                select(Holding)
                .where(Holding.account_id == account.id, Holding.quantity > 0)
                .order_by(Holding.id)
            )
            holdings = result.scalars().all()

        positions = []
        for holding in holdings:
            split = self.convention.split(holding.quantity)
            symbol = holding.symbol
            if split.remainder > 0:
                symbol = self.convention.fractional_symbol(holding.symbol)
            positions.append(OpenPosition(symbol=symbol, volume=holding.quantity, side="LONG"))
        return positions

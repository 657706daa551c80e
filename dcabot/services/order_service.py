"""주문 서비스: 시그널 → 브로커 실행 → 주문 기록(FILLED/REJECTED)."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dcabot.broker.base import AbstractBroker, OrderResult
from dcabot.models.order import Order
from dcabot.schemas.common import OrderSide, OrderSource, OrderStatus
from dcabot.strategies.base import Signal

logger = logging.getLogger(__name__)


class OrderService:

    def __init__(self, broker: AbstractBroker, sessions: async_sessionmaker[AsyncSession]):
        self.broker = broker
        self._sessions = sessions

    async def submit(self, signal: Signal, source: OrderSource = OrderSource.STRATEGY) -> OrderResult:
        """시그널 1건을 단 한 번 실행한다. 재시도 없음."""
        if signal.side == OrderSide.CLOSE.value:
            result = await self.broker.close_position(signal.symbol)
        else:
            result = await self.broker.place_order(
                symbol=signal.symbol,
                side=signal.side,
                order_type=signal.order_type,
                quantity=signal.quantity,
                price=signal.price,
            )

        if result.success:
            logger.info(
                "Order filled: %s %s %s @ %s (%s)",
                signal.side, signal.symbol, signal.quantity,
                result.filled_price or signal.price, signal.reason,
            )
        else:
            logger.warning(
                "Order rejected: %s %s %s - %s",
                signal.side, signal.symbol, signal.quantity, result.message,
            )

        await self._record(signal, result, source)
        return result

    async def _record(self, signal: Signal, result: OrderResult, source: OrderSource) -> None:
        # 체결 결과가 이미 확정된 뒤이므로 기록 실패가 상태 갱신을 막으면 안 됨
        try:
            async with self._sessions() as session:
                session.add(Order(
                    broker_order_id=result.broker_order_id,
                    symbol=signal.symbol,
                    side=signal.side,
                    order_type=signal.order_type,
                    quantity=signal.quantity,
                    price=signal.price,
                    filled_quantity=(result.filled_quantity or signal.quantity) if result.success else 0.0,
                    filled_price=(result.filled_price or signal.price) if result.success else None,
                    status=OrderStatus.FILLED.value if result.success else OrderStatus.REJECTED.value,
                    reject_reason=None if result.success else (result.message or None),
                    source=source.value,
                    reason=signal.reason,
                ))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Order journal write failed for %s %s: %s", signal.side, signal.symbol, e)

    @staticmethod
    async def get_orders(
        session: AsyncSession,
        status: str | None = None,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit)
        if status:
            stmt = stmt.where(Order.status == status)
        result = await session.execute(stmt)
        return list(result.scalars().all())

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from dcabot.models.base import Base, TimestampMixin


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    broker_order_id: Mapped[str | None] = mapped_column(String(100), default=None)
    symbol: Mapped[str] = mapped_column(String(20), index=True)
    side: Mapped[str] = mapped_column(String(5))  # BUY / SELL / CLOSE
    order_type: Mapped[str] = mapped_column(String(10), default="MARKET")
    quantity: Mapped[float] = mapped_column()
    price: Mapped[float | None] = mapped_column(default=None)
    filled_quantity: Mapped[float] = mapped_column(default=0.0)
    filled_price: Mapped[float | None] = mapped_column(default=None)
    status: Mapped[str] = mapped_column(String(20))  # FILLED / REJECTED
    reject_reason: Mapped[str | None] = mapped_column(String(255), default=None)
    source: Mapped[str] = mapped_column(String(20), default="strategy")
    reason: Mapped[str] = mapped_column(String(255), default="")

    def __repr__(self) -> str:
        return f"<Order id={self.id} {self.side} {self.symbol} qty={self.quantity} {self.status}>"

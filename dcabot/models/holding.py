from __future__ import annotations

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dcabot.models.base import Base, TimestampMixin


class Holding(TimestampMixin, Base):
    """모의투자 보유 수량. 단주/정규 구분 없이 기초 종목(base symbol) 단위로 합산."""

    __tablename__ = "holdings"
    __table_args__ = (
        UniqueConstraint("account_id", "symbol", name="uq_holding"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True)
    symbol: Mapped[str] = mapped_column(String(20), index=True)
    quantity: Mapped[float] = mapped_column(default=0.0)
    avg_price: Mapped[float] = mapped_column(default=0.0)

    def __repr__(self) -> str:
        return f"<Holding id={self.id} {self.symbol} qty={self.quantity} avg={self.avg_price}>"

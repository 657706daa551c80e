from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from dcabot.models.base import Base, TimestampMixin


class Account(TimestampMixin, Base):
    """모의투자 계좌 (현금 잔고)"""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    cash: Mapped[float] = mapped_column(default=100_000.0)
    initial_cash: Mapped[float] = mapped_column(default=100_000.0)
    commission_rate: Mapped[float] = mapped_column(default=0.0005)

    def __repr__(self) -> str:
        return f"<Account id={self.id} name={self.name!r} cash={self.cash}>"

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dcabot.models.base import Base, TimestampMixin


class LedgerEntry(TimestampMixin, Base):
    """전략 상태 원장 (재시작 후 복원용 key/value)"""

    __tablename__ = "ledger_entries"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[str] = mapped_column(Text)  # JSON encoded

    def __repr__(self) -> str:
        return f"<LedgerEntry {self.key}={self.value}>"

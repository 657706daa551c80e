"""전략 상태 원장 서비스: key/value를 JSON으로 저장하고 쓰기마다 즉시 커밋."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dcabot.models.ledger import LedgerEntry

logger = logging.getLogger(__name__)


class LedgerError(RuntimeError):
    """원장 읽기/쓰기 실패. 상태 유실 위험이 있으므로 전략을 중단시킨다."""


class PersistentLedger:

    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self._sessions = sessions

    async def get(self, key: str) -> Any | None:
        try:
            async with self._sessions() as session:
                entry = await session.get(LedgerEntry, key)
        except SQLAlchemyError as e:
            raise LedgerError(f"Ledger read failed for {key}: {e}") from e
        if entry is None:
            return None
        return json.loads(entry.value)

    async def get_many(self, keys: tuple[str, ...] | list[str]) -> dict[str, Any]:
        """존재하는 키만 담아 반환."""
        try:
            async with self._sessions() as session:
                result = await session.execute(
                    select(LedgerEntry).where(LedgerEntry.key.in_(list(keys)))
                )
                entries = result.scalars().all()
        except SQLAlchemyError as e:
            raise LedgerError(f"Ledger read failed: {e}") from e
        return {entry.key: json.loads(entry.value) for entry in entries}

    async def set(self, key: str, value: Any) -> None:
        await self.set_many({key: value})

    async def set_many(self, values: dict[str, Any]) -> None:
        """여러 키를 한 트랜잭션으로 기록 (전부 반영되거나 전부 실패)."""
        try:
            async with self._sessions() as session:
                for key, value in values.items():
                    encoded = json.dumps(value)
                    entry = await session.get(LedgerEntry, key)
                    if entry is None:
                        session.add(LedgerEntry(key=key, value=encoded))
                    else:
                        entry.value = encoded
                await session.commit()
        except SQLAlchemyError as e:
            raise LedgerError(f"Ledger write failed for {sorted(values)}: {e}") from e
        logger.debug("Ledger write: %s", values)

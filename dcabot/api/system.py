from __future__ import annotations

from fastapi import APIRouter, Depends

from dcabot.config import settings
from dcabot.strategies.runner import StrategyRunner, get_runner

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    summary="헬스 체크",
    description="서버 구동 상태, 대상 종목, 전략 상태(ACTIVE/HALTED)를 반환합니다. "
                "러너가 원장 오류로 중단된 경우 status가 fault로 표시됩니다.",
)
async def health(runner: StrategyRunner = Depends(get_runner)):
    strategy = runner.strategy
    return {
        "status": "fault" if runner.faulted else "ok",
        "symbol": settings.symbol,
        "phase": strategy.state.phase.value if strategy.state else None,
        "version": "0.1.0",
    }

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dcabot.schemas.common import StrategyPhase
from dcabot.schemas.strategy import LiquidationResponse, StrategyStateResponse
from dcabot.strategies.runner import StrategyRunner, get_runner

router = APIRouter(prefix="/strategy", tags=["strategy"])


@router.get(
    "",
    response_model=StrategyStateResponse,
    summary="전략 상태 조회",
    description="누적 매수 수량/금액, 평균 단가, 손절가, 매수 기간, 손절 래치 상태를 반환합니다. "
                "첫 틱 이전에는 원장이 아직 복원되지 않아 initialized=false 입니다.",
)
async def get_strategy_state(runner: StrategyRunner = Depends(get_runner)):
    strategy = runner.strategy
    state = strategy.state
    return StrategyStateResponse(
        name=strategy.name,
        symbol=strategy.symbol,
        phase=state.phase.value if state else StrategyPhase.ACTIVE.value,
        initialized=strategy.initialized,
        daily_investment=strategy.daily_investment,
        total_shares_bought=state.total_shares_bought if state else 0.0,
        total_cost=state.total_cost if state else 0.0,
        average_price=state.average_price if state else 0.0,
        stop_loss_price=strategy.stop_loss_price,
        last_buy_time=state.last_buy_time if state else None,
        start_date=strategy.start_date,
        end_date=strategy.end_date,
    )


@router.post(
    "/liquidate",
    response_model=LiquidationResponse,
    summary="전량 청산 재실행",
    description="열린 포지션을 모두 청산합니다. 손절 발동 후 청산 도중 프로세스가 재기동된 경우 "
                "자동으로 재시도하지 않으므로 이 엔드포인트로 명시적으로 다시 실행합니다. "
                "손절이 발동되지 않은(ACTIVE) 상태에서는 409를 반환합니다.",
)
async def liquidate(runner: StrategyRunner = Depends(get_runner)):
    try:
        report = await runner.liquidate()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return LiquidationResponse(
        submitted=report.submitted,
        failed=report.failed,
        skipped=report.skipped,
    )

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dcabot.database import get_session
from dcabot.schemas.order import OrderResponse
from dcabot.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get(
    "",
    response_model=list[OrderResponse],
    summary="주문 기록 조회",
    description="전략이 제출한 매수/청산 주문 기록을 최신순으로 반환합니다. "
                "status 필터(FILLED/REJECTED)와 최대 건수를 지정할 수 있습니다.",
)
async def list_orders(
    status: str | None = None,
    limit: int = 50,
    session: AsyncSession = Depends(get_session),
):
    orders = await OrderService.get_orders(session, status=status, limit=limit)
    return [OrderResponse.model_validate(o) for o in orders]

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class OrderResponse(BaseModel):
    id: int = Field(..., description="주문 고유 ID")
    broker_order_id: str | None = Field(None, description="브로커 접수 주문번호")
    symbol: str = Field(..., description="종목 코드 (단주 종목은 접미사 포함)")
    side: str = Field(..., description="주문 방향 (BUY/SELL/CLOSE)")
    order_type: str = Field(..., description="주문 유형 (시장가 MARKET만 지원)")
    quantity: float = Field(..., description="주문 수량")
    price: float | None = Field(None, description="주문 시점 호가")
    filled_quantity: float = Field(..., description="체결 수량")
    filled_price: float | None = Field(None, description="체결 단가 (거부 시 null)")
    status: str = Field(..., description="주문 상태 (FILLED/REJECTED)")
    reject_reason: str | None = Field(None, description="주문 거부 사유 (REJECTED 상태일 때만)")
    source: str = Field(..., description="주문 출처 (strategy: 정기매수, stop_loss: 손절 청산)")
    reason: str = Field("", description="주문 사유")
    created_at: datetime = Field(..., description="주문 생성 시각 (UTC)")

    model_config = {"from_attributes": True}

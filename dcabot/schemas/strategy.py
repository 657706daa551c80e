from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StrategyStateResponse(BaseModel):
    name: str = Field(..., description="전략명")
    symbol: str = Field(..., description="매수 대상 종목")
    phase: str = Field(..., description="ACTIVE: 적립 중, HALTED: 손절 발동 후 정지")
    initialized: bool = Field(..., description="원장 복원 여부 (첫 틱 이후 true)")
    daily_investment: float = Field(..., description="일일 투자 금액 = 총 투자금 / 기간(일)")
    total_shares_bought: float = Field(0.0, description="누적 매수 수량")
    total_cost: float = Field(0.0, description="누적 매수 금액")
    average_price: float = Field(0.0, description="평균 매입 단가 = 누적 금액 / 누적 수량")
    stop_loss_price: float = Field(0.0, description="손절가 = 평균 단가 × (1 - 손절 비율)")
    last_buy_time: datetime | None = Field(None, description="마지막 매수 체결 시각 (UTC)")
    start_date: datetime | None = Field(None, description="매수 기간 시작 (UTC)")
    end_date: datetime | None = Field(None, description="매수 기간 종료 (UTC)")


class LiquidationResponse(BaseModel):
    submitted: int = Field(..., description="체결된 청산 주문 수")
    failed: int = Field(..., description="거부된 청산 주문 수")
    skipped: int = Field(..., description="호가 조회 불가로 건너뛴 주문 수")

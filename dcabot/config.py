from __future__ import annotations

from datetime import datetime

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Strategy (한 번의 실행 동안 불변)
    symbol: str = "SPY"
    total_investment: float = Field(9_000.0, gt=0)
    stop_loss_pct: float = Field(0.1, ge=0.0, le=1.0)
    duration_days: int = Field(90, gt=0)
    # 비워두면 프로세스 기동 후 첫 틱 시각을 시작일로 사용 (재기동 시 기간이 연장됨)
    start_date: datetime | None = None

    # Venue lot convention
    # 접미사로 끝나는 모든 종목을 단주 종목으로 간주 (suffix "F"이면 DEF도 DE의 단주로 해석됨)
    fractional_suffix: str = "F"
    round_lot_size: int = Field(100, gt=0)

    # Scheduler
    tick_interval_seconds: int = Field(60, gt=0)
    scheduler_timezone: str = "America/New_York"

    # Paper trading
    paper_balance: float = 100_000.0
    paper_commission_rate: float = 0.0005  # 0.05%
    paper_slippage: float = 0.0001

    # Database
    database_url: str = "sqlite+aiosqlite:///./dcabot.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000


settings = Settings()

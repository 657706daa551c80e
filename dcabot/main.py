from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import select

from dcabot.config import settings
from dcabot.database import async_session, engine, init_db
from dcabot.models.account import Account

logger = logging.getLogger(__name__)


async def _ensure_paper_account() -> None:
    async with async_session() as session:
        result = await session.execute(select(Account).limit(1))
        if result.scalar_one_or_none() is None:
            session.add(Account(
                name="default",
                cash=settings.paper_balance,
                initial_cash=settings.paper_balance,
                commission_rate=settings.paper_commission_rate,
            ))
            await session.commit()
            logger.info("Created default paper account")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Starting dcabot (symbol=%s budget=%.2f days=%d stop_loss=%.2f%%)",
        settings.symbol, settings.total_investment, settings.duration_days,
        settings.stop_loss_pct * 100,
    )

    await init_db()
    logger.info("Database tables ready")

    await _ensure_paper_account()

    from dcabot.strategies.runner import get_runner
    runner = get_runner()
    await runner.strategy.broker.connect()

    from dcabot.scheduler.scheduler import start_scheduler
    scheduler = start_scheduler()

    yield

    # Shutdown
    if scheduler.running:
        scheduler.shutdown(wait=False)
    await runner.strategy.broker.disconnect()
    await engine.dispose()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="dcabot",
        version="0.1.0",
        lifespan=lifespan,
    )

    from dcabot.api.router import api_router
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

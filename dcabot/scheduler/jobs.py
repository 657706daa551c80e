from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from dcabot.config import settings

logger = logging.getLogger(__name__)


async def run_strategy_tick():
    """Deliver one price tick to the strategy."""
    from dcabot.strategies.runner import get_runner
    runner = get_runner()
    await runner.run_tick()


def register_jobs(scheduler: AsyncIOScheduler):
    # 틱은 겹치지 않음: 이전 틱이 끝나기 전 도래한 실행은 건너뜀
    scheduler.add_job(
        run_strategy_tick,
        "interval",
        seconds=settings.tick_interval_seconds,
        id="strategy_tick",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )

    logger.info("Registered scheduled jobs")

from __future__ import annotations

from fastapi import APIRouter

from dcabot.api.system import router as system_router
from dcabot.api.orders import router as orders_router
from dcabot.api.strategies import router as strategies_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(orders_router)
api_router.include_router(strategies_router)

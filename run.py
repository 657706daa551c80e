"""Entry point for the dcabot service."""

import uvicorn

from dcabot.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "dcabot.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level="info",
    )

"""Run the report service locally with auto-reload in debug mode."""
from __future__ import annotations

import logging

import uvicorn

from dailyreport.config import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    if not settings.FONT_PATH.is_file():
        logger.warning("Report font %s is missing; Arabic text will not render. Run scripts/setup_env.py.", settings.FONT_PATH)
    uvicorn.run(
        "dailyreport.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        reload_dirs=["dailyreport"] if settings.DEBUG else None,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()

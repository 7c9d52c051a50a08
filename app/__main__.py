"""Run the relay with uvicorn: ``python -m app``."""

import uvicorn

from app.config import settings
from app.logging_config import configure_logging


def main() -> None:
    # uvicorn logs before the lifespan runs; route those lines through structlog too.
    configure_logging(
        json_logs=not settings.debug,
        log_level=settings.log_level,
        service=settings.app_name,
    )
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

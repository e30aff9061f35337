from __future__ import annotations

import logging
import sys

import uvicorn

from syncsenta_ai.domain.exceptions import ConfigurationError
from syncsenta_ai.infrastructure.config import get_settings


def main() -> None:
    """Start the uvicorn ASGI server."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level="ERROR")
        logging.getLogger(__name__).error("Refusing to start: %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    uvicorn.run(
        "syncsenta_ai.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

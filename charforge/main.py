"""
CharForge - Main Application Entry Point

Loads the environment, configures logging and exposes the ASGI ``app``.
``main()`` is the ``charforge`` console script and serves the app with
uvicorn using ServerConfig.
"""

import uvicorn
from dotenv import load_dotenv

load_dotenv()

# pylint: disable=wrong-import-position
from .app.factory import create_app  # noqa: E402
from .config import get_config  # noqa: E402
from .structured_logging.enhanced_logging_config import get_logger, setup_enhanced_logging  # noqa: E402

config = get_config()
setup_enhanced_logging(config.to_legacy_dict())

logger = get_logger(__name__)
logger.info("Logging setup completed", environment=config.logging.environment)

app = create_app()


def main() -> None:
    """Run the CharForge API server."""
    logger.info("Starting uvicorn", host=config.server.host, port=config.server.port)
    uvicorn.run(
        "charforge.main:app",
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

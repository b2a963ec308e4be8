"""
Module runner to start the FastAPI server.

Usage:
    python -m tx_vault.run
    tx-vault
"""
from dotenv import load_dotenv
import uvicorn

from .core.logging import get_logger
from .core.settings import get_settings

logger = get_logger(__name__)


# PUBLIC_INTERFACE
def main():
    """Entry point to start the FastAPI server with environment-based configuration."""
    load_dotenv()
    server = get_settings().server
    logger.info(
        "server_starting",
        extra={"host": server.HOST, "port": server.PORT, "reload": server.RELOAD, "log_level": server.LOG_LEVEL},
    )
    # reload needs an import string rather than an app object
    uvicorn.run(
        "tx_vault.app:app",
        host=server.HOST,
        port=server.PORT,
        reload=server.RELOAD,
        log_level=server.LOG_LEVEL,
    )


if __name__ == "__main__":
    main()

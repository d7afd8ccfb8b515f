"""Local development server for the PMS endpoints."""

from http.server import ThreadingHTTPServer
from typing import Optional

from api.pms import handler
from src.services.task_repository import TaskRepository, get_task_repository
from src.utils.config import AppConfig
from src.utils.logging import get_structured_logger, setup_logging

logger = get_structured_logger(__name__)


def create_server(config: AppConfig, repository: Optional[TaskRepository] = None) -> ThreadingHTTPServer:
    """Bind a threaded server whose handler shares one repository."""
    request_handler = type("PMSRequestHandler", (handler,), {"repository": repository or get_task_repository()})
    return ThreadingHTTPServer((config.host, config.port), request_handler)


def main() -> None:
    setup_logging()
    config = AppConfig.from_env()
    server = create_server(config)
    logger.info("Server is running", host=config.host, port=config.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server shutting down")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()

import logging

import uvicorn

from brokerbridge.config import load_config

# Uvicorn's own loggers only show ERROR and CRITICAL; the broker logs requests itself
uvicorn_loggers = [
    logging.getLogger("uvicorn"),
    logging.getLogger("uvicorn.error"),
    logging.getLogger("uvicorn.access"),
    logging.getLogger("uvicorn.asgi"),
]

for uvicorn_logger in uvicorn_loggers:
    uvicorn_logger.setLevel(logging.ERROR)
    # Remove handlers to prevent duplicate output
    uvicorn_logger.handlers = []

config = load_config()

if __name__ == "__main__":
    uvicorn.run(
        "brokerbridge.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=False,
        access_log=False,
        log_config=None,
    )

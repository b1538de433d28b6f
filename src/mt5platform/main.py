"""Application entry point for the MT5 platform API server."""

import uvicorn

from mt5platform.app import App
from mt5platform.config import Config
from mt5platform.logging import setup_logging, uvicorn_log_config
from mt5platform.web.server import create_fastapi_app


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    fastapi_app = create_fastapi_app(App(config), config)
    uvicorn.run(fastapi_app, host=config.host, port=config.port, log_config=uvicorn_log_config(config.debug))


if __name__ == "__main__":
    main()

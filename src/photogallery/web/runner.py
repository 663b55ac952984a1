"""Uvicorn server runner for the gallery API."""

from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from photogallery.app import App
from photogallery.config import Config
from photogallery.web.server import create_fastapi_app


def build_log_config() -> dict[str, Any]:
    log_config = {**LOGGING_CONFIG, "formatters": {name: dict(fmt) for name, fmt in LOGGING_CONFIG["formatters"].items()}}
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    return log_config


def run_server(app: App, config: Config) -> None:
    """Serve the API, trusting forwarded client addresses only from configured proxies."""
    uvicorn.run(
        create_fastapi_app(app, config),
        host=config.host,
        port=config.port,
        log_config=build_log_config(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips=config.forwarded_allow_ips,
    )

"""Application entry point for the photo gallery backend server."""

from photogallery.app import App
from photogallery.config import Config
from photogallery.logging import setup_logging
from photogallery.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

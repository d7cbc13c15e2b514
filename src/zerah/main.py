"""Application entry point for the Zerah backend server."""

from zerah.app import App
from zerah.config import Config
from zerah.logging import setup_logging
from zerah.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

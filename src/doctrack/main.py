"""Application entry point for the DocTrack backend server."""

from doctrack.app import App
from doctrack.config import Config
from doctrack.logging import setup_logging
from doctrack.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

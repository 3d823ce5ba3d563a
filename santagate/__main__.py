from loguru import logger

from . import create_app
from .config import load_settings
from .logging import setup_logging


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)

    app = create_app(settings)
    logger.info("Serving on {host}:{port}", host=settings.host, port=settings.port)
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    main()

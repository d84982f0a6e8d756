import logging

from app.utils.config.env import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
    # pymongo heartbeats are noisy at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)

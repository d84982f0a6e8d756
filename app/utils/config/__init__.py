from app.utils.config.env import Settings, settings
from app.utils.config.logging import configure_logging

__all__ = ["Settings", "settings", "configure_logging"]

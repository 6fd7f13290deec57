from .settings import settings
from .logger import logger

__all__ = ["settings", "logger"]

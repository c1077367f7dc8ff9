# Core modules

from .config import Settings, get_settings, settings
from .session import CartSession

__all__ = ["Settings", "get_settings", "settings", "CartSession"]

"""Core app configuration, database wiring, security and errors."""

from storefront.core.config import Settings, get_settings
from storefront.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]

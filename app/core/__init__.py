"""Core: config and application bootstrap.

Single place for settings, lifespan and exception handler wiring.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]

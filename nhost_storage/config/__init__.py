"""
Client configuration using Pydantic settings.

Configuration comes from environment variables with sensible defaults.
"""

from .settings import StorageSettings, get_settings

__all__ = ["StorageSettings", "get_settings"]

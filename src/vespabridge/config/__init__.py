"""Configuration management."""

from vespabridge.config.settings import Settings

__all__ = ["Settings"]

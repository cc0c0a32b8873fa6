"""Configuration package for the proxy."""

from .config import Config, ConfigError, ServerConfig

__all__ = ["Config", "ConfigError", "ServerConfig"]

"""Configuration module for the identity admin API."""
from .settings import AppConfig, ConfigurationError, load_settings

__all__ = ["AppConfig", "ConfigurationError", "load_settings"]

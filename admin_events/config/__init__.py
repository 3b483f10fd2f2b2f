"""Configuration module for the admin event interpreter."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]

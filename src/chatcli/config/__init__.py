from .settings import AppSettings, ConfigurationError, load_settings, configure_logging

__all__ = ["AppSettings", "ConfigurationError", "load_settings", "configure_logging"]

"""Converter configuration: model, YAML loader and errors."""

from .config_loader import ConfigLoader
from .errors import ConfigError, ConfigurationError, FilesystemError
from .models import DEFAULT_CONFIG, ConverterConfig

__all__ = [
    'ConfigError',
    'ConfigLoader',
    'ConfigurationError',
    'ConverterConfig',
    'DEFAULT_CONFIG',
    'FilesystemError',
]

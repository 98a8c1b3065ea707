"""YAML configuration loading and validation.

This module handles loading and saving converter configuration from YAML
files. Every key is optional; missing keys fall back to the ConverterConfig
defaults and unknown keys are rejected so typos surface immediately.
"""

import os
import re
from dataclasses import asdict, fields
from typing import Any, Dict

import yaml

from .errors import ConfigError, FilesystemError
from .models import ConverterConfig


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        root_class: "recordmark-content"
        allowed_url_schemes: ["http", "https"]
        internal_link_prefix: "/wiki/"
        references_title: "References"
        citations_title: "Citations"
        external_links_new_tab: true
        front_matter: true
        math: true
        table_of_contents: false
        words_per_minute: 200
    """

    BOOL_FIELDS = {'external_links_new_tab', 'front_matter', 'math', 'table_of_contents'}

    STRING_FIELDS = {'root_class', 'internal_link_prefix', 'references_title', 'citations_title'}

    _CLASS_NAME = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*$')
    _SCHEME = re.compile(r'^[a-z][a-z0-9+.-]*$')

    @classmethod
    def load(cls, config_path: str) -> ConverterConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ConverterConfig with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        # An empty file means "all defaults"
        if config_dict is None:
            return ConverterConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls.parse(config_dict)

    @classmethod
    def save(cls, config_path: str, config: ConverterConfig) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            config: ConverterConfig to save

        Raises:
            FilesystemError: If file cannot be written
        """
        config_dict = asdict(config)
        config_dict['allowed_url_schemes'] = list(config.allowed_url_schemes)

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    config_dir,
                    'create_directory',
                    str(e)
                )

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(
                config_path,
                'write',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'write',
                str(e)
            )

    @classmethod
    def parse(cls, config_dict: Dict[str, Any]) -> ConverterConfig:
        """Parse and validate a configuration dictionary.

        Args:
            config_dict: Raw configuration dictionary from YAML

        Returns:
            Validated ConverterConfig

        Raises:
            ConfigError: If configuration is invalid
        """
        known_fields = {f.name for f in fields(ConverterConfig)}
        unknown = set(config_dict.keys()) - known_fields
        if unknown:
            raise ConfigError(
                f"Unknown fields: {', '.join(sorted(str(k) for k in unknown))}"
            )

        values: Dict[str, Any] = {}

        for name in cls.BOOL_FIELDS & set(config_dict):
            value = config_dict[name]
            if not isinstance(value, bool):
                raise ConfigError(
                    f"Field '{name}' must be a boolean, got {type(value).__name__}",
                    name
                )
            values[name] = value

        for name in cls.STRING_FIELDS & set(config_dict):
            value = config_dict[name]
            if value is None:
                value = ''
            if not isinstance(value, str):
                raise ConfigError(
                    f"Field '{name}' must be a string, got {type(value).__name__}",
                    name
                )
            values[name] = value

        if 'root_class' in values and not cls._CLASS_NAME.match(values['root_class']):
            raise ConfigError(
                f"Invalid CSS class name: {values['root_class']!r}",
                'root_class'
            )

        for name in ('references_title', 'citations_title'):
            if name in values and not values[name].strip():
                raise ConfigError(f"Field '{name}' cannot be empty", name)

        if 'allowed_url_schemes' in config_dict:
            schemes_raw = config_dict['allowed_url_schemes']
            if not isinstance(schemes_raw, list) or not schemes_raw:
                raise ConfigError(
                    "Field 'allowed_url_schemes' must be a non-empty list",
                    'allowed_url_schemes'
                )
            schemes = []
            for i, scheme in enumerate(schemes_raw):
                scheme = str(scheme).strip().lower()
                if not cls._SCHEME.match(scheme):
                    raise ConfigError(
                        f"Invalid URL scheme {scheme!r}",
                        f'allowed_url_schemes[{i}]'
                    )
                schemes.append(scheme)
            values['allowed_url_schemes'] = tuple(schemes)

        if 'words_per_minute' in config_dict:
            try:
                words_per_minute = int(config_dict['words_per_minute'])
            except (ValueError, TypeError) as e:
                raise ConfigError(
                    f"Invalid field type: {str(e)}",
                    'words_per_minute'
                )
            if words_per_minute < 1:
                raise ConfigError(
                    f"Field 'words_per_minute' must be at least 1, got {words_per_minute}",
                    'words_per_minute'
                )
            values['words_per_minute'] = words_per_minute

        return ConverterConfig(**values)

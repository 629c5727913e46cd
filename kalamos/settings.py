#!/usr/bin/env python3
"""
Settings loader for Kalamos.
Supports configuration from kalamos.yml, kalamos.yaml, kalamos.json or config.toml
in the site root.
"""

import json
import logging
import os
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .markdown import DEFAULT_THEME


@dataclass(frozen=True)
class RenderConfig:
    """Directory names and options for one render pass, relative to the site root."""

    layouts_dir: str = 'layouts'
    posts_dir: str = 'posts'
    pages_dir: str = 'pages'
    # source directory -> destination relative to the output root
    copy_dirs: Dict[str, str] = field(default_factory=lambda: {'assets': 'assets', 'direct_copy': ''})
    highlight_theme: str = DEFAULT_THEME
    minify: bool = False


class KalamosSettings:
    """Load and manage Kalamos configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'output': 'output',
        'layouts': 'layouts',
        'posts': 'posts',
        'pages': 'pages',
        'assets': 'assets',
        'direct_copy': 'direct_copy',
        'highlight_theme': DEFAULT_THEME,
        'minify': False,
        'host': '127.0.0.1',
        'port': 8000,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['kalamos.yml', 'kalamos.yaml', 'kalamos.json', 'config.toml']

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None
        self.logger = logging.getLogger('Kalamos.settings')

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings

        Raises:
            ConfigError: The configuration file exists but cannot be loaded
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if not isinstance(loaded_settings, dict):
                raise ConfigError("Configuration must be a mapping", config_file)
            # Merge with defaults, giving preference to loaded settings
            self.settings.update(loaded_settings)
            self.logger.info(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            if file_ext == '.toml':
                with open(config_path, 'rb') as f:
                    return tomllib.load(f)
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file ({e})", config_path) from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file ({e})", config_path) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in configuration file ({e})", config_path) from e
        except OSError as e:
            raise ConfigError(f"Error reading configuration file ({e})", config_path) from e
        raise ConfigError(f"Unsupported config file format: {file_ext}", config_path)

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', 'json' or 'toml')

        Returns:
            Path to created sample config file
        """
        if file_format not in ['yml', 'yaml', 'json', 'toml']:
            raise ConfigError(f"Unsupported config file format: {file_format}")

        if file_format == 'toml':
            config_path = os.path.join(self.config_dir, 'config.toml')
        else:
            config_path = os.path.join(self.config_dir, f'kalamos.{file_format}')

        sample_config = self.DEFAULT_SETTINGS.copy()

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    # Custom YAML output with comments
                    f.write("# Kalamos Configuration File\n\n")
                    f.write("# Build settings\n")
                    f.write("output: output\n\n")
                    f.write("# Site layout, relative to the site root\n")
                    f.write("layouts: layouts\n")
                    f.write("posts: posts\n")
                    f.write("pages: pages\n")
                    f.write("assets: assets\n")
                    f.write("direct_copy: direct_copy\n\n")
                    f.write("# Rendering\n")
                    f.write(f"highlight_theme: {DEFAULT_THEME}  # any Pygments style name\n")
                    f.write("minify: false\n\n")
                    f.write("# Development server\n")
                    f.write("host: 127.0.0.1\n")
                    f.write("port: 8000\n")
                elif file_format == 'toml':
                    f.write("# Kalamos Configuration File\n\n")
                    for key, value in sample_config.items():
                        if isinstance(value, bool):
                            f.write(f"{key} = {'true' if value else 'false'}\n")
                        elif isinstance(value, int):
                            f.write(f"{key} = {value}\n")
                        else:
                            f.write(f'{key} = "{value}"\n')
                else:
                    json.dump(sample_config, f, indent=2)
        except OSError as e:
            raise ConfigError(f"Error writing configuration file ({e})", config_path) from e

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None:
                merged[key] = value

        return merged

    @staticmethod
    def to_render_config(settings: Dict[str, Any]) -> RenderConfig:
        """Build the RenderConfig for a merged settings dictionary."""
        copy_dirs = {}
        if settings.get('assets'):
            copy_dirs[settings['assets']] = 'assets'
        if settings.get('direct_copy'):
            copy_dirs[settings['direct_copy']] = ''
        return RenderConfig(
            layouts_dir=settings['layouts'],
            posts_dir=settings['posts'],
            pages_dir=settings['pages'],
            copy_dirs=copy_dirs,
            highlight_theme=settings['highlight_theme'],
            minify=bool(settings['minify']),
        )

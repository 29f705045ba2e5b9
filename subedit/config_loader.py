"""Handles loading configuration from YAML files."""

import copy
import yaml
import os
import logging
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'log_dir': 'logs',
    'log_file': 'subedit.log',
    'output_dir': 'exports',
    'render_job_dir': None, # Defaults to output_dir
    'ffprobe_path': None, # None means 'ffprobe' from PATH
    'probe_duration': True,
    'max_upload_mb': 200,
    'default_language': 'English',
    'style': {
        'font': 'Arial',
        'size': 'medium',
        'color': '#FFFFFF',
        'background_color': '#000000AA',
        'position': 'bottom',
    },
}

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if config is None:
            # An empty file is a valid "use the defaults".
            config = {}
        if not isinstance(config, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

    def load_with_defaults(self, config_path: str, required: bool = True) -> dict:
        """
        Loads a configuration file and merges it over DEFAULT_CONFIG.

        The 'style' section is merged key by key so a file may override a
        single style attribute.

        Args:
            config_path: The path to the YAML configuration file.
            required: When False, a missing file yields the defaults.

        Raises:
            FileNotFoundError: If the file is missing and required is True.
            ConfigurationError: If the file is invalid.
        """
        config = copy.deepcopy(DEFAULT_CONFIG)
        if not required and not os.path.exists(config_path):
            logger.info(f"No configuration file at {config_path}; using defaults.")
            return config

        loaded = self.load_config(config_path)
        style = loaded.pop('style', None) or {}
        if not isinstance(style, dict):
            raise ConfigurationError(f"'style' in {config_path} must be a mapping.")
        config.update(loaded)
        config['style'].update(style)
        return config

# slotsim/infrastructure/config/loaders/yaml_loader.py
import os
import yaml
import json
import logging
from typing import Dict, Any, List, Optional

from slotsim.domain.exceptions import ConfigurationError

YAML_EXTENSIONS = ('.yaml', '.yml')


class ConfigError(ConfigurationError):
    """Base class for errors raised while reading machine or simulation files."""
    pass


class FileNotFoundConfigError(ConfigError):
    """A configuration file or directory does not exist."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"No such configuration file or directory: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """A YAML document could not be parsed."""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Invalid YAML in {file_path}: {yaml_error}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """A configuration document does not match its schema."""
    def __init__(self, file_path, errors):
        self.file_path = file_path
        self.errors = errors
        details = "".join(f"\n  - {error}" for error in errors)
        self.message = f"{file_path} does not match its schema:{details}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    Reads machine and simulation YAML files, optionally checking them
    against a JSON schema.

    Strict mode (the default) raises on a missing, unparsable or invalid
    file. With strict mode off, a caller-supplied default is returned for
    missing or unparsable files, and schema violations are only logged.
    """
    def __init__(self, schema_validator=None):
        """
        Initialize the loader.

        Args:
            schema_validator: SchemaValidator used whenever a schema path is given
        """
        self.logger = logging.getLogger("infrastructure.config.loader")
        self.schema_validator = schema_validator
        self.strict_mode = True

    def set_strict_mode(self, strict: bool = True):
        self.strict_mode = strict
        return self

    def load_file(self, file_path: str, schema_path: Optional[str] = None,
                  default_config: Optional[Dict[str, Any]] = None,
                  apply_defaults: bool = False) -> Dict[str, Any]:
        """
        Load one YAML file.

        Args:
            file_path: Path to the YAML file
            schema_path: Optional JSON schema the document must satisfy
            default_config: Substitute for a missing or unparsable file,
                used only when strict mode is off
            apply_defaults: Fill in schema defaults before validating

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundConfigError: File is missing
            YamlParseError: File is not valid YAML
            SchemaValidationError: Document does not match the schema
        """
        try:
            config = self._read_yaml(file_path)
        except (FileNotFoundConfigError, YamlParseError) as e:
            self.logger.error(e.message)
            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Falling back to default configuration for {file_path}")
                return default_config
            raise

        if config is None:
            self.logger.warning(f"{file_path} is empty")
            config = default_config if default_config is not None else {}

        if schema_path and self.schema_validator:
            config = self._validate(file_path, config, schema_path, apply_defaults)

        self.logger.debug(f"Loaded configuration {file_path}")
        return config

    def _read_yaml(self, file_path: str) -> Any:
        if not os.path.isfile(file_path):
            raise FileNotFoundConfigError(file_path)

        with open(file_path, 'r', encoding='utf-8') as file:
            try:
                return yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise YamlParseError(file_path, e) from e

    def _validate(self, file_path: str, config: Dict[str, Any], schema_path: str,
                  apply_defaults: bool) -> Dict[str, Any]:
        schema = self._load_schema(schema_path)

        if apply_defaults:
            is_valid, errors, config = self.schema_validator.validate_with_defaults(config, schema)
        else:
            is_valid, errors = self.schema_validator.validate(config, schema)

        if is_valid:
            self.logger.debug(f"{file_path} matches schema {os.path.basename(schema_path)}")
            return config

        error = SchemaValidationError(file_path, errors)
        if self.strict_mode:
            raise error

        self.logger.warning(f"{error.message}\nContinuing with the unvalidated document.")
        return config

    def _load_schema(self, schema_path: str) -> Dict[str, Any]:
        """
        Read a JSON schema file.

        Raises:
            FileNotFoundConfigError: Schema file is missing
            ConfigError: Schema file is not valid JSON
        """
        if not os.path.isfile(schema_path):
            self.logger.error(f"Missing schema {schema_path}")
            raise FileNotFoundConfigError(schema_path, f"Schema file not found: {schema_path}")

        with open(schema_path, 'r', encoding='utf-8') as file:
            try:
                return json.load(file)
            except json.JSONDecodeError as e:
                self.logger.error(f"Schema {schema_path} is not valid JSON: {e}")
                raise ConfigError(f"Schema {schema_path} is not valid JSON: {e}") from e

    def load_directory(self, directory_path: str, schema_path: Optional[str] = None,
                       ignore_errors: bool = False) -> Dict[str, Dict[str, Any]]:
        """
        Load every YAML file of a directory, e.g. a folder of machine definitions.

        Args:
            directory_path: Directory to scan (not recursive)
            schema_path: Optional schema applied to each file
            ignore_errors: Skip broken files instead of raising

        Returns:
            Mapping of file stem to configuration, in file name order

        Raises:
            FileNotFoundConfigError: Directory is missing (strict mode)
            ConfigError: A file failed to load (strict mode, ignore_errors off)
        """
        if not os.path.isdir(directory_path):
            if not self.strict_mode:
                self.logger.warning(f"Configuration directory {directory_path} does not exist")
                return {}
            raise FileNotFoundConfigError(directory_path)

        configs = {}
        failures = []
        for filename in sorted(os.listdir(directory_path)):
            if not filename.endswith(YAML_EXTENSIONS):
                continue

            try:
                configs[os.path.splitext(filename)[0]] = self.load_file(
                    os.path.join(directory_path, filename), schema_path
                )
            except ConfigError as e:
                if self.strict_mode and not ignore_errors:
                    raise
                failures.append(f"{filename}: {e}")

        for failure in failures:
            self.logger.error(f"Skipped {failure}")

        self.logger.info(f"Loaded {len(configs)} configurations from {directory_path}, {len(failures)} skipped")
        return configs

    def load_with_fallbacks(self, file_paths: List[str], schema_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Return the first of several candidate files that loads cleanly.

        Raises:
            ConfigError: No candidate loaded and strict mode is on
        """
        failures = []
        for path in file_paths:
            try:
                config = self.load_file(path, schema_path)
            except ConfigError as e:
                failures.append(f"{path}: {e}")
                continue

            self.logger.info(f"Using configuration {path}")
            return config

        message = "No candidate configuration could be loaded:" + "".join(f"\n  - {f}" for f in failures)
        if self.strict_mode:
            self.logger.error(message)
            raise ConfigError(message)

        self.logger.warning(f"{message}\nContinuing with an empty configuration.")
        return {}

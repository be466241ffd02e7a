"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_file: Optional[str] = None

    # Code style settings
    indent_size: int = 4
    add_comments: bool = True

    # Traversal settings
    root_class: str = "LuaGameScript"
    root_object: str = "game"
    root_name: str = "PrototypeExport"
    root_attribute_suffix: Optional[str] = None
    identifying_field: str = "name"

    # Export context
    locale: str = "en"
    export_icons: bool = False

    # Backend-specific settings
    language_config: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported backends."""
        self._configs["lua"] = {
            "indent_size": 4,
            "add_comments": False,
            "root_object": "game",
            "language_config": {
                "runtime_module": "export",
            },
        }

        self._configs["python"] = {
            "indent_size": 4,
            "add_comments": True,
            "root_name": "PrototypeExport",
            "language_config": {
                "pydantic_extra_forbid": False,
                "pydantic_use_alias": True,
                "field_descriptions": False,
            },
        }

    def get_config(self, language: str, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a backend.

        Args:
            language: Backend name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the backend
        """
        base_config = copy.deepcopy(self._configs.get(language, {}))

        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _merge(target: Dict[str, Any], overrides: Dict[str, Any]):
        for key, value in overrides.items():
            if key == "language_config" and isinstance(value, dict):
                target.setdefault("language_config", {}).update(value)
            else:
                target[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        language_args = dict(config_dict.get("language_config", {}))

        # Unknown top-level keys are treated as backend settings
        for key, value in config_dict.items():
            if key == "language_config":
                continue
            if key in known_fields:
                config_args[key] = value
            else:
                language_args[key] = value

        config_args["language_config"] = language_args
        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}")

    def list_languages(self) -> List[str]:
        """Get list of backends with default settings."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """
        Validate configuration for a backend.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        for key in ("root_class", "root_object", "root_name", "identifying_field"):
            value = getattr(config, key)
            if not value or not value.isidentifier():
                warnings.append(f"Invalid {key}: {value!r}")

        if not config.locale:
            warnings.append("Locale must not be empty")

        if language == "python":
            for key in ("pydantic_extra_forbid", "pydantic_use_alias", "field_descriptions"):
                value = config.language_config.get(key)
                if value is not None and not isinstance(value, bool):
                    warnings.append(f"Invalid {key}: expected a boolean, got {value!r}")

        elif language == "lua":
            module = config.language_config.get("runtime_module", "export")
            if not isinstance(module, str) or not module.isidentifier():
                warnings.append(f"Invalid runtime_module: {module!r}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(language: str, custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Backend name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the backend
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


def validate_config(config: GeneratorConfig, language: str) -> List[str]:
    """Validate a configuration with the global manager."""
    return get_config_manager().validate_config(config, language)

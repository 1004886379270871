#!/usr/bin/env python3
"""
Configuration Management Module for BitBadges Toolkit CLI

Settings are layered, later layers winning key by key:

    defaults -> profile (mainnet/testnet) -> config file -> BBTK_* variables

The first config file found is used: ``--config-file`` when given, else
``.bbtk.yml``/``.bbtk.json`` in the working directory, else
``~/.bbtk/config.yml``/``~/.bbtk/config.json``. The API key is never part
of the configuration; it is read from ``BITBADGES_API_KEY`` only.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

import yaml

from validator.core import ValidationEngine

ENV_PREFIX = 'BBTK_'
API_KEY_ENV = 'BITBADGES_API_KEY'

OUTPUT_FORMATS = ['table', 'json', 'yaml']
YAML_SUFFIXES = ('.yml', '.yaml')

DEFAULT_CONFIG = {
    'ledger': {
        'api_url': 'https://api.bitbadges.io',
        'testnet': False,
        'timeout': 30,
        'max_retries': 3,
        'backoff_factor': 1.0
    },
    'cli': {
        'output_format': 'table'
    },
    'validator': {
        'disabled_rules': []
    }
}

PROFILES = {
    'mainnet': {'ledger': {'testnet': False}},
    'testnet': {'ledger': {'testnet': True}},
}


def config_search_paths() -> List[Path]:
    """Config file candidates, project files before user files."""
    project, user = Path.cwd(), Path.home() / '.bbtk'
    return [
        project / '.bbtk.yml',
        project / '.bbtk.json',
        user / 'config.yml',
        user / 'config.json',
    ]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_ledger(section: Dict[str, Any]) -> List[str]:
    problems = []
    api_url = section.get('api_url')
    if not isinstance(api_url, str) or not api_url.startswith(('http://', 'https://')):
        problems.append(f"Invalid ledger API URL: {api_url}")
    if not isinstance(section.get('testnet'), bool):
        problems.append("ledger.testnet must be true or false")
    if not (_is_int(section.get('timeout')) and section['timeout'] > 0):
        problems.append("ledger.timeout must be a positive integer")
    if not (_is_int(section.get('max_retries')) and section['max_retries'] >= 0):
        problems.append("ledger.max_retries must be a non-negative integer")
    if not (_is_number(section.get('backoff_factor')) and section['backoff_factor'] >= 0):
        problems.append("ledger.backoff_factor must be a non-negative number")
    return problems


def _check_cli(section: Dict[str, Any]) -> List[str]:
    output_format = section.get('output_format')
    if output_format not in OUTPUT_FORMATS:
        return [f"Invalid output format: {output_format}"]
    return []


def _check_validator(section: Dict[str, Any]) -> List[str]:
    disabled_rules = section.get('disabled_rules')
    if not isinstance(disabled_rules, list):
        return ["validator.disabled_rules must be a list of rule names"]

    known_rules = ValidationEngine().rule_registry
    return [f"Unknown rule in validator.disabled_rules: {name}"
            for name in disabled_rules if name not in known_rules]


SECTION_CHECKS: Dict[str, Callable[[Dict[str, Any]], List[str]]] = {
    'ledger': _check_ledger,
    'cli': _check_cli,
    'validator': _check_validator,
}


def deep_merge(*layers: Dict[str, Any]) -> Dict[str, Any]:
    """Merge mappings key by key; nested mappings merge, anything else is replaced."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = deep_merge(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
    return merged


def parse_env_value(value: str) -> Union[str, int, float, bool, list, dict]:
    """JSON literals first (numbers, lists), then yes/no booleans, else the raw string."""
    try:
        return json.loads(value)
    except ValueError:
        pass

    lowered = value.lower()
    if lowered in ('true', 'yes'):
        return True
    if lowered in ('false', 'no'):
        return False
    return value


class ConfigurationManager:
    """Layered CLI configuration with dot-path access."""

    def __init__(self, config_file: Optional[str] = None, profile: Optional[str] = None):
        """
        Args:
            config_file: Explicit config file, replacing the search path
            profile: Named profile applied over the defaults
        """
        self.logger = logging.getLogger('bbtk-cli.config')
        self.config_file = config_file
        self.profile = profile
        self._merged: Optional[Dict[str, Any]] = None
        self._sources: List[str] = []

    def load(self) -> Dict[str, Any]:
        """Merge every layer once and cache the result."""
        if self._merged is None:
            layers = list(self._layers())
            self._sources = [source for source, _ in layers]
            self._merged = deep_merge(*(data for _, data in layers))
        return self._merged

    def _layers(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        yield 'defaults', DEFAULT_CONFIG

        if self.profile in PROFILES:
            self.logger.debug(f"Applying profile {self.profile}")
            yield f'profile:{self.profile}', PROFILES[self.profile]
        elif self.profile:
            self.logger.warning(f"Unknown configuration profile: {self.profile}")

        config_path = self._find_config_file()
        if config_path is not None:
            data = self._read_config_file(config_path)
            if data:
                yield f'file:{config_path}', data

        env_data = self._environment_layer()
        if env_data:
            yield 'environment', env_data

    def _find_config_file(self) -> Optional[Path]:
        if self.config_file:
            path = Path(self.config_file)
            if not path.exists():
                self.logger.warning(f"Config file not found: {path}")
                return None
            return path

        return next((path for path in config_search_paths() if path.exists()), None)

    def _read_config_file(self, path: Path) -> Optional[Dict[str, Any]]:
        if path.suffix not in YAML_SUFFIXES + ('.json',):
            self.logger.warning(f"Unsupported config file type: {path}")
            return None

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) if path.suffix in YAML_SUFFIXES else json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self.logger.error(f"Could not read config file {path}: {e}")
            return None

        if data is not None and not isinstance(data, dict):
            self.logger.error(f"Config file {path} must contain a mapping")
            return None

        self.logger.debug(f"Read config file {path}")
        return data

    def _environment_layer(self) -> Dict[str, Any]:
        """
        Settings from ``BBTK_<SECTION>_<KEY>`` variables.

        Only the first underscore splits section from key, so
        ``BBTK_LEDGER_MAX_RETRIES`` sets ``ledger.max_retries``.
        """
        layer: Dict[str, Any] = {}

        for name, raw in os.environ.items():
            if not name.startswith(ENV_PREFIX):
                continue

            section, _, key = name[len(ENV_PREFIX):].lower().partition('_')
            if not key:
                self.logger.debug(f"Ignoring {name}: no section/key split")
                continue

            layer.setdefault(section, {})[key] = parse_env_value(raw)

        return layer

    def get(self, key_path: str, default: Any = None) -> Any:
        """Look up a dot path such as ``ledger.timeout``."""
        node: Any = self.load()
        for key in key_path.split('.'):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def set(self, key_path: str, value: Any):
        """Override a dot path in the loaded configuration (not persisted until save)."""
        *parents, leaf = key_path.split('.')
        node = self.load()
        for key in parents:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[leaf] = value

    def save(self, path: Optional[str] = None, format: str = 'yaml'):
        """
        Write the merged configuration.

        Args:
            path: Target file; defaults to the project config file for the format
            format: 'yaml' or 'json'
        """
        target = Path(path) if path else Path.cwd() / ('.bbtk.yml' if format == 'yaml' else '.bbtk.json')
        target.parent.mkdir(parents=True, exist_ok=True)

        with open(target, 'w') as f:
            if format == 'yaml':
                yaml.safe_dump(self.load(), f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(self.load(), f, indent=2)

        self.logger.info(f"Configuration written to {target}")

    def validate(self) -> List[str]:
        """Problems found in the merged configuration; empty when it is usable."""
        config = self.load()
        problems = []
        for section, check in SECTION_CHECKS.items():
            value = config.get(section)
            problems.extend(check(value if isinstance(value, dict) else {}))
        return problems

    def get_sources(self) -> List[str]:
        """Layers that contributed to the configuration, lowest precedence first."""
        self.load()
        return self._sources

    def redacted(self) -> Dict[str, Any]:
        """Configuration for display, with the API key presence shown but not its value."""
        config = copy.deepcopy(self.load())
        config.setdefault('ledger', {})['api_key'] = '***' if os.getenv(API_KEY_ENV) else None
        return config

    def reset(self):
        """Drop the cached merge so the next access reloads every layer."""
        self._merged = None
        self._sources = []

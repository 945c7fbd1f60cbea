"""Configuration for the inventory tracker.

Secrets and connection details come from the environment (a ``.env`` file
is loaded first if present). Non-sensitive settings may also be given in
a YAML file; environment variables win over the file. Fails fast with
clear error messages if required configuration is missing.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

BACKENDS = ("firebase", "json")
DEFAULT_CONFIG_FILE = "config.yaml"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class FirebaseConfig:
    """Connection descriptor for the Firebase Realtime Database."""
    database_url: str
    project_id: str | None = None
    credentials_path: str | None = None


@dataclass(frozen=True)
class StoreConfig:
    backend: str
    collection_path: str
    data_file: Path


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    store: StoreConfig
    logging: LoggingConfig
    firebase: FirebaseConfig | None = None


def _load_yaml_config(path: Path | None) -> dict:
    """Load the YAML settings file, or nothing if there is none."""
    if path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        if not default.exists():
            return {}
        path = default
    elif not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return data


def _setting(env: dict, key: str, section: dict, name: str, default=None):
    """Environment variable first, then the YAML section, then the default."""
    value = env.get(key)
    if value:
        return value
    value = section.get(name)
    if value is not None and value != "":
        return value
    return default


def load_config(
    env: dict | None = None,
    config_file: Path | None = None,
    use_dotenv: bool = True,
) -> AppConfig:
    """Load and validate all application configuration.

    Args:
        env: Environment mapping; defaults to ``os.environ``.
        config_file: YAML file to read; defaults to ``$INVTRACK_CONFIG`` or
            ``config.yaml`` in the working directory when it exists.
        use_dotenv: Load a ``.env`` file into the process environment first.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    if use_dotenv:
        load_dotenv()
    if env is None:
        env = dict(os.environ)

    if config_file is None and env.get("INVTRACK_CONFIG"):
        config_file = Path(env["INVTRACK_CONFIG"])
    yaml_config = _load_yaml_config(config_file)

    store_section = yaml_config.get("store", {}) or {}
    backend = str(_setting(env, "INVTRACK_BACKEND", store_section, "backend", "firebase")).lower()
    if backend not in BACKENDS:
        raise ConfigurationError(
            f"Unknown store backend '{backend}'. Expected one of: {', '.join(BACKENDS)}"
        )
    collection_path = str(
        _setting(env, "INVTRACK_COLLECTION", store_section, "collection", "products")
    ).strip("/")
    if not collection_path:
        raise ConfigurationError("Collection path must not be empty")
    store_config = StoreConfig(
        backend=backend,
        collection_path=collection_path,
        data_file=Path(
            _setting(env, "INVTRACK_DATA_FILE", store_section, "data_file", "data/products.json")
        ),
    )

    logging_section = yaml_config.get("logging", {}) or {}
    level = str(_setting(env, "INVTRACK_LOG_LEVEL", logging_section, "level", "WARNING")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log level '{level}'")
    logging_config = LoggingConfig(level=level)

    firebase_config = None
    if backend == "firebase":
        firebase_section = yaml_config.get("firebase", {}) or {}
        database_url = _setting(env, "FIREBASE_DATABASE_URL", firebase_section, "database_url")
        if not database_url:
            raise ConfigurationError(
                "Required environment variable 'FIREBASE_DATABASE_URL' is not set. "
                "Please add it to your .env file."
            )
        firebase_config = FirebaseConfig(
            database_url=str(database_url),
            project_id=_setting(env, "FIREBASE_PROJECT_ID", firebase_section, "project_id"),
            credentials_path=env.get("FIREBASE_CREDENTIALS")
            or env.get("GOOGLE_APPLICATION_CREDENTIALS")
            or None,
        )

    return AppConfig(
        store=store_config,
        logging=logging_config,
        firebase=firebase_config,
    )

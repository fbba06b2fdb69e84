"""Load the connector configuration from a YAML file.

The file holds a ``connector`` mapping of dotted property names. The password
may reference an environment variable as ``${VAR_NAME}``.
"""

import os
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from logminer_connect.connector_config import SourceConnectorConfig
from logminer_connect.exceptions import ConfigurationInvalid

PASSWORD_KEY = "db.user.password"


def _resolve_env_reference(key: str, value: Any) -> Any:
    """Replace a ``${VAR}`` value with the environment variable it names."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        resolved = os.environ.get(env_var, "")
        if not resolved:
            raise ConfigurationInvalid(
                f"Environment variable {env_var} not set for {key}", keys=[key]
            )
        return resolved
    return value


def read_properties(config_path: str) -> Dict[str, Any]:
    """Read the raw connector properties from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Dict[str, Any]: Property values keyed by dotted name.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationInvalid: If the YAML is malformed or has no ``connector`` section.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Connector configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationInvalid(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("connector"), dict):
        raise ConfigurationInvalid(
            f"Invalid connector configuration: missing 'connector' section in {config_path}"
        )

    properties = dict(data["connector"])
    if PASSWORD_KEY in properties:
        properties[PASSWORD_KEY] = _resolve_env_reference(
            PASSWORD_KEY, properties[PASSWORD_KEY]
        )
    return properties


def load_connector_config(config_path: Optional[str] = None) -> SourceConnectorConfig:
    """Load and validate the connector configuration.

    Args:
        config_path: Path to the YAML file. If None, uses connector.example.yaml
            next to this module.

    Returns:
        SourceConnectorConfig: The validated configuration.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.abspath(__file__)), "connector.example.yaml"
        )

    logger.debug(f"[CONFIG] Loading connector configuration from {config_path}")
    return SourceConnectorConfig.from_properties(read_properties(config_path))

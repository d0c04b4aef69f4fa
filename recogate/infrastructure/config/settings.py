"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.recogate/config.yaml), and assembles the immutable
GatewaySettings used to build the recommendation gateway.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from recogate.domain.errors import ConfigurationError
from recogate.domain.models.recommendation import DEFAULT_MAX_LIMIT

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".recogate"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_BACKOFF_S = 1.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0
DEFAULT_REQUEST_TIMEOUT_S = 10.0

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values

    Args:
        config_file: Path to the YAML configuration file (defaults to ~/.recogate/config.yaml).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load or parse YAML config {config_file}: {e}") from e
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 3. Environment Variables (Highest priority) are handled by os.environ in get_config

    _loaded = True
    logger.info("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() reads again."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce(value: str) -> Any:
    """Converts common string representations from the environment."""
    if value.lower() == 'true':
        return True
    elif value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        else:
            return int(value)
    except (ValueError, TypeError):
        return value


def _lookup(tree: Dict[str, Any], key: str) -> Any:
    """Finds a key either stored flat ('retry.max_attempts') or nested in YAML sections."""
    if key in tree:
        return tree[key]
    node: Any = tree
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def get_config(key: str, default: Any = None, coerce: bool = True) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found
        coerce: Convert environment strings to bool/int/float. Pass False for
            values that must stay verbatim, such as keys and URLs.

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper()
    if env_key in os.environ:
        raw = os.environ[env_key]
        return _coerce(raw) if coerce else raw

    value = _lookup(_config, key)
    if value is not None:
        return value

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


# --- Gateway Settings ---

@dataclass(frozen=True)
class GatewaySettings:
    """Everything needed to build a RecommendationGateway and its transport."""

    api_base_url: str
    api_key: str
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_backoff_s: float = DEFAULT_INITIAL_BACKOFF_S
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    max_limit: int = DEFAULT_MAX_LIMIT

    def as_display_dict(self) -> Dict[str, Any]:
        """Settings safe to show to a user (API key masked)."""
        masked = f"{self.api_key[:4]}****" if len(self.api_key) > 8 else "****"
        return {
            "api_base_url": self.api_base_url,
            "api_key": masked,
            "max_attempts": self.max_attempts,
            "initial_backoff_s": self.initial_backoff_s,
            "backoff_multiplier": self.backoff_multiplier,
            "request_timeout_s": self.request_timeout_s,
            "max_limit": self.max_limit,
        }


def _first(env_key: str, yaml_key: str, default: Any = None, coerce: bool = True) -> Any:
    # Checks ENV first, then the YAML section
    value = get_config(env_key, coerce=coerce)
    if value is None:
        value = get_config(yaml_key, default)
    return value


def _as_number(name: str, value: Any, kind: type, minimum: float) -> Any:
    try:
        if isinstance(value, bool):
            raise TypeError("booleans are not numbers")
        number = kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Setting '{name}' must be a {kind.__name__}, got {value!r}") from e
    if kind is int and isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"Setting '{name}' must be an integer, got {value!r}")
    if number < minimum:
        raise ConfigurationError(f"Setting '{name}' must be >= {minimum}, got {number}")
    return number


def load_gateway_settings() -> GatewaySettings:
    """Reads and validates the gateway settings from the loaded configuration.

    Raises:
        ConfigurationError: If the base URL or API key is missing, or a numeric
            setting is out of range.
    """
    if not _loaded:
        load_configuration()

    base_url = _first('RECOGATE_API_BASE_URL', 'api.base_url', coerce=False)
    api_key = _first('RECOGATE_API_KEY', 'api.key', coerce=False)
    if not base_url:
        raise ConfigurationError(
            "Recommendation API base URL not configured (RECOGATE_API_BASE_URL or api.base_url)."
        )
    if not api_key:
        raise ConfigurationError(
            "Recommendation API key not configured (RECOGATE_API_KEY or api.key)."
        )

    settings = GatewaySettings(
        api_base_url=str(base_url),
        api_key=str(api_key),
        max_attempts=_as_number(
            'max_attempts', _first('RECOGATE_MAX_ATTEMPTS', 'retry.max_attempts', DEFAULT_MAX_ATTEMPTS), int, 1),
        initial_backoff_s=_as_number(
            'initial_backoff', _first('RECOGATE_INITIAL_BACKOFF', 'retry.initial_backoff', DEFAULT_INITIAL_BACKOFF_S), float, 0.0),
        backoff_multiplier=_as_number(
            'backoff_multiplier', _first('RECOGATE_BACKOFF_MULTIPLIER', 'retry.backoff_multiplier', DEFAULT_BACKOFF_MULTIPLIER), float, 1.0),
        request_timeout_s=_as_number(
            'request_timeout', _first('RECOGATE_REQUEST_TIMEOUT', 'api.request_timeout', DEFAULT_REQUEST_TIMEOUT_S), float, 0.001),
        max_limit=_as_number(
            'max_limit', _first('RECOGATE_MAX_LIMIT', 'api.max_limit', DEFAULT_MAX_LIMIT), int, 1),
    )
    logger.debug(f"Gateway settings loaded: {settings.as_display_dict()}")
    return settings

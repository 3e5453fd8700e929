"""
Configuration module for batchembed.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Environment variables consulted for the API key, in order
API_KEY_ENV_VARS = ("COHERE_API_KEY", "BATCHEMBED_EMBEDDING_API_KEY")

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section, {})
    return section_defaults.get(key, fallback)


@dataclass
class EmbeddingConfig:
    """Configuration for the embedding provider."""

    api_key: str = field(default_factory=lambda: _get_default("embedding", "api_key", ""))
    api_url: str = field(
        default_factory=lambda: _get_default(
            "embedding", "api_url", "https://api.cohere.com/v1/embed"
        )
    )
    model: str = field(
        default_factory=lambda: _get_default("embedding", "model", "embed-english-light-v3.0")
    )
    batch_size: int = field(default_factory=lambda: _get_default("embedding", "batch_size", 48))
    input_type: str = field(
        default_factory=lambda: _get_default("embedding", "input_type", "search_document")
    )
    backend: str = field(default_factory=lambda: _get_default("embedding", "backend", "http"))
    timeout: float = field(default_factory=lambda: _get_default("embedding", "timeout", 30.0))


@dataclass
class RetrySettings:
    """Retry and batch fallback settings for provider calls."""

    max_retries: int = field(default_factory=lambda: _get_default("retry", "max_retries", 3))
    base_delay: float = field(default_factory=lambda: _get_default("retry", "base_delay", 1.0))
    max_delay: float = field(default_factory=lambda: _get_default("retry", "max_delay", 60.0))
    exponential_base: float = field(
        default_factory=lambda: _get_default("retry", "exponential_base", 2.0)
    )
    enable_batch_fallback: bool = field(
        default_factory=lambda: _get_default("retry", "enable_batch_fallback", True)
    )
    min_batch_size: int = field(
        default_factory=lambda: _get_default("retry", "min_batch_size", 1)
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass
class BatchEmbedConfig:
    """Main configuration class for batchembed."""

    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    retry: RetrySettings = field(default_factory=RetrySettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "BatchEmbedConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            BatchEmbedConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported or the content is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif path.suffix == ".json":
                data = json.loads(content) if content.strip() else {}
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "BatchEmbedConfig":
        """
        Create BatchEmbedConfig from a dictionary.

        Raises:
            ValueError: If the data is not a mapping of known sections and keys
        """
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        config = cls()

        try:
            if "embedding" in data:
                config.embedding = EmbeddingConfig(**data["embedding"])
            if "retry" in data:
                config.retry = RetrySettings(**data["retry"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

        return config

    def apply_env_overrides(self) -> "BatchEmbedConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: BATCHEMBED_<SECTION>_<KEY>
        Examples:
            - BATCHEMBED_EMBEDDING_MODEL
            - BATCHEMBED_EMBEDDING_BATCH_SIZE
            - BATCHEMBED_RETRY_MAX_RETRIES
            - BATCHEMBED_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Embedding config
            "BATCHEMBED_EMBEDDING_API_KEY": ("embedding", "api_key", str),
            "BATCHEMBED_EMBEDDING_API_URL": ("embedding", "api_url", str),
            "BATCHEMBED_EMBEDDING_MODEL": ("embedding", "model", str),
            "BATCHEMBED_EMBEDDING_BATCH_SIZE": ("embedding", "batch_size", int),
            "BATCHEMBED_EMBEDDING_INPUT_TYPE": ("embedding", "input_type", str),
            "BATCHEMBED_EMBEDDING_BACKEND": ("embedding", "backend", str),
            "BATCHEMBED_EMBEDDING_TIMEOUT": ("embedding", "timeout", float),
            # Retry config
            "BATCHEMBED_RETRY_MAX_RETRIES": ("retry", "max_retries", int),
            "BATCHEMBED_RETRY_BASE_DELAY": ("retry", "base_delay", float),
            "BATCHEMBED_RETRY_MAX_DELAY": ("retry", "max_delay", float),
            "BATCHEMBED_RETRY_ENABLE_BATCH_FALLBACK": (
                "retry",
                "enable_batch_fallback",
                _parse_bool,
            ),
            "BATCHEMBED_RETRY_MIN_BATCH_SIZE": ("retry", "min_batch_size", int),
            # Logging config
            "BATCHEMBED_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def resolve_api_key(
    explicit: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Resolve the provider API key once, at the configuration boundary.

    The explicit value wins; otherwise the variables in API_KEY_ENV_VARS
    are checked in order. Returns an empty string when nothing is set so
    that the client constructor can reject it. A key read from a config
    file is only used when this returns an empty string.
    """
    if explicit:
        return explicit

    env = os.environ if environ is None else environ
    for name in API_KEY_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    return ""


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> BatchEmbedConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        BatchEmbedConfig instance
    """
    if config_path:
        config = BatchEmbedConfig.from_file(config_path)
    else:
        config = BatchEmbedConfig()

    if apply_env:
        config.apply_env_overrides()

    return config

"""
Tests for BatchEmbedConfig serialization, environment overrides and
API key resolution.
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from batchembed.core.config import (
    BatchEmbedConfig,
    EmbeddingConfig,
    LoggingConfig,
    RetrySettings,
    load_config,
    resolve_api_key,
)

# Strategies for generating valid configuration values
safe_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S"),
        blacklist_characters="\x00\n\r\t",
    ),
    min_size=1,
    max_size=50,
).filter(lambda s: s.strip() != "")

safe_url = st.from_regex(r"https?://[a-z0-9]+(\.[a-z0-9]+)*(:[0-9]+)?(/[a-z0-9]*)*", fullmatch=True)

log_level = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


@st.composite
def embedding_config_strategy(draw):
    """Generate valid EmbeddingConfig instances."""
    return EmbeddingConfig(
        api_key=draw(safe_text),
        api_url=draw(safe_url),
        model=draw(safe_text),
        batch_size=draw(st.integers(min_value=1, max_value=96)),
        input_type=draw(st.sampled_from(["search_document", "search_query", "classification"])),
        backend=draw(st.sampled_from(["http", "sdk"])),
        timeout=draw(
            st.floats(min_value=0.1, max_value=300.0, allow_nan=False, allow_infinity=False)
        ),
    )


@st.composite
def retry_settings_strategy(draw):
    """Generate valid RetrySettings instances."""
    return RetrySettings(
        max_retries=draw(st.integers(min_value=0, max_value=10)),
        base_delay=draw(st.floats(min_value=0.0, max_value=10.0, allow_nan=False)),
        max_delay=draw(st.floats(min_value=0.0, max_value=120.0, allow_nan=False)),
        exponential_base=draw(st.floats(min_value=1.0, max_value=4.0, allow_nan=False)),
        enable_batch_fallback=draw(st.booleans()),
        min_batch_size=draw(st.integers(min_value=1, max_value=10)),
    )


@st.composite
def batchembed_config_strategy(draw):
    """Generate valid BatchEmbedConfig instances."""
    return BatchEmbedConfig(
        embedding=draw(embedding_config_strategy()),
        retry=draw(retry_settings_strategy()),
        logging=LoggingConfig(level=draw(log_level), format=draw(safe_text)),
    )


@given(config=batchembed_config_strategy())
@settings(max_examples=50)
def test_config_yaml_round_trip(config: BatchEmbedConfig):
    """Saving to YAML and loading back produces an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yaml_path = Path(tmpdir) / "config.yaml"
        config.save(yaml_path)

        loaded_config = BatchEmbedConfig.from_file(yaml_path)

        assert config.to_dict() == loaded_config.to_dict()


@given(config=batchembed_config_strategy())
@settings(max_examples=50)
def test_config_json_round_trip(config: BatchEmbedConfig):
    """Saving to JSON and loading back produces an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        json_path = Path(tmpdir) / "config.json"
        config.save(json_path)

        loaded_config = BatchEmbedConfig.from_file(json_path)

        assert config.to_dict() == loaded_config.to_dict()


def test_defaults_come_from_packaged_yaml():
    config = BatchEmbedConfig()

    assert config.embedding.batch_size == 48
    assert config.embedding.model == "embed-english-light-v3.0"
    assert config.embedding.backend == "http"
    assert config.retry.max_retries == 3
    assert config.logging.level == "INFO"


def test_partial_file_keeps_other_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("embedding:\n  model: embed-multilingual-v3.0\n", encoding="utf-8")

    config = BatchEmbedConfig.from_file(path)

    assert config.embedding.model == "embed-multilingual-v3.0"
    assert config.embedding.batch_size == 48
    assert config.retry.max_retries == 3


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        BatchEmbedConfig.from_file(tmp_path / "absent.yaml")


def test_unsupported_format_raises(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported config file format"):
        BatchEmbedConfig.from_file(path)


@pytest.mark.parametrize(
    "name, content, message",
    [
        ("config.yaml", "embedding:\n  modle: typo\n", "Invalid configuration"),
        ("config.yaml", "embedding: [unclosed\n", "Invalid YAML"),
        ("config.json", '{"embedding": ', "Invalid JSON"),
        ("config.yaml", "- just\n- a list\n", "must be a mapping"),
    ],
)
def test_bad_config_file_raises_value_error(tmp_path, name, content, message):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        BatchEmbedConfig.from_file(path)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BATCHEMBED_EMBEDDING_MODEL", "embed-english-v3.0")
    monkeypatch.setenv("BATCHEMBED_EMBEDDING_BATCH_SIZE", "12")
    monkeypatch.setenv("BATCHEMBED_RETRY_MAX_RETRIES", "5")
    monkeypatch.setenv("BATCHEMBED_RETRY_ENABLE_BATCH_FALLBACK", "off")
    monkeypatch.setenv("BATCHEMBED_LOGGING_LEVEL", "DEBUG")

    config = load_config()

    assert config.embedding.model == "embed-english-v3.0"
    assert config.embedding.batch_size == 12
    assert config.retry.max_retries == 5
    assert config.retry.enable_batch_fallback is False
    assert config.logging.level == "DEBUG"


def test_load_config_without_env(monkeypatch):
    monkeypatch.setenv("BATCHEMBED_EMBEDDING_BATCH_SIZE", "12")

    config = load_config(apply_env=False)

    assert config.embedding.batch_size == 48


class TestResolveApiKey:
    def test_explicit_key_wins(self):
        assert resolve_api_key("explicit", {"COHERE_API_KEY": "env"}) == "explicit"

    def test_cohere_env_var(self):
        assert resolve_api_key(None, {"COHERE_API_KEY": "env"}) == "env"

    def test_cohere_env_var_before_prefixed(self):
        environ = {"COHERE_API_KEY": "first", "BATCHEMBED_EMBEDDING_API_KEY": "second"}
        assert resolve_api_key(None, environ) == "first"

    def test_prefixed_env_var(self):
        assert resolve_api_key(None, {"BATCHEMBED_EMBEDDING_API_KEY": "second"}) == "second"

    def test_nothing_set_returns_empty(self):
        assert resolve_api_key(None, {}) == ""

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("COHERE_API_KEY", "from-process")
        assert resolve_api_key() == "from-process"

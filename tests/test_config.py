"""
Tests for configuration loading, environment overrides and validation.
"""

import json

import pytest

from ingestion.config import ConfigManager, IngestionConfig, get_config
from ingestion.exceptions import ConfigurationError


@pytest.fixture
def manager(tmp_path):
    return ConfigManager(str(tmp_path / "ingestion.json"), env_file=str(tmp_path / ".env"))


class TestConfigManager:
    """Test cases for ConfigManager."""

    def test_defaults(self, manager):
        config = manager.load_config()

        assert config.models.primary_model == "facebook/bart-large-cnn"
        assert config.models.fallback_model == "sshleifer/distilbart-cnn-12-6"
        assert config.models.timeout == 60
        assert config.processing.min_text_length == 100
        assert config.processing.max_upload_bytes == 50 * 1024 * 1024
        assert config.processing.validation_threshold == 0.7
        assert config.processing.default_language == "fr"
        assert config.apis.huggingface_api_key is None
        assert config.debug is False

    def test_environment_overrides(self, manager, monkeypatch):
        monkeypatch.setenv("HUGGINGFACE_API_KEY", "hf_test")
        monkeypatch.setenv("HUGGINGFACE_API_URL", "https://example.test/models")
        monkeypatch.setenv("INGESTION_STORE_DIR", "/tmp/books")
        monkeypatch.setenv("INGESTION_DEBUG", "true")

        config = manager.load_config()

        assert config.apis.huggingface_api_key == "hf_test"
        assert config.models.api_url == "https://example.test/models"
        assert config.paths.store_dir == "/tmp/books"
        assert config.debug is True
        assert config.paths.log_level == "DEBUG"

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("HUGGINGFACE_API_KEY=from_dotenv\n", encoding="utf-8")

        config = ConfigManager(str(tmp_path / "ingestion.json"), env_file=str(tmp_path / ".env")).load_config()

        assert config.apis.huggingface_api_key == "from_dotenv"

    def test_load_from_file(self, tmp_path, manager):
        (tmp_path / "ingestion.json").write_text(json.dumps({
            "processing": {"max_keywords": 12, "parallel_stages": False},
            "paths": {"store_dir": "./books"},
            "debug": True
        }), encoding="utf-8")

        config = manager.load_config()

        assert config.processing.max_keywords == 12
        assert config.processing.parallel_stages is False
        assert config.processing.min_text_length == 100
        assert config.paths.store_dir == "./books"
        assert config.debug is True

    def test_unknown_key(self, tmp_path, manager):
        (tmp_path / "ingestion.json").write_text(json.dumps({"processing": {"chunk_size": 3}}), encoding="utf-8")

        with pytest.raises(ConfigurationError, match="chunk_size"):
            manager.load_config()

    def test_invalid_json(self, tmp_path, manager):
        (tmp_path / "ingestion.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            manager.load_config()

    @pytest.mark.parametrize("section, values", [
        ("processing", {"min_text_length": 0}),
        ("processing", {"segment_target_size": -1}),
        ("processing", {"validation_threshold": 1.5}),
        ("processing", {"max_workers": 0}),
        ("models", {"timeout": 0}),
        ("paths", {"log_level": "LOUD"}),
    ])
    def test_validation(self, tmp_path, manager, section, values):
        (tmp_path / "ingestion.json").write_text(json.dumps({section: values}), encoding="utf-8")

        with pytest.raises(ConfigurationError, match="validation failed"):
            manager.load_config()

    def test_save_and_reload(self, tmp_path, manager):
        config = IngestionConfig()
        config.processing.segment_target_size = 4000
        manager.save_config(config)

        reloaded = ConfigManager(str(tmp_path / "ingestion.json"), env_file=str(tmp_path / ".env")).load_config()

        assert reloaded.processing.segment_target_size == 4000

    def test_save_without_config(self, manager):
        with pytest.raises(ConfigurationError):
            manager.save_config()

    def test_templates(self, tmp_path, manager):
        sample = tmp_path / "sample.json"
        env_template = tmp_path / ".env.template"

        manager.create_sample_config(str(sample))
        manager.create_env_template(str(env_template))

        assert json.loads(sample.read_text(encoding="utf-8"))["processing"]["max_keywords"] == 8
        assert "HUGGINGFACE_API_KEY" in env_template.read_text(encoding="utf-8")

    def test_get_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert isinstance(get_config(), IngestionConfig)

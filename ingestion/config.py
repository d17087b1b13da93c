"""
Configuration Management

Handles settings for the document ingestion pipeline:
- Environment variables and .env files
- JSON configuration files
- Validation of processing limits
- Hosted summarization model selection
"""

import os
import json
import logging
from typing import Dict, Any, Optional, Type, TypeVar
from pathlib import Path
from dataclasses import dataclass, asdict, field, fields

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .language import DEFAULT_LANGUAGE
from .model_client import DEFAULT_API_URL, DEFAULT_TIMEOUT
from .summarizer import FALLBACK_MODEL, MAX_MODEL_INPUT_CHARS, PRIMARY_MODEL, VALIDATION_THRESHOLD

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 50 * 1024 * 1024
MIN_TEXT_LENGTH = 100
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

T = TypeVar("T")


@dataclass
class ModelConfig:
    """Hosted summarization models."""
    primary_model: str = PRIMARY_MODEL
    fallback_model: str = FALLBACK_MODEL
    api_url: str = DEFAULT_API_URL
    timeout: int = DEFAULT_TIMEOUT


@dataclass
class ProcessingConfig:
    """Configuration for document processing."""
    # Upload limits
    min_text_length: int = MIN_TEXT_LENGTH
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    # Structuring
    segment_target_size: int = 2500
    max_keywords: int = 8
    default_language: str = DEFAULT_LANGUAGE
    max_integrity_loss: float = 5.0

    # Summarization
    max_model_input_chars: int = MAX_MODEL_INPUT_CHARS
    validation_threshold: float = VALIDATION_THRESHOLD

    # Performance
    parallel_stages: bool = True
    max_workers: int = 4


@dataclass
class PathConfig:
    """Configuration for file paths and logging."""
    store_dir: str = "./data/documents"
    log_file: Optional[str] = None
    log_level: str = "INFO"


@dataclass
class APIConfig:
    """API credentials."""
    huggingface_api_key: Optional[str] = None


@dataclass
class IngestionConfig:
    """Complete configuration for the ingestion pipeline."""
    models: ModelConfig = field(default_factory=ModelConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    apis: APIConfig = field(default_factory=APIConfig)

    debug: bool = False


class ConfigManager:
    """Manages configuration loading, validation, and saving."""

    def __init__(self, config_path: Optional[str] = None, env_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file
            env_file: Path to a .env file
        """
        self.config_path = Path(config_path) if config_path else Path("ingestion.json")
        self.env_file = Path(env_file) if env_file else Path(".env")
        self.config: Optional[IngestionConfig] = None

        self._load_env_vars()

    def _load_env_vars(self):
        """Load environment variables from .env file."""
        if self.env_file.exists():
            load_dotenv(self.env_file)
            logger.info(f"Loaded environment variables from {self.env_file}")

    def load_config(self) -> IngestionConfig:
        """Load configuration from file and environment."""
        if self.config_path.exists():
            logger.info(f"Loading configuration from {self.config_path}")
            config = self._load_from_file()
        else:
            logger.info("Creating default configuration")
            config = IngestionConfig()

        config = self._apply_env_overrides(config)
        self._validate_config(config)

        self.config = config
        return config

    def _load_from_file(self) -> IngestionConfig:
        """Load configuration from JSON file."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise ConfigurationError(f"Cannot read {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.config_path} must contain a JSON object")

        return self._dict_to_config(data)

    def _dict_to_config(self, data: Dict[str, Any]) -> IngestionConfig:
        """Convert dictionary to configuration object."""
        return IngestionConfig(
            models=self._section(ModelConfig, data.get('models')),
            processing=self._section(ProcessingConfig, data.get('processing')),
            paths=self._section(PathConfig, data.get('paths')),
            apis=self._section(APIConfig, data.get('apis')),
            debug=bool(data.get('debug', False))
        )

    @staticmethod
    def _section(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")
        return cls(**data)

    def _apply_env_overrides(self, config: IngestionConfig) -> IngestionConfig:
        """Apply environment variable overrides."""
        if os.getenv('HUGGINGFACE_API_KEY'):
            config.apis.huggingface_api_key = os.getenv('HUGGINGFACE_API_KEY')

        if os.getenv('HUGGINGFACE_API_URL'):
            config.models.api_url = os.getenv('HUGGINGFACE_API_URL')

        if os.getenv('INGESTION_STORE_DIR'):
            config.paths.store_dir = os.getenv('INGESTION_STORE_DIR')

        if os.getenv('INGESTION_DEBUG'):
            config.debug = os.getenv('INGESTION_DEBUG').lower() == 'true'
            if config.debug:
                config.paths.log_level = "DEBUG"

        return config

    def _validate_config(self, config: IngestionConfig):
        """Validate configuration settings."""
        errors = []
        processing = config.processing

        if processing.min_text_length <= 0:
            errors.append("min_text_length must be positive")

        if processing.max_upload_bytes <= 0:
            errors.append("max_upload_bytes must be positive")

        if processing.segment_target_size <= 0:
            errors.append("segment_target_size must be positive")

        if processing.max_keywords < 0:
            errors.append("max_keywords must not be negative")

        if processing.max_model_input_chars <= 0:
            errors.append("max_model_input_chars must be positive")

        if not 0 < processing.validation_threshold <= 1:
            errors.append("validation_threshold must be in (0, 1]")

        if processing.max_workers < 1:
            errors.append("max_workers must be at least 1")

        if config.models.timeout <= 0:
            errors.append("timeout must be positive")

        if config.paths.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        if not config.apis.huggingface_api_key:
            logger.warning("No HUGGINGFACE_API_KEY provided, summaries will be extractive")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        logger.info("Configuration validation passed")

    def save_config(self, config: Optional[IngestionConfig] = None):
        """Save configuration to file."""
        if config is None:
            config = self.config

        if config is None:
            raise ConfigurationError("No configuration to save")

        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2)

        logger.info(f"Configuration saved to {self.config_path}")

    def create_sample_config(self, output_path: Optional[str] = None):
        """Create a sample configuration file."""
        if output_path is None:
            output_path = "ingestion.sample.json"

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(IngestionConfig()), f, indent=2)

        logger.info(f"Sample configuration created at {output_path}")

    def create_env_template(self, output_path: Optional[str] = None):
        """Create a .env template file."""
        if output_path is None:
            output_path = ".env.template"

        template = """# Document Ingestion Environment Variables

# Hosted summarization (summaries are extractive without a key)
HUGGINGFACE_API_KEY=your_huggingface_api_key_here
HUGGINGFACE_API_URL=https://router.huggingface.co/hf-inference/models

# Paths
INGESTION_STORE_DIR=./data/documents

# Settings
INGESTION_DEBUG=false
"""

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template)

        logger.info(f"Environment template created at {output_path}")


def get_config(config_path: Optional[str] = None) -> IngestionConfig:
    """
    Load and validate the configuration.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Loaded configuration
    """
    manager = ConfigManager(config_path)
    return manager.load_config()

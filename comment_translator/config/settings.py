"""
Centralized Configuration for Comment Translator
================================================
All configuration values in one place, configurable via environment variables.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    elif val in ("false", "0", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    try:
        return int(os.environ.get(key, default))
    except (ValueError, TypeError):
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.environ.get(key, default))
    except (ValueError, TypeError):
        return default


def get_app_dir() -> str:
    """Directory holding logs and the dictionary database."""
    override = os.environ.get('COMMENT_TRANSLATOR_APP_DIR')
    if override:
        return override
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@dataclass
class ServerConfig:
    """Flask server configuration."""
    host: str = field(default_factory=lambda: os.environ.get("COMMENT_TRANSLATOR_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _get_int_env("COMMENT_TRANSLATOR_PORT", 5002))
    debug: bool = field(default_factory=lambda: _get_bool_env("COMMENT_TRANSLATOR_DEBUG", False))
    secret_key: str = field(default_factory=lambda: os.environ.get("SECRET_KEY", "dev-key-change-in-production"))
    max_content_mb: int = field(default_factory=lambda: _get_int_env("MAX_CONTENT_MB", 2))

    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:5002",
        "http://127.0.0.1:5002"
    ])


@dataclass
class TranslatorConfig:
    """Chat-completions endpoint used for batch translation."""
    base_url: str = field(default_factory=lambda: os.environ.get("TRANSLATOR_BASE_URL", "https://api.openai.com/v1"))
    api_key: str = field(default_factory=lambda: os.environ.get("OPENAI_API_KEY", ""))
    model: str = field(default_factory=lambda: os.environ.get("TRANSLATOR_MODEL", "gpt-4o-mini"))

    # Timeouts
    connect_timeout: int = field(default_factory=lambda: _get_int_env("TRANSLATOR_CONNECT_TIMEOUT", 10))
    read_timeout: int = field(default_factory=lambda: _get_int_env("TRANSLATOR_READ_TIMEOUT", 60))
    health_check_timeout: int = field(default_factory=lambda: _get_int_env("TRANSLATOR_HEALTH_TIMEOUT", 5))

    temperature: float = field(default_factory=lambda: _get_float_env("TRANSLATOR_TEMPERATURE", 0.2))


@dataclass
class TranslationConfig:
    """Phrase sampling and batch settings."""
    source_language: str = field(default_factory=lambda: os.environ.get("SOURCE_LANGUAGE", "en"))
    default_target_language: str = field(default_factory=lambda: os.environ.get("TARGET_LANGUAGE", "es"))

    # Words per sampled phrase
    phrase_word_count: int = field(default_factory=lambda: _get_int_env("PHRASE_WORD_COUNT", 2))

    # A retry always re-sends the whole batch
    max_retries: int = field(default_factory=lambda: _get_int_env("MAX_RETRIES", 1))
    retry_delay: float = field(default_factory=lambda: _get_float_env("RETRY_DELAY", 1.0))

    debounce_seconds: float = field(default_factory=lambda: _get_float_env("DEBOUNCE_SECONDS", 0.5))


@dataclass
class DictionaryConfig:
    """Persisted phrase dictionary configuration."""
    enabled: bool = field(default_factory=lambda: _get_bool_env("DICTIONARY_ENABLED", True))


@dataclass
class LoggingConfig:
    """Logging configuration."""
    verbose_debug: bool = field(default_factory=lambda: _get_bool_env("VERBOSE_DEBUG", True))
    log_buffer_size: int = field(default_factory=lambda: _get_int_env("LOG_BUFFER_SIZE", 500))
    log_file_max_bytes: int = field(default_factory=lambda: _get_int_env("LOG_FILE_MAX_BYTES", 5 * 1024 * 1024))
    log_file_backup_count: int = field(default_factory=lambda: _get_int_env("LOG_FILE_BACKUP_COUNT", 3))
    strip_ansi_in_files: bool = field(default_factory=lambda: _get_bool_env("STRIP_ANSI_LOGS", True))


@dataclass
class SecurityConfig:
    """Security configuration."""
    api_key: str = field(default_factory=lambda: os.environ.get("API_KEY", ""))
    rate_limit_per_minute: int = field(default_factory=lambda: _get_int_env("RATE_LIMIT_PER_MINUTE", 60))
    db_timeout: int = field(default_factory=lambda: _get_int_env("DB_TIMEOUT", 30))


@dataclass
class PathConfig:
    """Path configuration."""
    app_dir: str = field(default_factory=get_app_dir)

    @property
    def log_folder(self) -> Path:
        return Path(self.app_dir) / 'logs'

    @property
    def dictionary_db_path(self) -> str:
        return os.environ.get(
            'DICTIONARY_DB_PATH',
            os.path.join(self.app_dir, 'dictionary.db')
        )


@dataclass
class Config:
    """Main application configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    paths: PathConfig = field(default_factory=PathConfig)

    def __post_init__(self):
        """Create necessary directories after initialization."""
        os.makedirs(self.paths.log_folder, exist_ok=True)
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if self.translation.phrase_word_count < 1:
            raise ValueError("phrase_word_count must be at least 1")
        if self.translation.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.translator.temperature < 0 or self.translator.temperature > 2:
            raise ValueError("temperature must be between 0 and 2")


# Global configuration instance
config = Config()

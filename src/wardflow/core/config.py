"""
Configuration management for WardFlow.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import List, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    db_name: str = Field(default="wardflow", description="MongoDB database name")
    server_selection_timeout_ms: int = Field(
        default=5000, description="Fail fast when MongoDB is unreachable"
    )

    @validator("uri")
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate MongoDB URI format."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v


class OpenAISettings(BaseSettings):
    """OpenAI API configuration settings."""

    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    api_key: str = Field(default="", description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Default OpenAI model")
    timeout_seconds: float = Field(
        default=50.0, description="Client-side timeout for a single AI request"
    )

    # Per call-site generation parameters
    analysis_temperature: float = Field(default=0.2)
    analysis_max_tokens: int = Field(default=512)
    chat_temperature: float = Field(default=0.3)
    chat_max_tokens: int = Field(default=1024)
    assist_temperature: float = Field(default=0.3)
    assist_max_tokens: int = Field(default=2000)

    @validator("api_key")
    def validate_api_key(cls, v: str) -> str:
        """Validate OpenAI API key format."""
        if v and not v.startswith("sk-"):
            raise ValueError("OpenAI API key must start with 'sk-'")
        return v


class RecordStoreSettings(BaseSettings):
    """Spreadsheet-style record store (Airtable API) settings."""

    model_config = SettingsConfigDict(env_prefix="AIRTABLE_")

    api_url: str = Field(
        default="https://api.airtable.com/v0", description="Record store API root"
    )
    base_id: str = Field(default="", description="Base identifier")
    token: str = Field(default="", description="Personal access token")
    request_timeout_seconds: float = Field(default=20.0)
    max_records: int = Field(default=1000, description="Page cap for listings")
    search_max_records: int = Field(default=10, description="Page cap for searches")

    @property
    def base_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/{self.base_id}"


class QuotaSettings(BaseSettings):
    """Daily AI call budget."""

    model_config = SettingsConfigDict(env_prefix="AI_QUOTA_")

    daily_limit: int = Field(default=1500, description="AI calls allowed per window")
    reset_hours: int = Field(default=24, description="Reset window length in hours")

    @validator("daily_limit", "reset_hours")
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quota values must be positive")
        return v


class DiagnosisExtractionSettings(BaseSettings):
    """Keyword lists driving diagnosis extraction from AI text."""

    model_config = SettingsConfigDict(env_prefix="DIAGNOSIS_EXTRACTION_")

    section_keywords: List[str] = Field(
        default=[
            "POSSIBLE DIAGNOSES",
            "DIAGNOSIS",
            "LIKELY CONDITION",
            "MOST PROBABLE",
            "PRIMARY DIAGNOSIS",
            "DIFFERENTIAL DIAGNOSIS",
            "POTENTIAL CONDITIONS",
        ]
    )
    terminator_keywords: List[str] = Field(
        default=["---", "RECOMMENDED", "MANAGEMENT", "TREATMENT", "TESTS"]
    )
    stop_words: List[str] = Field(
        default=[
            "section",
            "assessment",
            "analysis",
            "based on",
            "symptoms",
            "patient",
        ]
    )
    medical_signals: List[str] = Field(
        default=[
            "syndrome",
            "disease",
            "infection",
            "disorder",
            "condition",
            "itis",
            "osis",
            "pathy",
        ]
    )
    max_labels: int = Field(default=10, description="Cap on extracted labels")


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    allowed_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    allowed_headers: List[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )
    allow_credentials: bool = Field(
        default=True, description="Allow credentials in CORS"
    )

    @validator("allowed_origins", pre=True)
    def parse_allowed_origins(cls, v):
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string format
            if v.startswith("[") and v.endswith("]"):
                import json

                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    return [v.strip()]
            return [v.strip()]
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")
    file_path: Optional[str] = Field(default=None, description="Log file path")

    @validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="WardFlow", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    record_store: RecordStoreSettings = Field(default_factory=RecordStoreSettings)
    quota: QuotaSettings = Field(default_factory=QuotaSettings)
    diagnosis_extraction: DiagnosisExtractionSettings = Field(
        default_factory=DiagnosisExtractionSettings
    )
    cors: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Override sub-settings with environment variables
        self.database = DatabaseSettings()
        self.openai = OpenAISettings()
        self.record_store = RecordStoreSettings()
        self.quota = QuotaSettings()
        self.diagnosis_extraction = DiagnosisExtractionSettings()
        self.cors = CORSSettings()
        self.logging = LoggingSettings()

    @validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @validator("port")
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance."""
    return settings

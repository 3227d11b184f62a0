"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=7789, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # MongoDB Configuration
    mongo_uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection string")
    mongo_database: str = Field(default="bf", description="Database holding conversations and projects")
    conversations_collection: str = Field(default="conversations", description="Conversations collection name")
    projects_collection: str = Field(default="projects", description="Projects collection name")
    mongo_timeout_ms: int = Field(default=5000, description="Server selection and connect timeout in milliseconds")
    allow_disk_use: bool = Field(default=True, description="Let aggregations spill to disk")

    # Query Configuration
    default_env: str = Field(default="development", description="Environment that also matches conversations without env")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: str = Field(default="./logs/convquery.log", description="Log file path")


# Global settings instance
settings = Settings()

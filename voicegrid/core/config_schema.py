"""Configuration schema validation using Pydantic."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: str | None = "runtime/voicegrid.log"
    max_size_mb: float = Field(default=10, gt=0)
    backup_count: int = Field(default=3, ge=0)
    structured: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class RenderConfig(BaseModel):
    """Window configuration."""

    resolution: list[int] = Field(default=[1280, 520], min_length=2, max_length=2)
    fullscreen: bool = False
    display: int = 0
    fps: int = Field(default=30, gt=0)

    @field_validator("resolution")
    @classmethod
    def validate_resolution(cls, v):
        """Validate resolution is positive."""
        if v[0] <= 0 or v[1] <= 0:
            raise ValueError("Resolution dimensions must be positive")
        return v


class VoiceConfig(BaseModel):
    """Speech source configuration."""

    source: Literal["mic", "console"] = "mic"
    language: str = "en-US"
    ignored_errors: list[str] = Field(default_factory=lambda: ["no-speech", "aborted"])


class WhisperConfig(BaseModel):
    """whisper.cpp server configuration."""

    server_url: str = "http://127.0.0.1:9001"
    timeout: float = Field(default=5.0, gt=0)
    retries: int = Field(default=2, ge=1)
    retry_delay: float = Field(default=0.25, ge=0)
    retry_backoff: float = Field(default=2.0, ge=1)


class MicConfig(BaseModel):
    """Microphone capture and segmentation configuration."""

    sample_rate: Literal[8000, 16000, 32000, 48000] = 16000
    frame_duration_ms: Literal[10, 20, 30] = 30
    aggressiveness: int = Field(default=2, ge=0, le=3)
    tail_ms: int = Field(default=700, gt=0)
    min_segment_ms: int = Field(default=250, ge=0)
    max_segment_ms: int = Field(default=8000, gt=0)
    device_index: int | None = None


class FeedbackConfig(BaseModel):
    """User feedback timing configuration (seconds)."""

    message_duration: float = Field(default=2.5, gt=0)
    flash_duration: float = Field(default=0.4, gt=0)


class ColorsConfig(BaseModel):
    """Colors configuration."""

    primary: list[int] | str = [255, 20, 147]
    secondary: list[int] | str = [255, 255, 255]
    background: list[int] | str = [0, 0, 0]
    dim: list[int] | str = "#2C405B"
    on: list[int] | str = "#3FB950"
    error: list[int] | str = "#F85149"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    model_config = ConfigDict(extra="allow")

    title: str = "Voice Data Grid"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    voice: VoiceConfig = Field(default_factory=VoiceConfig)
    whisper: WhisperConfig = Field(default_factory=WhisperConfig)
    mic: MicConfig = Field(default_factory=MicConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    colors: ColorsConfig = Field(default_factory=ColorsConfig)


def validate_config(config_dict: dict[str, Any]) -> AppConfig:
    """Validate configuration dictionary.

    Args:
        config_dict: Raw configuration dictionary from YAML

    Returns:
        Validated AppConfig object

    Raises:
        ValidationError: If configuration is invalid
    """
    return AppConfig(**config_dict)


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    """Convert AppConfig back to dictionary.

    Args:
        config: Validated config

    Returns:
        Plain dictionary with defaults filled in
    """
    return config.model_dump()


def default_config() -> dict[str, Any]:
    """Get the default configuration as a dictionary."""
    return config_to_dict(AppConfig())

"""
Core configuration module.
Loads parsing defaults from environment variables using Pydantic Settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Parsing defaults loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EVENTPARSE_",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Input decoding
    default_encoding: str = "utf-8"
    decode_errors: str = "replace"  # "strict" makes undecodable input fatal
    
    # Time zone used when a profile does not capture an offset
    default_zone: str = "UTC"
    
    # Default for temporal fields a profile does not capture:
    # "epoch", "today", "now" or any parseable date
    temporal_anchor: str = "epoch"
    
    # Profile used when none is selected
    default_profile_id: str = "BUILTIN_ISO"
    
    # Progress counter granularity, in characters
    progress_step_chars: int = 10240
    
    # Longest excerpt of an offending line carried by abort errors
    abort_excerpt_max_length: int = 256
    
    # Logging
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

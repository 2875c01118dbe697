"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from TIPSET_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TIPSET_",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Simulated annealing
    max_iterations: int = 1000
    initial_temperature: float = 1.0
    cooling_rate: float = 0.995
    seed: int | None = None

    # Row estimator
    integration_steps: int = 1000
    integration_limit: float = 6.0
    integrate: bool = True  # False evaluates the t-independent integrand directly
    degenerate_policy: str = "raise"  # "raise" or "zero"

    # Round data provider
    api_base_url: str = "https://api.spela.svenskaspel.se/draw/1"
    http_timeout: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()

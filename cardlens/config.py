from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "cardlens"
    debug: bool = False

    # Scryfall asks every client to identify itself and to accept JSON
    scryfall_base_url: str = "https://api.scryfall.com"
    scryfall_user_agent: str = "cardlens/1.0"
    scryfall_timeout: float = 30.0

    anthropic_api_key: str = ""
    vision_model: str = "claude-sonnet-4-20250514"
    vision_max_tokens: int = 1024


settings = Settings()


# =============================================================================
# DETECTION THRESHOLDS
# =============================================================================

# Guesses strictly below this are flagged as low confidence.
# A guess at exactly this value is NOT low confidence.
LOW_CONFIDENCE_THRESHOLD = 0.7

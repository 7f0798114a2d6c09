from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "PokeBinder"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/pokebinder"

    # Static binder snapshots are served as {base_url}/static-binders/{slug}.json
    static_binders_base_url: str = "http://localhost:5173"
    static_binders_dir: str = "public/static-binders"

    max_cards_per_binder: int = 500

    card_additions_per_hour: int = 100
    binder_creations_per_day: int = 10
    binder_exports_per_day: int = 5


settings = Settings()


# =============================================================================
# POSITION LIMITS
# =============================================================================

# Highest global slot index a card may be placed at
MAX_CARD_POSITION = 10_000

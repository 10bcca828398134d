from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Storefront"
    debug: bool = False

    backend_url: str = "https://qkart-frontend-yas.herokuapp.com/api/v1"

    request_timeout: float = 30.0

    # Quiet period before a search keystroke burst turns into a request
    search_debounce_seconds: float = 0.5


settings = Settings()

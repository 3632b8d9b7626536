from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Session
    SESSION_SECRET_KEY: str
    SESSION_MAX_AGE_DAYS: int = 7

    # Catalog API connection
    CATALOG_API_BASE_URL: str
    CATALOG_TIMEOUT_SECONDS: float = 30.0

    # Shop Configuration
    SHOP_NAME: str = "ArtisanMarket"
    CART_SESSION_KEY: str = "cart"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

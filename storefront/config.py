from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BASE_DIR / ".env", env_file_encoding="utf-8")

    GEMINI_API_KEY: str = ""                 # server-side only, never sent to shoppers
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-3-flash-preview"
    GEMINI_TIMEOUT: float = 30.0

    DELIVERY_CHARGE: float = 150.0
    COUPON_CODE: str = "4EVERYOUNG"
    COUPON_RATE: float = 0.05
    CURRENCY_SYMBOL: str = "৳"

    ASSISTANT_NAME: str = "Zephyra"
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    IMAGE_SEARCH_RESET_DELAY: float = 0.3

    ALLOWED_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()

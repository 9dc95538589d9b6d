# estately/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    WEBHOOK_BASE_URL: str = "https://n8n-7k47.onrender.com"
    WEBHOOK_TIMEOUT: float = 20.0

    # webhook paths, relative to WEBHOOK_BASE_URL
    SIGNUP_PATH: str = "/webhook/signup"
    VERIFY_EMAIL_PATH: str = "/webhook/verify-email"
    LOGIN_PATH: str = "/webhook/login"
    FORGOT_PASSWORD_PATH: str = "/webhook-test/forgot-password"
    VERIFY_RESET_CODE_PATH: str = "/webhook-test/verify-reset-code"
    RESET_PASSWORD_PATH: str = "/webhook-test/reset-password"
    ADD_BUYER_PATH: str = "/webhook-test/add_user"
    ADD_SELLER_PATH: str = "/webhook-test/add_seller"
    EDIT_LISTING_PATH: str = "/webhook-test/card_edit"
    GET_SELLERS_PATH: str = "/webhook-test/get_seller"
    GET_BUYERS_PATH: str = "/webhook-test/get_buyer"
    CHECK_PRICE_PATH: str = "/webhook-test/Check_Price"

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    MAX_RECOMMENDED_AGENTS: int = 3

    TELEGRAM_BOT_TOKEN: Optional[str] = None
    TELEGRAM_BOT_URL: str = "http://t.me/Dastgeerbot"

    SESSION_TTL_HOURS: int = 24
    SESSION_SWEEP_MINUTES: int = 15

    MAX_IMAGE_BYTES: int = Field(default=5 * 1024 * 1024)

    LOG_LEVEL: str = "INFO"

    WEB_HOST: str = "0.0.0.0"
    WEB_PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

settings = Settings()

"""Configuration management using Pydantic Settings"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables (VINTI4_*)"""

    model_config = SettingsConfigDict(
        env_prefix="VINTI4_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Merchant credentials
    pos_id: str = ""
    pos_auth_code: SecretStr = SecretStr("")

    # Gateway
    endpoint: str = "https://mc.vinti4net.cv/BizMPIOnUs/CardPayment"
    currency: str = "132"  # Cape Verde escudo
    language: str = "pt"
    response_url: str = "http://localhost:8000/v1/callbacks/payment"

    # Service
    service_name: str = "vinti4-gateway"
    log_level: str = "INFO"


settings = Settings()

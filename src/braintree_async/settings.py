from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    braintree_environment: str = "sandbox"
    braintree_merchant_id: str | None = None
    braintree_public_key: str | None = None
    braintree_private_key: str | None = None

    model_config = SettingsConfigDict(
        env_file=(
            Path("~/.braintree/env").expanduser(),
            ".env",
        ),
        extra="ignore",
    )


SETTINGS = Settings()
